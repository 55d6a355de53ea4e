"""Tests for the Kubernetes deployment probe."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from kubernetes.client.rest import ApiException

from service_checker.observation.kube import DeploymentProbe, load_apps_api


def _deployment(
    desired: int | None,
    ready: int | None,
    updated: int | None = None,
    generation: int = 1,
    observed: int = 1,
) -> SimpleNamespace:
    return SimpleNamespace(
        metadata=SimpleNamespace(generation=generation),
        spec=SimpleNamespace(replicas=desired),
        status=SimpleNamespace(
            ready_replicas=ready,
            updated_replicas=ready if updated is None else updated,
            observed_generation=observed,
        ),
    )


def _probe(dep: SimpleNamespace) -> tuple[DeploymentProbe, MagicMock]:
    apps = MagicMock()
    apps.read_namespaced_deployment_status.return_value = dep
    return DeploymentProbe("web", "prod", apps), apps


class TestDeploymentProbe:
    def test_all_replicas_ready(self) -> None:
        probe, apps = _probe(_deployment(3, 3))
        result = probe()
        assert result.healthy
        assert result.name == "deployment/web"
        assert result.detail == "ready=3/3, updated=3/3"
        apps.read_namespaced_deployment_status.assert_called_once_with(name="web", namespace="prod")

    def test_missing_ready_replicas_is_unhealthy(self) -> None:
        probe, _ = _probe(_deployment(2, None))
        result = probe.check()
        assert not result.healthy
        assert result.detail == "ready=0/2, updated=0/2"

    def test_scaled_to_zero_is_healthy(self) -> None:
        probe, _ = _probe(_deployment(0, None))
        assert probe.check().healthy

    def test_old_replicas_still_serving_is_unhealthy(self) -> None:
        probe, _ = _probe(_deployment(3, 3, updated=1))
        result = probe.check()
        assert not result.healthy
        assert "updated=1/3" in result.detail

    def test_unobserved_generation_is_unhealthy(self) -> None:
        probe, _ = _probe(_deployment(2, 2, generation=5, observed=4))
        result = probe.check()
        assert not result.healthy
        assert "rollout pending" in result.detail

    def test_api_error_is_unhealthy(self) -> None:
        apps = MagicMock()
        apps.read_namespaced_deployment_status.side_effect = ApiException(status=404, reason="Not Found")
        result = DeploymentProbe("web", "prod", apps).check()
        assert not result.healthy
        assert "Not Found" in result.detail


class TestLoadAppsApi:
    @patch("service_checker.observation.kube.config")
    def test_explicit_kubeconfig_skips_in_cluster(self, mock_config) -> None:
        load_apps_api("/tmp/kubeconfig", "staging")
        mock_config.new_client_from_config.assert_called_once_with(
            config_file="/tmp/kubeconfig", context="staging"
        )
        mock_config.load_incluster_config.assert_not_called()

    @patch("service_checker.observation.kube.config")
    def test_falls_back_to_default_kubeconfig(self, mock_config) -> None:
        mock_config.ConfigException = Exception
        mock_config.load_incluster_config.side_effect = Exception("not in cluster")
        load_apps_api()
        mock_config.new_client_from_config.assert_called_once_with()

    @patch("service_checker.observation.kube.config")
    def test_in_cluster(self, mock_config) -> None:
        mock_config.ConfigException = Exception
        load_apps_api()
        mock_config.load_incluster_config.assert_called_once()
        mock_config.new_client_from_config.assert_not_called()
