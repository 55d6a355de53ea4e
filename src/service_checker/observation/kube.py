"""Kubernetes deployment health, read through the official client."""

from __future__ import annotations

import logging

from kubernetes import client, config
from kubernetes.client.rest import ApiException

from service_checker.observation.models import CheckResult

logger = logging.getLogger(__name__)


def load_apps_api(kubeconfig: str | None = None, context: str | None = None) -> client.AppsV1Api:
    """
    Build an Apps API client. An explicit kubeconfig or context always wins;
    otherwise in-cluster credentials are tried before the default kubeconfig.
    """
    if kubeconfig or context:
        logger.debug("Using kubeconfig %s (context=%s)", kubeconfig or "<default>", context or "<current>")
        return client.AppsV1Api(config.new_client_from_config(config_file=kubeconfig, context=context))

    cfg = client.Configuration()
    try:
        config.load_incluster_config(client_configuration=cfg)
    except config.ConfigException:
        logger.debug("No in-cluster credentials; falling back to the default kubeconfig")
        return client.AppsV1Api(config.new_client_from_config())
    logger.debug("Using in-cluster service account")
    return client.AppsV1Api(client.ApiClient(cfg))


class DeploymentProbe:
    """
    Healthy once the latest rollout has finished: the controller has observed the
    current generation and every desired replica is both updated and ready.
    """

    def __init__(self, name: str, namespace: str, apps: client.AppsV1Api) -> None:
        self.name = name
        self.namespace = namespace
        self._apps = apps

    @property
    def target(self) -> str:
        return f"deployment/{self.name}"

    def __call__(self) -> CheckResult:
        return self.check()

    def check(self) -> CheckResult:
        try:
            dep = self._apps.read_namespaced_deployment_status(name=self.name, namespace=self.namespace)
        except ApiException as e:
            logger.warning("Failed to read %s in %s: %s", self.target, self.namespace, e.reason)
            return CheckResult(name=self.target, healthy=False, detail=f"API error: {e.reason}")

        # Kubernetes defaults spec.replicas to 1
        desired = dep.spec.replicas if dep.spec and dep.spec.replicas is not None else 1
        status = dep.status
        ready = (status.ready_replicas or 0) if status else 0
        updated = (status.updated_replicas or 0) if status else 0
        generation = (dep.metadata.generation or 0) if dep.metadata else 0
        observed = (status.observed_generation or 0) if status else 0

        detail = f"ready={ready}/{desired}, updated={updated}/{desired}"
        if observed < generation:
            return CheckResult(
                name=self.target,
                healthy=False,
                detail=f"rollout pending (observed generation {observed} < {generation}); {detail}",
            )
        return CheckResult(
            name=self.target,
            healthy=ready >= desired and updated >= desired,
            detail=detail,
        )
