"""Tests for settings loading and validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from service_checker.config import Settings, get_settings


class TestSettings:
    def test_defaults(self) -> None:
        s = Settings(_env_file=None)
        assert s.action == "none"
        assert s.deployment_action == "none"
        assert s.wait_seconds == 5.0
        assert s.max_attempts == 3
        assert s.init_system == "auto"
        assert s.namespace == "default"
        assert s.kubeconfig is None

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SERVICE_CHECKER_ACTION", "restart")
        monkeypatch.setenv("SERVICE_CHECKER_MAX_ATTEMPTS", "5")
        monkeypatch.setenv("SERVICE_CHECKER_WAIT_SECONDS", "0.5")
        s = get_settings()
        assert s.action == "restart"
        assert s.max_attempts == 5
        assert s.wait_seconds == 0.5

    @pytest.mark.parametrize(
        "field,value",
        [
            ("max_attempts", 0),
            ("max_attempts", 11),
            ("wait_seconds", -1),
            ("action", "reboot"),
            ("init_system", "launchd"),
            ("command_timeout", 0),
        ],
    )
    def test_rejects_invalid(self, field: str, value) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: value})

    def test_remediation_policy(self) -> None:
        policy = Settings(_env_file=None, max_attempts=4, wait_seconds=1.5).remediation_policy()
        assert policy.max_attempts == 4
        assert policy.cooldown_seconds == 1.5
