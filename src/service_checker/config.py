"""Configuration and environment for the service checker."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from service_checker.remediation.remediator import RemediationPolicy


class Settings(BaseSettings):
    """Checker settings loaded from environment and .env."""

    model_config = SettingsConfigDict(
        env_prefix="SERVICE_CHECKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Services
    action: Literal["start", "restart", "none"] = Field(
        default="none",
        description="Action to perform if a service is not running",
    )
    init_system: Literal["auto", "systemd", "sysvinit", "upstart"] = Field(
        default="auto",
        description="Init system to use; auto-detected if 'auto'",
    )
    command_timeout: float = Field(
        default=30.0,
        gt=0.0,
        description="Timeout in seconds for each systemctl/service/initctl call",
    )

    # Kubernetes
    deployment_action: Literal["rollout-restart", "none"] = Field(
        default="none",
        description="Action to perform if a deployment is not fully ready",
    )
    namespace: str = Field(default="default", description="Namespace for deployment targets")
    kubeconfig: Path | None = Field(
        default=None,
        description="Path to kubeconfig; uses KUBECONFIG env or default location if unset",
    )
    context: str | None = Field(default=None, description="Kubernetes context to use")

    # Remediation behavior
    wait_seconds: float = Field(
        default=5.0,
        ge=0.0,
        description="Cooldown after each action before re-checking",
    )
    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Max remediation attempts per target before giving up",
    )

    def remediation_policy(self) -> RemediationPolicy:
        return RemediationPolicy(max_attempts=self.max_attempts, cooldown_seconds=self.wait_seconds)


def get_settings() -> Settings:
    """Return validated settings instance."""
    return Settings()
