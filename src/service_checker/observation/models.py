"""Structured models for health observations."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class InitSystem(str, Enum):
    """Init systems the service probe knows how to query."""

    SYSTEMD = "systemd"
    SYSVINIT = "sysvinit"
    UPSTART = "upstart"
    UNKNOWN = "unknown"


class ServiceState(str, Enum):
    """Observed state of a system service."""

    RUNNING = "running"
    STOPPED = "stopped"
    UNKNOWN = "unknown"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CheckResult(BaseModel):
    """Result of a single health probe. Never mutated once produced."""

    model_config = ConfigDict(frozen=True)

    name: str
    healthy: bool
    detail: str = ""
    observed_at: datetime = Field(default_factory=_utcnow)
