"""Observation layer: probe services and deployments for health."""

from service_checker.observation.models import CheckResult, InitSystem, ServiceState
from service_checker.observation.probes import ServiceProbe, detect_init_system

__all__ = [
    "CheckResult",
    "InitSystem",
    "ServiceProbe",
    "ServiceState",
    "detect_init_system",
]
