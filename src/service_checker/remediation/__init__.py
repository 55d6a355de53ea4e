"""Remediation layer: corrective actions and the bounded-retry loop that applies them."""

from service_checker.remediation.remediator import (
    RemediationOutcome,
    RemediationPolicy,
    StatusRemediator,
)

__all__ = [
    "RemediationOutcome",
    "RemediationPolicy",
    "StatusRemediator",
]
