"""Bounded-retry remediation loop: check, fix, wait, re-check."""

from __future__ import annotations

import logging
import time
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field, model_validator

from service_checker.observation.models import CheckResult

logger = logging.getLogger(__name__)

CheckFn = Callable[[], CheckResult]
RemediateFn = Callable[[], bool]


class RemediationPolicy(BaseModel):
    """How hard to try before giving up on a resource."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=3, ge=1, description="Ceiling on remediation attempts")
    cooldown_seconds: float = Field(
        default=5.0,
        ge=0.0,
        description="Wait between applying an action and re-checking",
    )


class RemediationOutcome(BaseModel):
    """Result of one remediation cycle."""

    attempts: int = Field(..., ge=0)
    succeeded: bool
    last_result: CheckResult
    elapsed_seconds: float = Field(default=0.0, ge=0.0)

    @model_validator(mode="after")
    def _succeeded_matches_last_result(self) -> RemediationOutcome:
        if self.succeeded != self.last_result.healthy:
            raise ValueError("succeeded must reflect the health of the last check")
        return self


class StatusRemediator:
    """
    Runs a health check and, while it fails, applies a corrective action up to
    ``policy.max_attempts`` times with ``policy.cooldown_seconds`` between the
    action and the next check.

    Never raises: exceptions from the callbacks collapse into "still unhealthy".
    """

    def __init__(
        self,
        policy: RemediationPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.policy = policy or RemediationPolicy()
        self._sleep = sleep
        self._clock = clock

    def remediate(
        self,
        check_fn: CheckFn,
        remediate_fn: RemediateFn,
        name: str = "resource",
    ) -> RemediationOutcome:
        """Run one remediation cycle for ``name`` and return its outcome."""
        started = self._clock()
        result = self.check(check_fn, name)
        if result.healthy:
            logger.debug("%s is healthy; no remediation needed", name)
            return RemediationOutcome(
                attempts=0,
                succeeded=True,
                last_result=result,
                elapsed_seconds=max(0.0, self._clock() - started),
            )

        attempts = 0
        while attempts < self.policy.max_attempts:
            attempts += 1
            logger.info(
                "%s unhealthy (%s); remediation attempt %d/%d",
                name,
                result.detail or "no detail",
                attempts,
                self.policy.max_attempts,
            )
            if not self._apply(remediate_fn, name):
                logger.warning("Remediation action for %s reported failure on attempt %d", name, attempts)
            self._sleep(self.policy.cooldown_seconds)
            result = self.check(check_fn, name)
            if result.healthy:
                logger.info("%s recovered after %d attempt(s)", name, attempts)
                break
        else:
            logger.error("%s still unhealthy after %d attempt(s): %s", name, attempts, result.detail)

        return RemediationOutcome(
            attempts=attempts,
            succeeded=result.healthy,
            last_result=result,
            elapsed_seconds=max(0.0, self._clock() - started),
        )

    def check(self, check_fn: CheckFn, name: str = "resource") -> CheckResult:
        """Run a probe once, turning an exception into an unhealthy result."""
        try:
            return check_fn()
        except Exception as e:
            logger.exception("Health check for %s raised", name)
            return CheckResult(name=name, healthy=False, detail=f"check failed: {e}")

    def _apply(self, remediate_fn: RemediateFn, name: str) -> bool:
        try:
            return bool(remediate_fn())
        except Exception:
            logger.exception("Remediation action for %s raised", name)
            return False
