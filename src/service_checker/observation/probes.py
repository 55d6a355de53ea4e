"""Probe system services through whichever init system the host runs."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Callable, Sequence

from service_checker.observation.models import CheckResult, InitSystem, ServiceState

logger = logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]

# A regular (non-symlinked) cron script is the marker for a sysvinit host
SYSVINIT_MARKER = Path("/etc/init.d/cron")
INIT_D = Path("/etc/init.d")
DEFAULT_COMMAND_TIMEOUT = 30.0


def detect_init_system() -> InitSystem:
    """Guess the host init system from the tools and scripts present."""
    if shutil.which("systemctl"):
        return InitSystem.SYSTEMD
    if SYSVINIT_MARKER.is_file() and not SYSVINIT_MARKER.is_symlink():
        return InitSystem.SYSVINIT
    if shutil.which("initctl"):
        return InitSystem.UPSTART
    return InitSystem.UNKNOWN


def run_command(
    cmd: Sequence[str],
    runner: Runner = subprocess.run,
    timeout: float = DEFAULT_COMMAND_TIMEOUT,
) -> subprocess.CompletedProcess | None:
    """Run ``cmd`` capturing output. Returns None if it could not be run at all."""
    logger.debug("Running: %s", " ".join(cmd))
    try:
        return runner(list(cmd), capture_output=True, text=True, timeout=timeout, check=False)
    except subprocess.TimeoutExpired:
        logger.warning("Command timed out after %ss: %s", timeout, " ".join(cmd))
    except OSError as e:
        logger.warning("Command failed to start: %s (%s)", " ".join(cmd), e)
    return None


class ServiceProbe:
    """Reports whether a single service is running. Call it to get a CheckResult."""

    def __init__(
        self,
        service: str,
        init_system: InitSystem,
        runner: Runner = subprocess.run,
        timeout: float = DEFAULT_COMMAND_TIMEOUT,
    ) -> None:
        self.service = service
        self.init_system = init_system
        self._runner = runner
        self._timeout = timeout

    def __call__(self) -> CheckResult:
        return self.check()

    def check(self) -> CheckResult:
        state = self.state()
        return CheckResult(
            name=self.service,
            healthy=state == ServiceState.RUNNING,
            detail=f"{self.init_system.value}: {state.value}",
        )

    def state(self) -> ServiceState:
        """Query the init system for the service state."""
        if self.init_system == InitSystem.SYSTEMD:
            proc = self._run(["systemctl", "is-active", "--quiet", self.service])
            return ServiceState.RUNNING if proc is not None and proc.returncode == 0 else ServiceState.STOPPED

        if self.init_system == InitSystem.SYSVINIT:
            proc = self._run(["service", self.service, "status"])
            if proc is not None and proc.returncode == 0:
                return ServiceState.RUNNING
            proc = self._run([str(INIT_D / self.service), "status"])
            return ServiceState.RUNNING if proc is not None and proc.returncode == 0 else ServiceState.STOPPED

        if self.init_system == InitSystem.UPSTART:
            proc = self._run(["initctl", "status", self.service])
            if proc is not None and "running" in (proc.stdout or ""):
                return ServiceState.RUNNING
            return ServiceState.STOPPED

        return ServiceState.UNKNOWN

    def _run(self, cmd: list[str]) -> subprocess.CompletedProcess | None:
        return run_command(cmd, runner=self._runner, timeout=self._timeout)
