"""Corrective actions: service start/restart/reload and deployment rolling restarts."""

from __future__ import annotations

import logging
import os
import subprocess
from datetime import datetime, timezone

from kubernetes import client
from kubernetes.client.rest import ApiException

from service_checker.observation.models import InitSystem
from service_checker.observation.probes import (
    DEFAULT_COMMAND_TIMEOUT,
    INIT_D,
    Runner,
    run_command,
)

logger = logging.getLogger(__name__)

SERVICE_ACTIONS = ("start", "stop", "restart", "reload")
RESTARTED_AT_ANNOTATION = "kubectl.kubernetes.io/restartedAt"


def _describe(proc: subprocess.CompletedProcess | None, what: str) -> tuple[bool, str]:
    if proc is None:
        return False, f"{what}: could not run command"
    if proc.returncode == 0:
        return True, f"{what}: ok"
    err = (proc.stderr or proc.stdout or "").strip()
    return False, f"{what}: exit {proc.returncode}" + (f" ({err})" if err else "")


def perform_service_action(
    service: str,
    action: str,
    init_system: InitSystem,
    runner: Runner = subprocess.run,
    timeout: float = DEFAULT_COMMAND_TIMEOUT,
) -> tuple[bool, str]:
    """
    Apply ``action`` to ``service`` through the init system. Returns (success, message).
    """
    if action not in SERVICE_ACTIONS:
        return False, f"Unsupported service action: {action}"
    logger.info("Performing '%s' on service: %s", action, service)
    what = f"{action} {service}"

    if init_system == InitSystem.SYSTEMD:
        return _describe(run_command(["systemctl", action, service], runner, timeout), what)

    if init_system == InitSystem.SYSVINIT:
        script = INIT_D / service
        if script.is_file() and os.access(script, os.X_OK):
            cmd = [str(script), action]
        else:
            cmd = ["service", service, action]
        return _describe(run_command(cmd, runner, timeout), what)

    if init_system == InitSystem.UPSTART:
        if action == "reload":
            ok, msg = _describe(run_command(["initctl", "reload", service], runner, timeout), what)
            if ok:
                return ok, msg
            logger.debug("initctl reload failed for %s, falling back to restart", service)
            action = "restart"
        return _describe(run_command(["initctl", action, service], runner, timeout), f"{action} {service}")

    return False, "Unknown init system, cannot perform action"


def rollout_restart_deployment(
    apps: client.AppsV1Api,
    name: str,
    namespace: str,
) -> tuple[bool, str]:
    """
    Trigger a rolling restart by stamping the pod template, as `kubectl rollout restart` does.
    Returns (success, message).
    """
    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    body = {"spec": {"template": {"metadata": {"annotations": {RESTARTED_AT_ANNOTATION: stamp}}}}}
    try:
        apps.patch_namespaced_deployment(name=name, namespace=namespace, body=body)
    except ApiException as e:
        logger.exception("Rolling restart failed: %s", e.body)
        return False, f"API error: {e.reason}"
    return True, f"Restarted deployment {name} (restartedAt={stamp})"
