"""Orchestrator: build targets → probe → remediate (bounded) → report."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from datetime import timezone
from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from service_checker.checker.report import (
    REPORT_COLUMNS,
    REPORT_NOTHING_TO_SHOW,
    REPORT_SUMMARY,
    REPORT_TITLE,
    RESULT_FAILED,
    RESULT_NOT_APPLICABLE,
    RESULT_SUCCESS,
    STATUS_STYLES,
)
from service_checker.config import Settings, get_settings
from service_checker.observation import InitSystem, ServiceProbe, detect_init_system
from service_checker.observation.kube import DeploymentProbe, load_apps_api
from service_checker.remediation import RemediationOutcome, StatusRemediator
from service_checker.remediation.actions import perform_service_action, rollout_restart_deployment
from service_checker.remediation.remediator import CheckFn, RemediateFn

logger = logging.getLogger(__name__)


@dataclass
class Target:
    """One thing to check, and optionally how to fix it."""

    name: str
    kind: str  # service | deployment
    check: CheckFn
    action: str = "none"
    remediate: RemediateFn | None = None
    messages: list[str] = field(default_factory=list)


@dataclass
class TargetReport:
    """What happened to a single target during a run."""

    name: str
    kind: str
    action: str
    outcome: RemediationOutcome
    messages: list[str] = field(default_factory=list)

    @property
    def healthy(self) -> bool:
        return self.outcome.succeeded

    @property
    def result(self) -> str:
        if self.outcome.attempts == 0:
            return RESULT_NOT_APPLICABLE
        return RESULT_SUCCESS if self.outcome.succeeded else RESULT_FAILED


@dataclass
class CheckerResult:
    """Result of a full checker run."""

    reports: list[TargetReport] = field(default_factory=list)

    @property
    def unhealthy(self) -> list[TargetReport]:
        return [r for r in self.reports if not r.healthy]

    @property
    def all_healthy(self) -> bool:
        return not self.unhealthy


def _recording(target: Target, apply) -> RemediateFn:
    """Wrap an action returning (success, message) so its message lands on the target."""

    def remediate() -> bool:
        ok, msg = apply()
        target.messages.append(msg)
        if not ok:
            logger.warning("%s %s failed: %s", target.action, target.name, msg)
        return ok

    return remediate


def resolve_init_system(settings: Settings) -> InitSystem:
    """Return the configured init system, detecting it when set to 'auto'."""
    if settings.init_system != "auto":
        return InitSystem(settings.init_system)
    init_system = detect_init_system()
    if init_system == InitSystem.UNKNOWN:
        raise RuntimeError("Could not detect init system")
    logger.info("Detected init system: %s", init_system.value)
    return init_system


def build_targets(
    services: Sequence[str] = (),
    deployments: Sequence[str] = (),
    settings: Settings | None = None,
    runner=subprocess.run,
    apps=None,
) -> list[Target]:
    """Build a probe (and, when an action is configured, a remediation) per target."""
    opts = settings or get_settings()
    targets: list[Target] = []

    if services:
        init_system = resolve_init_system(opts)
        for service in services:
            target = Target(
                name=service,
                kind="service",
                check=ServiceProbe(service, init_system, runner=runner, timeout=opts.command_timeout),
                action=opts.action,
            )
            if opts.action != "none":
                target.remediate = _recording(
                    target,
                    lambda s=service: perform_service_action(
                        s, opts.action, init_system, runner=runner, timeout=opts.command_timeout
                    ),
                )
            targets.append(target)

    if deployments:
        if apps is None:
            apps = load_apps_api(str(opts.kubeconfig) if opts.kubeconfig else None, opts.context)
        for name in deployments:
            probe = DeploymentProbe(name, opts.namespace, apps)
            target = Target(
                name=probe.target,
                kind="deployment",
                check=probe,
                action=opts.deployment_action,
            )
            if opts.deployment_action != "none":
                target.remediate = _recording(
                    target,
                    lambda n=name: rollout_restart_deployment(apps, n, opts.namespace),
                )
            targets.append(target)

    return targets


def run_targets(targets: Sequence[Target], remediator: StatusRemediator) -> CheckerResult:
    """Check each target in turn, remediating those that have an action."""
    result = CheckerResult()
    for target in targets:
        if target.remediate is None:
            last = remediator.check(target.check, target.name)
            outcome = RemediationOutcome(attempts=0, succeeded=last.healthy, last_result=last)
        else:
            outcome = remediator.remediate(target.check, target.remediate, name=target.name)

        if outcome.succeeded:
            logger.info("%s %s is healthy", target.kind, target.name)
        else:
            logger.error("%s %s is not healthy: %s", target.kind, target.name, outcome.last_result.detail)
        result.reports.append(
            TargetReport(
                name=target.name,
                kind=target.kind,
                action=target.action,
                outcome=outcome,
                messages=list(target.messages),
            )
        )
    logger.info(REPORT_SUMMARY.format(checked=len(result.reports), unhealthy=len(result.unhealthy)))
    return result


def run_checker(
    services: Sequence[str] = (),
    deployments: Sequence[str] = (),
    settings: Settings | None = None,
    runner=subprocess.run,
    apps=None,
    remediator: StatusRemediator | None = None,
) -> CheckerResult:
    """
    Run the full checker: build targets → check each → remediate the unhealthy ones → collect reports.
    """
    opts = settings or get_settings()
    targets = build_targets(services, deployments, opts, runner=runner, apps=apps)
    return run_targets(targets, remediator or StatusRemediator(opts.remediation_policy()))


def print_result(result: CheckerResult, console: Console | None = None, quiet: bool = False) -> None:
    """Print checker result to console using Rich."""
    c = console or Console()
    reports = result.unhealthy if quiet else result.reports
    summary = REPORT_SUMMARY.format(checked=len(result.reports), unhealthy=len(result.unhealthy))
    if not reports:
        c.print(Panel(REPORT_NOTHING_TO_SHOW, title=REPORT_TITLE, border_style="blue"))
        c.print(f"\n[bold]Summary:[/bold] {summary}")
        return

    table = Table(*REPORT_COLUMNS)
    for r in reports:
        status = "healthy" if r.healthy else "unhealthy"
        table.add_row(
            r.outcome.last_result.observed_at.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
            escape(r.name),
            r.kind,
            f"[{STATUS_STYLES[status]}]{status}[/]",
            escape(r.action),
            r.result,
            str(r.outcome.attempts),
        )
    c.print(Panel(table, title=REPORT_TITLE, border_style="blue"))
    for r in reports:
        if not r.healthy:
            c.print(f"[bold red]{escape(r.name)}[/bold red]: {escape(r.outcome.last_result.detail)}")
            for msg in r.messages:
                c.print(f"  - {escape(msg)}")
    c.print(f"\n[bold]Summary:[/bold] {summary}")
