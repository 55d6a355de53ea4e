"""Checker: run probes and remediation over every requested target and report."""

from service_checker.checker.orchestrator import (
    CheckerResult,
    Target,
    TargetReport,
    build_targets,
    print_result,
    run_checker,
    run_targets,
)

__all__ = [
    "CheckerResult",
    "Target",
    "TargetReport",
    "build_targets",
    "print_result",
    "run_checker",
    "run_targets",
]
