"""CLI entrypoint for the service checker."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from service_checker import __version__
from service_checker.checker import print_result, run_checker
from service_checker.config import Settings, get_settings


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="service-checker",
        description="Check services and deployments; restart the unhealthy ones with bounded retries.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "services",
        nargs="*",
        metavar="SERVICE",
        help="System services to check (systemd, sysvinit or upstart)",
    )
    parser.add_argument(
        "--action",
        "-a",
        choices=["start", "restart", "none"],
        default=None,
        help="Action to perform if a service is not running (default: from env or 'none')",
    )
    parser.add_argument(
        "--deployment",
        "-d",
        action="append",
        default=[],
        metavar="NAME",
        help="Kubernetes deployment to check; may be repeated",
    )
    parser.add_argument(
        "--deployment-action",
        choices=["rollout-restart", "none"],
        default=None,
        help="Action to perform if a deployment is not ready (default: from env or 'none')",
    )
    parser.add_argument(
        "--wait",
        "-w",
        type=float,
        default=None,
        help="Seconds to wait after each action before re-checking (default: from env or 5)",
    )
    parser.add_argument(
        "--max-attempts",
        "-m",
        type=int,
        default=None,
        help="Maximum remediation attempts per target (default: from env or 3)",
    )
    parser.add_argument(
        "--init-system",
        choices=["auto", "systemd", "sysvinit", "upstart"],
        default=None,
        help="Init system to use (default: from env or auto-detect)",
    )
    parser.add_argument(
        "--namespace",
        "-n",
        default=None,
        help="Kubernetes namespace for deployments (default: from env or 'default')",
    )
    parser.add_argument(
        "--kubeconfig",
        type=Path,
        default=None,
        help="Path to kubeconfig (default: KUBECONFIG env or ~/.kube/config)",
    )
    parser.add_argument(
        "--context",
        default=None,
        help="Kubernetes context to use",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only report unhealthy targets",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    args = parser.parse_args(argv)
    if not args.services and not args.deployment:
        parser.error("at least one service or --deployment must be specified")
    return args


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for service-checker CLI."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
    logger = logging.getLogger("service_checker")
    if not args.verbose:
        logger.setLevel(logging.WARNING)

    try:
        overrides = {
            "action": args.action,
            "deployment_action": args.deployment_action,
            "wait_seconds": args.wait,
            "max_attempts": args.max_attempts,
            "init_system": args.init_system,
            "namespace": args.namespace,
            "kubeconfig": args.kubeconfig,
            "context": args.context,
        }
        base = get_settings()
        settings = Settings.model_validate(
            {**base.model_dump(), **{k: v for k, v in overrides.items() if v is not None}}
        )

        result = run_checker(
            services=args.services,
            deployments=args.deployment,
            settings=settings,
        )
        print_result(result, Console(), quiet=args.quiet)
        return 0 if result.all_healthy else 1
    except Exception as e:
        logging.exception("Service check failed")
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
