"""
policylink.cli - Command-Line Interface

Inspect which integrations are configured and whether they are reachable.
Configuration comes from the environment / .env, exactly as the service
itself would load it.

Usage:
    python -m policylink.cli integrations list
    python -m policylink.cli integrations status
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from policylink.integrations.registry import IntegrationKind, Integrations
from policylink.settings import get_settings

HEALTHY = "healthy"
UNHEALTHY = "unhealthy"
NOT_CONFIGURED = "not_configured"


def _build_integrations() -> Integrations:
    return Integrations.from_config(get_settings())


async def _list_integrations(_args: argparse.Namespace) -> None:
    """Print which slots are configured and their base URLs."""
    integrations = _build_integrations()
    listing: dict[str, str | None] = {}
    for kind in IntegrationKind:
        adapter = integrations.get(kind)
        listing[str(kind)] = adapter.base_url if adapter is not None else None
    print(json.dumps(listing, indent=2))


async def _status_integrations(_args: argparse.Namespace) -> None:
    """Probe every configured integration and print one status per slot."""
    integrations = _build_integrations()
    report = await integrations.health_report()

    status: dict[str, str] = {}
    for kind in IntegrationKind:
        if kind not in report:
            status[str(kind)] = NOT_CONFIGURED
        else:
            status[str(kind)] = HEALTHY if report[kind] else UNHEALTHY

    print(json.dumps(status, indent=2))


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="policylink",
        description="policylink - policy engine service integrations",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: POLICYLINK_LOG_LEVEL or INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # ── integrations command group ──
    int_parser = subparsers.add_parser("integrations", help="Inspect configured integrations")
    int_sub = int_parser.add_subparsers(dest="action", help="Integration actions")

    list_p = int_sub.add_parser("list", help="List configured integrations")
    list_p.set_defaults(func=_list_integrations)

    status_p = int_sub.add_parser("status", help="Health-check configured integrations")
    status_p.set_defaults(func=_status_integrations)

    return parser


def main() -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    log_level = args.log_level or get_settings().log_level.upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    asyncio.run(args.func(args))


if __name__ == "__main__":
    main()
