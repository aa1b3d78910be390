"""Command-line interface for wallet intelligence reports."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from .chains.stacks import HiroClient
from .config import AppConfig, load_config
from .errors import InvalidAddressError
from .logging_setup import configure_logging
from .payments import (
    FULL_REPORT_RESOURCE,
    QUICK_SUMMARY_RESOURCE,
    PaymentVerifier,
    build_discovery_document,
    build_payment_challenge,
)
from .services import ReportService
from .validation import validate_address

logger = logging.getLogger(__name__)

EXIT_INVALID_ADDRESS = 1
EXIT_PAYMENT_REQUIRED = 2
EXIT_PAYMENT_REJECTED = 3


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="wallet-intel",
        description="Stacks wallet intelligence reports",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    for name, help_text in (
        ("analyze", "Full wallet intelligence report"),
        ("quick", "Quick portfolio summary"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("address", help="Stacks address (SP... or SM...)")
        cmd.add_argument(
            "--payment-txid",
            default=None,
            help="Settlement transaction id proving payment",
        )

    sub.add_parser("discovery", help="Print the paid-resource discovery document")

    return parser


def _emit(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2))


async def _check_payment(
    config: AppConfig, args: argparse.Namespace, resource: str, amount: int
) -> int:
    """Return 0 when the request may proceed, else an exit code."""
    if not config.payment.enabled:
        return 0

    if not args.payment_txid:
        _emit(build_payment_challenge(config.payment, resource, amount))
        return EXIT_PAYMENT_REQUIRED

    verifier = PaymentVerifier(HiroClient(config.providers), config.payment)
    verification = await verifier.verify(args.payment_txid)
    if not verification.valid:
        _emit({"error": "Payment verification failed", "details": verification.error})
        return EXIT_PAYMENT_REJECTED
    return 0


async def _run(args: argparse.Namespace) -> int:
    """Execute the selected command."""
    configure_logging(args.log_level)
    config = load_config(args.config)

    if args.command == "discovery":
        _emit(build_discovery_document(config.payment))
        return 0

    if args.command == "analyze":
        resource = FULL_REPORT_RESOURCE.replace(":address", args.address)
        amount = config.payment.full_report_price
    else:
        resource = QUICK_SUMMARY_RESOURCE.replace(":address", args.address)
        amount = config.payment.quick_summary_price

    code = await _check_payment(config, args, resource, amount)
    if code:
        return code

    try:
        address = validate_address(args.address)
    except InvalidAddressError as e:
        logger.error("%s", e)
        _emit({"error": "Invalid Stacks address"})
        return EXIT_INVALID_ADDRESS

    service = ReportService(config)
    if args.command == "analyze":
        report = await service.build_report(address)
    else:
        report = await service.build_quick_summary(address)
    _emit(report.to_dict())
    return 0


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    sys.exit(asyncio.run(_run(args)))
