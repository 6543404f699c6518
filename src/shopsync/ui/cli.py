from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from shopsync.app import (
    run_daily_sync,
    sync_attributes,
    sync_categories,
    sync_prices,
    sync_product_order,
    sync_products,
    sync_related_products,
    sync_stock,
    trigger_file_sync,
    wipe_storefront,
)
from shopsync.config import ConfigurationError, configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from shopsync.domain.sync import FlowOutcome

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synchronise the ERP catalog into Shopify")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("products", help="Create or update products by SKU")
    subparsers.add_parser("categories", help="Upsert collections and attach products")
    subparsers.add_parser("attributes", help="Write attribute metafields")
    subparsers.add_parser("prices", help="Write base and Israel price-list prices")
    subparsers.add_parser("stock", help="Set on-hand inventory quantities")
    subparsers.add_parser("product-order", help="Apply manual product order per collection")
    subparsers.add_parser("related", help="Write related-product references")
    subparsers.add_parser("daily", help="Run every flow, then trigger the ERP file sync")
    subparsers.add_parser("trigger-file-sync", help="Ask the ERP to sync its Shopify files")

    wipe = subparsers.add_parser("wipe", help="Delete every synced resource from the shop")
    wipe.add_argument(
        "--yes",
        action="store_true",
        help="Confirm the destructive wipe",
    )
    wipe.add_argument(
        "--timeout-minutes",
        type=float,
        help="Abort the wipe after this many minutes (defaults to config)",
    )

    return parser.parse_args(list(argv))


def _validate(args: argparse.Namespace) -> None:
    if args.command != "wipe":
        return
    if not args.yes:
        raise ValueError("Refusing to wipe the shop without --yes")
    if args.timeout_minutes is not None and args.timeout_minutes <= 0:
        raise ValueError("Timeout minutes must be positive")


def _dispatch(args: argparse.Namespace) -> bool:
    """Run the selected command; return False when it finished with a failure."""

    outcome: FlowOutcome | None = None
    if args.command == "products":
        outcome = sync_products()
    elif args.command == "categories":
        outcome = sync_categories()
    elif args.command == "attributes":
        outcome = sync_attributes()
    elif args.command == "prices":
        outcome = sync_prices()
    elif args.command == "stock":
        outcome = sync_stock()
    elif args.command == "product-order":
        outcome = sync_product_order()
    elif args.command == "related":
        outcome = sync_related_products()
    if outcome is not None:
        return outcome.ok

    if args.command == "daily":
        outcomes = run_daily_sync()
        return all(item.ok for item in outcomes)
    if args.command == "wipe":
        timeout = args.timeout_minutes * 60 if args.timeout_minutes is not None else None
        summary = wipe_storefront(timeout_seconds=timeout)
        log.info("Wipe finished: %s", summary.describe())
        return True
    if args.command == "trigger-file-sync":
        trigger_file_sync()
        return True
    raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        _validate(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        succeeded = _dispatch(parsed_args)
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(1)
    if not succeeded:
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
