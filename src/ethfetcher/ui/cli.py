from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from ethfetcher.app import fetch_transactions, list_transactions
from ethfetcher.config import configure_logging
from ethfetcher.ui.schema import TransactionListPayload

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Resolve Ethereum transaction hashes via the local store and a JSON-RPC node"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log at debug level",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch = subparsers.add_parser("fetch", help="Resolve transaction hashes")
    source = fetch.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--hash",
        dest="hashes",
        action="append",
        metavar="HASH",
        help="Transaction hash to resolve (repeatable)",
    )
    source.add_argument(
        "--rlp",
        dest="rlphex",
        metavar="HEX",
        help="Hex-encoded RLP list of transaction hashes",
    )
    fetch.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Reject nested lists inside the RLP hash list instead of skipping them",
    )
    fetch.add_argument(
        "--principal",
        type=str,
        help="Principal to associate the resolved transactions with",
    )

    listing = subparsers.add_parser("list", help="List stored transactions")
    listing.add_argument(
        "--principal",
        type=str,
        help="Only list transactions associated with this principal",
    )

    return parser.parse_args(list(argv))


def _emit(payload: TransactionListPayload) -> None:
    sys.stdout.write(payload.model_dump_json(by_alias=True, indent=2))
    sys.stdout.write("\n")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "fetch":
            result = fetch_transactions(
                hashes=parsed_args.hashes,
                rlphex=parsed_args.rlphex,
                principal=parsed_args.principal,
                strict=parsed_args.strict,
            )
            _emit(TransactionListPayload.build(result.records, result.failures))
            if result.partial:
                log.error("Failed to store %s transactions", len(result.failures))
                sys.exit(1)
        elif parsed_args.command == "list":
            records = list_transactions(principal=parsed_args.principal)
            _emit(TransactionListPayload.build(records))
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error while resolving transactions")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
