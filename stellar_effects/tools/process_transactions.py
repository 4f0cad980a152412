"""
Turn a JSON-lines file of transaction messages into JSON-lines effects.

Each input line is one transaction message:
  {"envelope_xdr": ..., "result_xdr": ..., "meta_xdr": ..., "ledger_sequence": ...,
   "ledger_close_time": "2024-01-01T00:00:00Z", "hash": ..., "transaction_index": 1}

Exit code: 0 when every transaction succeeded, 1 when any failed, 2 on configuration errors
or when the input or output file cannot be opened.

Usage:
  python -m stellar_effects.tools.process_transactions transactions.jsonl --network testnet
  cat transactions.jsonl | stellar-effects --network-passphrase "..." --workers 8 > effects.jsonl
"""

from __future__ import annotations

import argparse
import sys
from contextlib import ExitStack
from typing import IO, Iterator

from stellar_effects.config.env import NETWORK_PASSPHRASES, load_effects_env, passphrase_for_network
from stellar_effects.config.settings import settings_from_env
from stellar_effects.core.exceptions import ConfigurationError
from stellar_effects.effects_logging import get_logger
from stellar_effects.processor.consumers import JsonLinesConsumer
from stellar_effects.processor.messages import Message
from stellar_effects.processor.processor import EffectsProcessor
from stellar_effects.worker.runtime import WorkerConfig, run_batch

logger = get_logger(__name__)

METADATA_LINE = "source_line"


def read_messages(stream: IO[str]) -> Iterator[Message]:
    for line_no, line in enumerate(stream, start=1):
        line = line.strip()
        if not line:
            continue
        yield Message(payload=line.encode("utf-8"), metadata={METADATA_LINE: line_no})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Derive Stellar effects from transaction messages (JSON lines in, JSON lines out).",
    )
    parser.add_argument("input", nargs="?", default="-", help="Input JSON-lines file (default: stdin)")
    parser.add_argument("-o", "--output", default="-", help="Output JSON-lines file (default: stdout)")
    parser.add_argument(
        "--network",
        default=None,
        choices=sorted(NETWORK_PASSPHRASES),
        help="Well-known network name (overrides STELLAR_NETWORK)",
    )
    parser.add_argument(
        "--network-passphrase",
        dest="network_passphrase",
        default=None,
        help="Explicit network passphrase (overrides --network and NETWORK_PASSPHRASE)",
    )
    parser.add_argument("--workers", type=int, default=None, help="Transactions processed in parallel")
    parser.add_argument(
        "--tie-break",
        dest="tie_break",
        choices=("earliest", "latest"),
        default=None,
        help="Attribution tie-break for ungrouped meta (default: earliest)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    load_effects_env()

    passphrase = args.network_passphrase or (passphrase_for_network(args.network) if args.network else None)
    try:
        settings = settings_from_env(
            network_passphrase=passphrase,
            attribution_tie_break=args.tie_break,
            worker_concurrency=args.workers,
        )
        processor = EffectsProcessor()
        processor.initialize(settings.model_dump())
    except ConfigurationError as e:
        logger.error("effects_cli_configuration_failed", **e.to_dict())
        print("ERROR:", e.message, file=sys.stderr)
        return 2

    try:
        with ExitStack() as stack:
            stack.callback(processor.close)
            source = sys.stdin if args.input == "-" else stack.enter_context(open(args.input, "r", encoding="utf-8"))
            sink = sys.stdout if args.output == "-" else stack.enter_context(open(args.output, "w", encoding="utf-8"))
            processor.register_consumer(JsonLinesConsumer(sink))
            summary = run_batch(
                read_messages(source),
                processor,
                WorkerConfig(concurrency=settings.worker_concurrency),
            )
    except OSError as e:
        logger.error("effects_cli_io_failed", error=str(e), input=args.input, output=args.output)
        print("ERROR:", e, file=sys.stderr)
        return 2

    print(
        f"processed={summary.processed} failed={summary.failed} effects={summary.effects}",
        file=sys.stderr,
    )
    return 1 if summary.failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
