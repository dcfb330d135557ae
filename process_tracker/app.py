"""Application entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from process_tracker.core import (
    APP_NAME,
    ConfigurationInvalid,
    LedgerCorruption,
    StorageUnavailable,
    load_config,
    setup_logging,
)
from process_tracker.models import CycleReport
from process_tracker.runner import ProcessTracker, render_cycle
from process_tracker.storage import SqliteLedgerStore

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="process-tracker", description=f"{APP_NAME}: tracks application running time.")
    parser.add_argument("--once", action="store_true", help="run a single cycle and exit")
    parser.add_argument("--cycles", type=int, default=None, help="stop after this many cycles")
    parser.add_argument("--no-clear", action="store_true", help="do not clear the terminal between cycles")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        config = load_config()
    except ConfigurationInvalid as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    setup_logging(config.log_level, config.log_file)
    try:
        store = SqliteLedgerStore(config.database_path)
    except StorageUnavailable as exc:
        logger.error("%s", exc)
        return 1

    def _print(report: CycleReport) -> None:
        print(render_cycle(report, config.interval, clear=not args.no_clear), flush=True)

    tracker = ProcessTracker(config, store, on_cycle=_print)
    max_cycles = 1 if args.once else args.cycles
    try:
        tracker.run(max_cycles=max_cycles)
    except KeyboardInterrupt:
        logger.info("Stopped")
    except LedgerCorruption as exc:
        logger.error("Ledger database %s is corrupt: %s", store.path, exc)
        return 1
    finally:
        store.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
