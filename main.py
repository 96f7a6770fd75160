# main.py

"""Entry point for gold_rates (dashboard TUI, updater, or scheduler)."""

import argparse
import logging
import sys

from src.config.logging_config import setup_logging

logger = logging.getLogger("gold_rates.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="gold_rates",
        description="Daily 22k/24k gold rates via Gemini, with a terminal dashboard.",
        epilog="With no options the interactive dashboard is launched.",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--update",
        action="store_true",
        default=False,
        help="Fetch prices once and rewrite the snapshot.",
    )
    mode.add_argument(
        "--daily",
        action="store_true",
        default=False,
        help="Fetch prices now and then once a day.",
    )
    mode.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Print the current snapshot as a table.",
    )
    mode.add_argument(
        "--list-models",
        action="store_true",
        default=False,
        dest="list_models",
        help="List Gemini models available to GEMINI_API_KEY.",
    )
    parser.add_argument(
        "--fallback",
        action="store_true",
        default=False,
        help="On failure write a zero-valued snapshot and exit 0.",
    )
    parser.add_argument(
        "--at",
        default=None,
        help="Daily run time as HH:MM (default: GOLD_DAILY_RUN_AT or 06:00).",
    )
    parser.add_argument(
        "--snapshot",
        default=None,
        help="Snapshot path (or URL, for reading) to use instead of the default.",
    )
    return parser


def _run_tui(location: str | None) -> None:
    """Launch the interactive Textual dashboard."""
    from src.services.snapshot_loader import SnapshotLoader
    from src.ui.app import GoldRatesApp

    try:
        app = GoldRatesApp(SnapshotLoader(location))
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("gold_rates dashboard shutting down")


def main() -> None:
    """Route to the dashboard (no mode flag) or a headless runner."""
    parser = _build_parser()
    args = parser.parse_args()

    console_level = logging.INFO if args.daily else logging.WARNING
    log_file = setup_logging(console_level)
    logger.info("gold_rates starting, log file: %s", log_file)

    from src.cli import runner

    if args.update:
        sys.exit(runner.run_update(args.snapshot, args.fallback))
    elif args.daily:
        sys.exit(runner.run_daily(args.snapshot, args.fallback, args.at))
    elif args.show:
        sys.exit(runner.run_show(args.snapshot))
    elif args.list_models:
        sys.exit(runner.run_list_models())
    else:
        _run_tui(args.snapshot)


if __name__ == "__main__":
    main()
