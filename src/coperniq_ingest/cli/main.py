"""Main CLI entry point."""

import argparse
import logging
import math
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import find_dotenv, load_dotenv
from tqdm import tqdm

from coperniq_ingest.client import ProjectsClient
from coperniq_ingest.config import ConfigError, Settings, load_settings
from coperniq_ingest.loader import CsvParseError, read_csv_rows
from coperniq_ingest.logging import configure_logging
from coperniq_ingest.runner import RunSummary, run_batches

logger = logging.getLogger(__name__)

DEFAULT_CSV_PATH = "data/projects.csv"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="coperniq-ingest",
        description="Import projects from a CSV file into Coperniq",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print mapped payloads instead of sending them",
    )
    parser.add_argument(
        "--file",
        type=Path,
        default=None,
        help=f"CSV file to import (prompted for when omitted; default {DEFAULT_CSV_PATH})",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load environment variables from this file (default: .env if present)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level (default: LOG_LEVEL env or INFO)",
    )
    return parser


def prompt_for_path(default: str = DEFAULT_CSV_PATH) -> Path:
    """Ask for the CSV path on stdin; empty input picks the default."""
    answer = input(f"Enter the path to your CSV file: ({default}) ").strip()
    return Path(answer or default)


def run(settings: Settings, csv_path: Path, *, dry_run: bool = False) -> RunSummary:
    """Read the CSV and submit every row. Setup errors propagate before any submission."""
    logger.info("Reading CSV file %s", csv_path)
    rows = read_csv_rows(csv_path)
    total_batches = math.ceil(len(rows) / settings.batch_size)
    dry_label = " (DRY RUN)" if dry_run else ""
    logger.info("Processing %d rows%s", len(rows), dry_label)

    with ProjectsClient(settings) as client, tqdm(total=total_batches, unit="batch") as bar:

        def on_batch(batch_number: int, total: int) -> None:
            bar.set_description(f"Processing batch {batch_number}/{total}{dry_label}")
            bar.update(batch_number - 1 - bar.n)

        summary = run_batches(
            rows,
            submit=client.submit,
            dry_run=dry_run,
            batch_size=settings.batch_size,
            delay_ms=settings.batch_timeout_ms,
            emit=tqdm.write,
            on_batch=on_batch,
        )
        bar.update(total_batches - bar.n)
    return summary


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse args, validate configuration, and run the import. Returns the exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if args.env_file is not None:
        load_dotenv(args.env_file)
    else:
        load_dotenv(find_dotenv(usecwd=True))

    try:
        settings = load_settings()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        csv_path = args.file if args.file is not None else prompt_for_path()
        summary = run(settings, csv_path, dry_run=args.dry_run)
    except (CsvParseError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.exception("Unexpected failure")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(summary.message())
    return 0


if __name__ == "__main__":
    sys.exit(main())
