"""Import CLI Entry Point

Command-line interface for importing documents into the question-answering
backend. Handles argument parsing, logging configuration and the optional
admin login, then runs the import pipeline on a JSON file.

Usage:
    python -m src.run_import --input data/topics.json --base-url http://localhost:5000
"""

# run_import.py
import argparse
import logging
import time
from pathlib import Path

import requests

from src.sharai_client.api_client import SharaiClient
from src.sharai_client.config import load_settings
from src.sharai_client.errors import ApiError, DocumentImportError
from src.sharai_client.pipeline import run_import
from src.sharai_client.state import init_state, login


def configure_logging() -> None:
    """Configure logging with both console and file output.

    Sets up:
      - Root logger at DEBUG level
      - Console handler at INFO level for user-facing messages
      - File handler at DEBUG level (logs/import.log)
      - Reduced verbosity for urllib3 and requests loggers
    """
    log_dir = Path("logs")
    log_dir.mkdir(exist_ok=True)
    log_file = log_dir / "import.log"

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    # Clear existing handlers to avoid duplicates if run multiple times
    logger.handlers.clear()
    logger.addHandler(console_handler)
    logger.addHandler(file_handler)


def main(argv=None) -> int:
    """
    CLI entrypoint for the document importer.

    Returns a Unix-style exit code (0 on success, non-zero on failure).
    """
    configure_logging()
    logger = logging.getLogger(__name__)
    settings = load_settings()

    parser = argparse.ArgumentParser(
        description="Import Islamic Q&A documents into the backend"
    )
    parser.add_argument(
        "--input",
        type=Path,
        required=True,
        help="Path to the JSON file to import (flat array or topic tree).",
    )
    parser.add_argument(
        "--base-url",
        default=settings.api_url,
        help="Backend API base URL (default: SHARAI_API_URL or %(default)s).",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory where normalized documents and run metadata are written.",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=settings.import_batch_size,
        help="Maximum number of documents submitted in this run (default: %(default)s)",
    )
    parser.add_argument(
        "--offset",
        type=int,
        default=0,
        help="Index of the first normalized document to submit; use it to import the rest of a large file",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Normalize and report, but don't submit or write anything",
    )
    parser.add_argument(
        "--no-history",
        action="store_true",
        help="Overwrite output files instead of creating timestamped versions",
    )
    parser.add_argument(
        "--login",
        action="store_true",
        help="Log in with SHARAI_ADMIN_USERNAME/SHARAI_ADMIN_PASSWORD before importing",
    )

    args = parser.parse_args(argv)

    logger.info("=== Starting document import ===")
    logger.info("Input: %s", args.input)
    logger.info("Backend: %s", args.base_url)
    logger.info("Batch size: %d, offset: %d", args.batch_size, args.offset)
    logger.info("Dry_run: %s", args.dry_run)

    try:
        start_time = time.time()
        client = SharaiClient(base_url=args.base_url, timeout=settings.api_timeout)

        if args.login and not args.dry_run:
            if not settings.admin_username or not settings.admin_password:
                logger.error("--login requires SHARAI_ADMIN_USERNAME and SHARAI_ADMIN_PASSWORD")
                return 2
            state = init_state(settings)
            login(state, client, settings.admin_username, settings.admin_password)

        report = run_import(
            input_path=args.input,
            client=client,
            output_dir=args.output_dir,
            batch_size=args.batch_size,
            offset=args.offset,
            dry_run=args.dry_run,
            keep_history=not args.no_history,
        )

        elapsed_time = time.time() - start_time

        logger.info("=" * 70)
        logger.info("Import completed successfully in %.2fs", elapsed_time)
        logger.info("")
        logger.info("Summary:")
        logger.info("  Format:     %s", report.format.value)
        logger.info("  Valid:      %d/%d records", report.valid, report.total_candidates)
        logger.info("  Skipped:    %d", len(report.skipped))
        if report.batch is not None:
            logger.info("  Submitted:  %d", report.batch.submitted)
            logger.info("  Remaining:  %d", report.batch.remaining)
        for notice in report.notices:
            logger.info("  Note: %s", notice)
        if report.output_paths:
            logger.info("")
            logger.info("Output files:")
            for name, path in report.output_paths.items():
                logger.info("  %-12s %s", f"{name}:", path)
        logger.info("=" * 70)

    except (DocumentImportError, ApiError) as e:
        logger.error("Failed to import documents: %s", e)
        return 1
    except (FileNotFoundError, ValueError, requests.RequestException) as e:
        logger.error("Import failed: %s", e)
        return 1
    except Exception as e:
        logger.exception(f"Import failed with an unhandled exception: {e}")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
