"""
Document Import Pipeline

Takes a JSON import (pasted text or an uploaded file), normalizes it into
document records and submits them to the backend's create-many endpoint.

Features:
- Two accepted input formats (flat array, topic tree), detected up front
- Malformed records are skipped and reported, never fatal
- One submission per run, capped at the batch size; the remainder is left
  for a separate run started at --offset
- Optional timestamped copies of the normalized documents and run metadata
"""

from pathlib import Path
import json
import logging
import time
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Union

from .api_client import SharaiClient
from .config import DEFAULT_BATCH_SIZE
from .errors import DocumentImportError, NoValidDocumentsError
from .loaders import detect_format, parse_import_text, read_import_file
from .models import BatchResult, ImportReport
from .transformers import normalize


logger = logging.getLogger(__name__)

SubmitFn = Callable[[List[Dict[str, Any]]], Any]


def dispatch_batch(
    documents: List[Dict[str, Any]],
    submit: SubmitFn,
    batch_size: int = DEFAULT_BATCH_SIZE,
    offset: int = 0,
) -> BatchResult:
    """
    Submit at most one batch of documents.

    ``submit`` is called exactly once with ``documents[offset:offset + batch_size]``.
    Documents past the batch are not sent; a notice tells the user how many
    are left so they can be imported in a separate operation.

    Args:
        documents: Normalized document records
        submit: Create-many call; its reply may carry a ``count``
        batch_size: Maximum documents per submission (default: 50)
        offset: Index of the first document to send

    Returns:
        BatchResult with submitted/remaining counts and user-facing notices

    Raises:
        NoValidDocumentsError: If there is nothing to submit
        ValueError: If batch_size or offset is out of range
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    if not documents:
        raise NoValidDocumentsError("No valid documents found to import")
    if offset < 0 or offset >= len(documents):
        raise ValueError(
            f"offset {offset} is outside the {len(documents)} normalized documents"
        )

    pending = documents[offset:]
    batch = pending[:batch_size]
    remaining = len(pending) - len(batch)
    notices: List[str] = []

    if remaining:
        logger.info(
            "Large document set detected (%d items). Importing first batch of %d",
            len(pending),
            len(batch),
        )
        notices.append(f"Processing {len(pending)} documents in smaller batches...")
    else:
        logger.info("Importing %d documents", len(batch))

    t0 = time.time()
    response = submit(batch)

    imported_count: Optional[int] = None
    if isinstance(response, dict) and isinstance(response.get("count"), int):
        imported_count = response["count"]

    logger.info(
        "✓ Submitted %d documents in %.2fs (server count=%s)",
        len(batch),
        time.time() - t0,
        imported_count,
    )
    notices.append(
        f"{imported_count} documents imported successfully"
        if imported_count
        else "Documents imported successfully"
    )

    if remaining:
        notices.append(
            f"{remaining} additional documents can be imported in a separate operation"
        )
        logger.info(
            "%d documents not submitted; rerun with --offset %d to import them",
            remaining,
            offset + len(batch),
        )

    return BatchResult(
        submitted=len(batch),
        remaining=remaining,
        offset=offset,
        imported_count=imported_count,
        notices=notices,
    )


def run_import(
    input_path: Optional[Union[Path, str]] = None,
    text: Optional[str] = None,
    client: Optional[SharaiClient] = None,
    output_dir: Optional[Union[Path, str]] = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
    offset: int = 0,
    dry_run: bool = False,
    keep_history: bool = True,
) -> ImportReport:
    """
    Run a document import end to end.

    Pipeline Steps:
    1. Read the input (file or text) and parse it as JSON
    2. Detect the input format
    3. Validate / flatten into document records
    4. Save the normalized documents (when output_dir is given)
    5. Submit one batch to the backend

    Args:
        input_path: JSON file to import (read as UTF-8)
        text: JSON text to import, used when input_path is not given
        client: Backend client; required unless dry_run
        output_dir: Directory for normalized documents and run metadata
        batch_size: Maximum documents submitted in this run
        offset: Index of the first normalized document to submit
        dry_run: Normalize only; nothing is submitted or written
        keep_history: Timestamp output files instead of overwriting them

    Returns:
        ImportReport describing the run

    Raises:
        FileNotFoundError: If input_path doesn't exist
        EmptyInputError, ParseError: If the input is blank or not JSON
        UnsupportedFormatError: If the JSON is neither format
        NoValidDocumentsError: If nothing survives normalization
        ApiError: If the backend rejects the submission
    """
    if input_path is None and text is None:
        raise ValueError("Either input_path or text is required")
    if client is None and not dry_run:
        raise ValueError("A client is required unless dry_run is set")

    run_timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    job_start = time.time()
    logger.debug("Starting import run: import_%s", run_timestamp)

    # ========== STEP 1: READ AND PARSE ==========
    t0 = time.time()
    logger.info("STEP 1/5: Reading import data")
    try:
        if input_path is not None:
            input_path = Path(input_path)
            text = read_import_file(input_path)
        parsed = parse_import_text(text)
        logger.info("✓ Parsed JSON in %.2fs", time.time() - t0)
    except FileNotFoundError:
        logger.error("Input file not found: %s", input_path)
        raise
    except DocumentImportError as e:
        logger.error("Could not parse import data: %s", e)
        raise

    # ========== STEP 2: DETECT FORMAT ==========
    logger.info("STEP 2/5: Detecting input format")
    try:
        decoded = detect_format(parsed)
    except DocumentImportError as e:
        logger.error("%s", e)
        raise

    # ========== STEP 3: NORMALIZE ==========
    t2 = time.time()
    logger.info("STEP 3/5: Normalizing documents")
    try:
        result = normalize(decoded)
    except NoValidDocumentsError as e:
        logger.error("%s (%d records skipped)", e, len(e.skipped))
        raise

    for skip in result.skipped:
        logger.warning("Skipped %s: %s", skip.location, skip.reason)

    logger.info(
        "✓ Normalized %d documents in %.2fs (valid=%d, skipped=%d)",
        result.total_candidates,
        time.time() - t2,
        len(result.documents),
        len(result.skipped),
    )

    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    if offset < 0 or offset >= len(result.documents):
        raise ValueError(
            f"offset {offset} is outside the {len(result.documents)} normalized documents"
        )

    report = ImportReport(
        format=result.format,
        total_candidates=result.total_candidates,
        valid=len(result.documents),
        skipped=result.skipped,
        dry_run=dry_run,
    )

    if dry_run:
        logger.info("DRY RUN: skipping output files and submission")
        return report

    # ========== STEP 4: SAVE NORMALIZED DOCUMENTS ==========
    output_paths: Dict[str, Path] = {}
    if output_dir is not None:
        logger.info("STEP 4/5: Saving normalized documents")
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        filename = f"normalized_{run_timestamp}.json" if keep_history else "normalized.json"
        normalized_path = output_dir / filename
        try:
            with normalized_path.open("w", encoding="utf-8") as f:
                json.dump(result.documents, f, ensure_ascii=False, indent=2)
        except OSError:
            logger.exception("Failed to save normalized documents")
            raise
        output_paths["normalized"] = normalized_path
        logger.info("✓ Wrote %d documents to %s", len(result.documents), normalized_path.name)
    else:
        logger.info("STEP 4/5: No output directory given; not saving documents")

    # ========== STEP 5: SUBMIT ==========
    logger.info("STEP 5/5: Submitting documents")
    try:
        batch = dispatch_batch(
            result.documents,
            client.import_documents,
            batch_size=batch_size,
            offset=offset,
        )
    except Exception:
        logger.exception("Failed to import documents")
        raise

    report.batch = batch

    if output_dir is not None:
        metadata_path = _save_metadata(output_dir, run_timestamp, keep_history, {
            "input_file": str(input_path) if input_path is not None else None,
            "format": result.format.value,
            "total_candidates": result.total_candidates,
            "valid": len(result.documents),
            "skipped": [s.model_dump() for s in result.skipped],
            "submitted": batch.submitted,
            "remaining": batch.remaining,
            "offset": batch.offset,
            "imported_count": batch.imported_count,
            "outputs": {k: str(v) for k, v in output_paths.items()},
            "duration_seconds": time.time() - job_start,
        })
        if metadata_path is not None:
            output_paths["metadata"] = metadata_path

    report.output_paths = output_paths
    return report


def _save_metadata(
    output_dir: Path,
    run_timestamp: str,
    keep_history: bool,
    metadata: Dict[str, Any],
) -> Optional[Path]:
    """Save import run metadata."""
    if keep_history:
        meta_filename = f"import_metadata_{run_timestamp}.json"
    else:
        meta_filename = "import_metadata.json"

    meta_path = output_dir / meta_filename
    metadata["timestamp"] = run_timestamp

    try:
        with meta_path.open("w", encoding="utf-8") as f:
            json.dump(metadata, f, ensure_ascii=False, indent=2)
        logger.info("✓ Saved: %s", meta_filename)
    except OSError:
        logger.warning("Failed to save metadata (non-fatal)", exc_info=True)
        return None
    return meta_path
