"""Import File Validation Script

Checks a JSON import file without contacting the backend:
  - The file parses and matches one of the supported formats
  - Which records would be skipped, and why
  - Flat-array documents with an empty sources array (warning, or error
    with --strict)
  - Flat-array documents whose type is not a known category tag (warning)

Usage:
    python -m src.sharai_client.scripts.validate_import \\
        --path data/topics.json --strict

Exits with code 0 on success, 1 on validation failure, 2 on argument error.
"""

#!/usr/bin/env python
import argparse
from pathlib import Path
from typing import Any, List, Tuple

from src.sharai_client.errors import DocumentImportError
from src.sharai_client.loaders import (
    DecodedImport,
    detect_format,
    parse_import_text,
    read_import_file,
)
from src.sharai_client.models import CategoryTag, ImportFormat
from src.sharai_client.transformers import flat_document_problem, flatten_topic_tree

KNOWN_TYPES = {tag.value for tag in CategoryTag}


def load_import(path: Path) -> DecodedImport:
    """Read, parse and decode an import file.

    Raises:
        FileNotFoundError, DocumentImportError
    """
    return detect_format(parse_import_text(read_import_file(path)))


def validate_flat_document(
    doc: Any,
    idx: int,
    strict: bool,
) -> Tuple[List[str], List[str], bool]:
    """Validate a single flat-array element.

    Returns:
        (errors, warnings, importable)
    """
    errors: List[str] = []
    warnings: List[str] = []

    problem = flat_document_problem(doc)
    if problem:
        warnings.append(f"[idx={idx}] will be skipped: {problem}")
        return errors, warnings, False

    if not doc["sources"]:
        message = f"[idx={idx}] has an empty 'sources' array"
        if strict:
            errors.append(message)
        else:
            warnings.append(message)

    if doc["type"] not in KNOWN_TYPES:
        warnings.append(f"[idx={idx}] unknown type {doc['type']!r}")

    return errors, warnings, True


def validate_import(decoded: DecodedImport, strict: bool = False) -> Tuple[List[str], List[str], int]:
    """Validate a decoded import.

    Returns:
        (errors, warnings, number of importable documents)
    """
    errors: List[str] = []
    warnings: List[str] = []
    importable = 0

    if decoded.kind == ImportFormat.FLAT_ARRAY:
        for idx, doc in enumerate(decoded.items):
            doc_errors, doc_warnings, ok = validate_flat_document(doc, idx, strict)
            errors.extend(doc_errors)
            warnings.extend(doc_warnings)
            importable += int(ok)
    else:
        documents, skipped = flatten_topic_tree(decoded.topics)
        importable = len(documents)
        for skip in skipped:
            warnings.append(f"[{skip.location}] will be skipped: {skip.reason}")

    if importable == 0:
        errors.append("No valid documents found to import")

    return errors, warnings, importable


def main(argv: list[str] | None = None) -> None:
    """Validate an import file.

    Raises:
        SystemExit: With code 0 on success, 1 on validation failure
    """
    parser = argparse.ArgumentParser(
        description="Validate a document import JSON file."
    )
    parser.add_argument(
        "--path",
        type=str,
        required=True,
        help="Path to the JSON file to import",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat flat-array documents without sources as errors.",
    )
    args = parser.parse_args(argv)

    path = Path(args.path)

    try:
        decoded = load_import(path)
    except (OSError, DocumentImportError) as e:
        print(f"FAILED TO LOAD FILE: {e}")
        raise SystemExit(1)

    errors, warnings, importable = validate_import(decoded, strict=args.strict)

    if errors:
        print("VALIDATION FAILED:\n")
        for err in errors:
            print(err)
        print(f"\nTotal errors: {len(errors)}")
        if warnings:
            print(f"Total warnings: {len(warnings)}")
        raise SystemExit(1)

    print("VALIDATION PASSED")
    print(f"Format: {decoded.kind.value}")
    print(f"Importable documents: {importable}")
    if warnings:
        print("\nWarnings (non-fatal):")
        for w in warnings:
            print(w)
        print(f"\nTotal warnings: {len(warnings)}")

    raise SystemExit(0)


if __name__ == "__main__":
    main()
