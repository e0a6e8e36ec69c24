"""Export all documents from the backend to a JSON file.

Usage:
    python -m src.sharai_client.scripts.export_documents --output islamic_qa_documents.json
"""

import argparse
import json
import logging
from pathlib import Path

import requests

from src.sharai_client.api_client import SharaiClient
from src.sharai_client.config import load_settings
from src.sharai_client.errors import ApiError

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_FILE = "islamic_qa_documents.json"


def export_documents(client: SharaiClient, output: Path) -> Path:
    data = client.export_documents()
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    logger.info("Exported documents to %s", output)
    return output


def main(argv=None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    settings = load_settings()

    parser = argparse.ArgumentParser(description="Export documents from the backend")
    parser.add_argument("--output", type=Path, default=Path(DEFAULT_EXPORT_FILE))
    parser.add_argument("--base-url", default=settings.api_url)
    args = parser.parse_args(argv)

    client = SharaiClient(base_url=args.base_url, timeout=settings.api_timeout)
    try:
        export_documents(client, args.output)
    except (ApiError, requests.RequestException, OSError) as e:
        logger.error("Failed to export documents: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
