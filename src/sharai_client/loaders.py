"""Data Loader Module

Reads import input (pasted text or an uploaded JSON file) and decodes it into
one of the supported import formats:
  - Flat array of documents: [{"title", "content", "type", "sources"}, ...]
  - Topic tree keyed by topic id: {"<id>": {"title", "description", "questions"}}

Formats are tried in a fixed priority order and the decoded value records
which one matched.
"""

import json
import logging
from pathlib import Path
from typing import Any, ClassVar, Dict, List, Tuple, Type, Union, Literal

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import EmptyInputError, ParseError, UnsupportedFormatError
from .models import ImportFormat

logger = logging.getLogger(__name__)


class FlatArrayInput(BaseModel):
    model_config = ConfigDict(strict=True)
    payload_field: ClassVar[str] = "items"

    kind: Literal[ImportFormat.FLAT_ARRAY] = ImportFormat.FLAT_ARRAY
    items: List[Any]


class TopicTreeInput(BaseModel):
    model_config = ConfigDict(strict=True)
    payload_field: ClassVar[str] = "topics"

    kind: Literal[ImportFormat.TOPIC_TREE] = ImportFormat.TOPIC_TREE
    topics: Dict[str, Any]


DecodedImport = Union[FlatArrayInput, TopicTreeInput]

FORMAT_PRIORITY: Tuple[Type[BaseModel], ...] = (FlatArrayInput, TopicTreeInput)


def read_import_file(path: Union[str, Path]) -> str:
    """Return the full contents of an import file decoded as UTF-8.

    Raises:
        FileNotFoundError: If file does not exist
        ParseError: If the file is not valid UTF-8
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise ParseError(f"File is not valid UTF-8: {e}") from e


def _reject_constant(name: str) -> Any:
    raise ParseError(f"Invalid JSON: {name} is not a valid JSON value")


def parse_import_text(text: str) -> Any:
    """Parse import text as JSON.

    Args:
        text: Raw JSON text, pasted or read from a file

    Returns:
        The parsed JSON value

    Raises:
        EmptyInputError: If the text is empty or whitespace only
        ParseError: If the text is not valid JSON. NaN, Infinity and
            -Infinity are rejected, as is nesting deeper than the
            interpreter's recursion limit.
    """
    if text is None or not text.strip():
        raise EmptyInputError("Please provide JSON data to import")

    logger.debug("JSON data size: %d characters", len(text))
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})") from e
    except RecursionError as e:
        raise ParseError("Invalid JSON: nesting too deep") from e


def detect_format(value: Any) -> DecodedImport:
    """Decode a parsed JSON value into the first import format it fits.

    Raises:
        UnsupportedFormatError: If no known format accepts the value
    """
    for schema in FORMAT_PRIORITY:
        try:
            decoded = schema.model_validate({schema.payload_field: value})
        except ValidationError:
            logger.debug("Input does not match %s", schema.__name__)
            continue
        logger.info("Detected import format: %s", decoded.kind.value)
        return decoded

    raise UnsupportedFormatError(
        f"Unsupported JSON format: expected an array or an object, got {type(value).__name__}"
    )
