"""Document Transformation Module

Turns decoded import input into normalized document records.

Key responsibilities:
  - Validate flat-array documents, dropping malformed elements
  - Flatten the topic/question tree into one document per question
  - Derive a category tag from a topic title
  - Check documents entered one at a time through the admin form

Dropped elements are never fatal: each one is returned as a SkipRecord so the
caller can report why it was left out.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from pydantic import ValidationError

from .errors import DocumentValidationError, NoValidDocumentsError
from .loaders import DecodedImport
from .models import (
    CategoryTag,
    DEFAULT_CATEGORY,
    ImportDocument,
    ImportFormat,
    NormalizationResult,
    SkipRecord,
    Source,
    TITLE_MAX_CHARS,
)

logger = logging.getLogger(__name__)

# Order matters: the first keyword found in the title decides the tag.
CATEGORY_KEYWORDS: Tuple[Tuple[str, CategoryTag], ...] = (
    ("aqidah", CategoryTag.AQIDAH),
    ("belief", CategoryTag.AQIDAH),
    ("tawhid", CategoryTag.AQIDAH),
    ("fiqh", CategoryTag.FIQH),
    ("jurisprudence", CategoryTag.FIQH),
    ("family", CategoryTag.FAMILY),
    ("marriage", CategoryTag.FAMILY),
    ("worship", CategoryTag.WORSHIP),
    ("salah", CategoryTag.WORSHIP),
    ("prayer", CategoryTag.WORSHIP),
    ("quran", CategoryTag.QURAN),
    ("hadith", CategoryTag.HADITH),
    ("sunnah", CategoryTag.HADITH),
    ("ethics", CategoryTag.ETHICS),
    ("manners", CategoryTag.ETHICS),
    ("history", CategoryTag.HISTORY),
)

MISSING_URL_TEXT = "Source not provided"
DESCRIPTION_SOURCE_TITLE = "Description"
SUMMARY_SOURCE_TITLE = "Summary"

FLAT_REQUIRED_FIELDS = ("title", "content", "type")
QUESTION_REQUIRED_FIELDS = ("title", "question", "answer")


# ---------------------------------------------------------------------------
# Flat array
# ---------------------------------------------------------------------------


def flat_document_problem(doc: Any) -> Optional[str]:
    if not isinstance(doc, dict):
        return f"expected an object, got {type(doc).__name__}"
    for field in FLAT_REQUIRED_FIELDS:
        if not doc.get(field):
            return f"missing or empty '{field}'"
    if not isinstance(doc.get("sources"), list):
        return "'sources' is not an array"
    return None


def validate_flat_documents(
    items: Iterable[Any],
) -> Tuple[List[Dict[str, Any]], List[SkipRecord]]:
    """
    Keep the flat-array elements that look like documents.

    An element is kept when it has a non-empty title, content and type and
    its ``sources`` is an array. The array may be empty and ``type`` is not
    checked against the known category tags. Kept elements are returned
    unchanged and in input order.

    Returns:
        (valid documents, skip records for the dropped elements)
    """
    valid: List[Dict[str, Any]] = []
    skipped: List[SkipRecord] = []

    for idx, doc in enumerate(items):
        problem = flat_document_problem(doc)
        if problem:
            logger.debug("Skipping invalid document at index %d: %s", idx, problem)
            skipped.append(SkipRecord(location=f"[{idx}]", reason=problem))
            continue
        valid.append(doc)

    logger.info(
        "%d valid documents found after filtering (%d skipped)",
        len(valid),
        len(skipped),
    )
    return valid, skipped


# ---------------------------------------------------------------------------
# Topic tree
# ---------------------------------------------------------------------------


def derive_category(title: str) -> CategoryTag:
    """Map a topic title to a category tag, defaulting to fiqh."""
    lower_title = title.lower()
    for keyword, tag in CATEGORY_KEYWORDS:
        if keyword in lower_title:
            return tag
    return DEFAULT_CATEGORY


def _topic_problem(topic: Any) -> Optional[str]:
    if not isinstance(topic, dict):
        return f"expected an object, got {type(topic).__name__}"
    for field in ("title", "description"):
        if not topic.get(field):
            return f"missing or empty '{field}'"
    if not isinstance(topic.get("questions"), list):
        return "'questions' is not an array"
    if not isinstance(topic["title"], str):
        return "'title' is not a string"
    return None


def question_to_document(
    topic: Dict[str, Any],
    question: Dict[str, Any],
    category: CategoryTag,
) -> ImportDocument:
    """
    Build the document for one question of a topic.

    The title is trimmed and cut to 200 characters, the content joins the
    question and the answer with a blank line, and the sources cite the topic,
    its description and, when present, the question summary.

    Raises:
        AttributeError: If title/question/answer are not strings
        ValidationError: If a source value is not a string
    """
    sources = [
        Source(title=topic["title"], text=question.get("url") or MISSING_URL_TEXT),
        Source(title=DESCRIPTION_SOURCE_TITLE, text=topic["description"]),
    ]
    if question.get("summary"):
        sources.append(Source(title=SUMMARY_SOURCE_TITLE, text=question["summary"]))

    return ImportDocument(
        title=question["title"].strip()[:TITLE_MAX_CHARS],
        content=question["question"].strip() + "\n\n" + question["answer"].strip(),
        type=category.value,
        sources=sources,
    )


def flatten_topic_tree(
    topics: Dict[str, Any],
) -> Tuple[List[ImportDocument], List[SkipRecord]]:
    """
    Flatten a topic tree into one document per question.

    Invalid topics and questions are skipped. A question that fails while
    being converted is skipped on its own; the rest of the tree is still
    processed.

    Args:
        topics: Mapping of topic id to topic object

    Returns:
        (documents, skip records)
    """
    documents: List[ImportDocument] = []
    skipped: List[SkipRecord] = []

    logger.debug("Processing topic tree with %d topics", len(topics))

    for topic_id, topic in topics.items():
        problem = _topic_problem(topic)
        if problem:
            logger.debug("Skipping invalid topic %s: %s", topic_id, problem)
            skipped.append(SkipRecord(location=str(topic_id), reason=problem))
            continue

        category = derive_category(topic["title"])
        logger.debug(
            "Processing topic %s: %s with %d questions (type=%s)",
            topic_id,
            topic["title"],
            len(topic["questions"]),
            category.value,
        )

        for index, question in enumerate(topic["questions"]):
            location = f"{topic_id}.questions[{index}]"

            if not isinstance(question, dict):
                skipped.append(SkipRecord(
                    location=location,
                    reason=f"expected an object, got {type(question).__name__}",
                ))
                continue

            missing = [f for f in QUESTION_REQUIRED_FIELDS if not question.get(f)]
            if missing:
                logger.debug("Skipping invalid question %s: missing %s", location, missing)
                skipped.append(SkipRecord(
                    location=location,
                    reason="missing or empty " + ", ".join(f"'{f}'" for f in missing),
                ))
                continue

            try:
                document = question_to_document(topic, question, category)
            except (AttributeError, TypeError, ValueError) as e:
                logger.warning("Error processing question %s: %s", location, e)
                skipped.append(SkipRecord(location=location, reason=f"could not be processed: {e}"))
                continue

            documents.append(document)

    logger.info(
        "Processed %d documents from topic tree (%d skipped)",
        len(documents),
        len(skipped),
    )
    return documents, skipped


# ---------------------------------------------------------------------------
# Dispatch on decoded format
# ---------------------------------------------------------------------------


def normalize(decoded: DecodedImport) -> NormalizationResult:
    """Validate or flatten decoded input into document records.

    Raises:
        NoValidDocumentsError: If no document survives
    """
    if decoded.kind == ImportFormat.FLAT_ARRAY:
        logger.info("Importing array with %d documents", len(decoded.items))
        documents, skipped = validate_flat_documents(decoded.items)
    else:
        logger.info("Importing topic tree with %d topics", len(decoded.topics))
        flattened, skipped = flatten_topic_tree(decoded.topics)
        documents = [doc.model_dump() for doc in flattened]

    if not documents:
        raise NoValidDocumentsError("No valid documents found to import", skipped)

    return NormalizationResult(
        format=decoded.kind,
        documents=documents,
        skipped=skipped,
        total_candidates=len(documents) + len(skipped),
    )


def validate_new_document(
    title: str,
    content: str,
    type: str,
    sources: List[Union[Source, Dict[str, Any]]],
) -> ImportDocument:
    """
    Check a document entered through the admin form.

    Stricter than the flat-array import: the type must be a known category
    tag and at least one source with a title and text is required.

    Raises:
        DocumentValidationError: If any rule fails
    """
    if not (title or "").strip() or not (content or "").strip() or not type:
        raise DocumentValidationError(
            "All fields are required and at least one source must be added"
        )
    if type not in {tag.value for tag in CategoryTag}:
        raise DocumentValidationError(f"Unknown document type: {type}")
    if not sources:
        raise DocumentValidationError(
            "All fields are required and at least one source must be added"
        )

    checked: List[Source] = []
    for source in sources:
        try:
            source = source if isinstance(source, Source) else Source.model_validate(source)
        except ValidationError as e:
            raise DocumentValidationError(f"Invalid source: {e}") from e
        if not source.title.strip() or not source.text.strip():
            raise DocumentValidationError("Source title and text are required")
        checked.append(source)

    try:
        return ImportDocument(title=title, content=content, type=type, sources=checked)
    except ValidationError as e:
        raise DocumentValidationError(str(e)) from e
