"""Question & Answer Module

Client-side flow for asking a question and reacting to its answer:
  - Validate the question text before it is sent
  - Detect its language (English when detection fails) and submit it
  - Fetch the stored answer, or ask the backend to generate one
  - Send feedback on an answer
"""

import logging
from typing import List, Optional, Union

from .api_client import SharaiClient
from .errors import ApiError, FeedbackValidationError, QuestionValidationError
from .language import detect_language
from .models import AnswerRecord, GeneratedAnswer, QuestionRecord, Source

logger = logging.getLogger(__name__)

QUESTION_MIN_CHARS = 10
QUESTION_MAX_CHARS = 500

FEEDBACK_TYPES = ("positive", "negative", "report")


def validate_question(text: str) -> str:
    """Return the stripped question text or raise QuestionValidationError.

    The 10-500 character limits apply to the stripped text, so leading and
    trailing whitespace never counts toward either bound.
    """
    text = (text or "").strip()
    if len(text) < QUESTION_MIN_CHARS:
        raise QuestionValidationError(
            f"Question must be at least {QUESTION_MIN_CHARS} characters"
        )
    if len(text) > QUESTION_MAX_CHARS:
        raise QuestionValidationError(
            f"Question cannot exceed {QUESTION_MAX_CHARS} characters"
        )
    return text


def ask_question(client: SharaiClient, text: str) -> QuestionRecord:
    """
    Validate and submit a question.

    Args:
        client: Backend client
        text: Question as typed by the user

    Returns:
        The stored question record

    Raises:
        QuestionValidationError: If the text is too short or too long
        ApiError: If the backend rejects the question
    """
    text = validate_question(text)
    language = detect_language(client, text)
    logger.info("Submitting question (language=%s, %d chars)", language, len(text))
    return client.create_question(text, language)


def fetch_answer(
    client: SharaiClient, question_id: int
) -> Union[AnswerRecord, GeneratedAnswer]:
    try:
        answer = client.get_answer_for_question(question_id)
    except ApiError as e:
        if e.status_code != 404:
            raise
        answer = None
    if answer is not None:
        return answer
    logger.info("No stored answer for question %d; generating one", question_id)
    return client.generate_answer(question_id)


def send_feedback(
    client: SharaiClient,
    answer_id: int,
    type: str,
    comment: Optional[str] = None,
) -> None:
    """Submit feedback on an answer. Reports must explain what is wrong."""
    if type not in FEEDBACK_TYPES:
        raise FeedbackValidationError(f"Unknown feedback type: {type}")
    if type == "report" and not (comment or "").strip():
        raise FeedbackValidationError("Please describe the issue you are reporting")
    client.submit_feedback(answer_id, type, comment)


def format_answer_for_copy(text: str, sources: List[Source]) -> str:
    lines = [f"- {source.title}: {source.text}" for source in sources]
    return f"{text}\n\nSources:\n" + "\n".join(lines)


def mask_api_key(key: str) -> str:
    """Hide all but the first and last four characters of an API key."""
    if len(key) <= 8:
        return "•" * len(key)
    return key[:4] + "•" * (len(key) - 8) + key[-4:]
