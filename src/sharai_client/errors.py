"""Error Types

Exceptions raised by the import pipeline, the backend client and the
client-side form checks. Every user-visible failure is one of these, so the
CLI can report it and exit non-zero without a traceback.
"""

from typing import List, Optional


class DocumentImportError(Exception):
    """Base class for failures that stop an import before submission."""


class EmptyInputError(DocumentImportError):
    """No JSON text was supplied."""


class ParseError(DocumentImportError):
    """Input text is not valid JSON."""


class UnsupportedFormatError(DocumentImportError):
    """Parsed JSON is neither a flat array nor a topic tree."""


class NoValidDocumentsError(DocumentImportError):
    """Format was recognized but no record survived validation/flattening."""

    def __init__(self, message: str, skipped: Optional[List] = None):
        super().__init__(message)
        self.skipped = list(skipped or [])


class ApiError(Exception):
    """Non-2xx response from the backend API."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class DocumentValidationError(ValueError):
    pass


class QuestionValidationError(ValueError):
    pass


class FeedbackValidationError(ValueError):
    pass
