"""Backend API Client

Thin HTTP client for the question-answering backend. Every method is a direct
pass-through to one endpoint: the backend owns persistence, answer
generation, language detection and vector search.

Transport failures from ``requests`` propagate unchanged; non-2xx responses
raise ApiError. Nothing is retried locally.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from .errors import ApiError
from .models import (
    AnswerRecord,
    ApiKey,
    Feedback,
    GeneratedAnswer,
    HealthStatus,
    ImportDocument,
    QuestionRecord,
    Stats,
    StoredDocument,
    VectorDocument,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000"
DEFAULT_TIMEOUT = 30.0

FEEDBACK_FILTERS = ("all", "positive", "negative", "report")


class SharaiClient:
    """Session-backed client for the backend REST API.

    The underlying ``requests.Session`` keeps the admin session cookie
    between ``login`` and later admin calls.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    # ------------------------------------------------------------------
    # plumbing
    # ------------------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s params=%s", method, url, params)

        response = self.session.request(
            method,
            url,
            json=json,
            params=params,
            timeout=self.timeout,
        )

        if not response.ok:
            message = (response.text or "").strip() or response.reason or "Request failed"
            logger.debug("%s %s failed: %d %s", method, url, response.status_code, message)
            raise ApiError(response.status_code, message)

        if not response.content:
            return None
        return response.json()

    # ------------------------------------------------------------------
    # documents
    # ------------------------------------------------------------------

    def import_documents(self, documents: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Create many documents in one call; the reply carries a ``count``."""
        logger.debug("Sending %d documents to server", len(documents))
        return self._request(
            "POST", "/api/admin/documents/import", json={"documents": documents}
        ) or {}

    def add_document(self, document: ImportDocument) -> StoredDocument:
        data = self._request("POST", "/api/admin/documents", json=document.model_dump())
        return StoredDocument.model_validate(data)

    def list_documents(self, page: int = 1) -> List[StoredDocument]:
        data = self._request("GET", "/api/admin/documents", params={"page": page}) or []
        return [StoredDocument.model_validate(d) for d in data]

    def delete_document(self, document_id: int) -> None:
        self._request("DELETE", f"/api/admin/documents/{document_id}", json={})

    def set_document_active(self, document_id: int, is_active: bool) -> None:
        self._request(
            "PATCH", f"/api/admin/documents/{document_id}", json={"isActive": is_active}
        )

    def export_documents(self) -> Any:
        return self._request("GET", "/api/admin/documents/export")

    # ------------------------------------------------------------------
    # api keys
    # ------------------------------------------------------------------

    def list_api_keys(self) -> List[ApiKey]:
        data = self._request("GET", "/api/admin/api-keys") or []
        return [ApiKey.model_validate(k) for k in data]

    def add_api_key(self, service: str, key: str) -> Any:
        return self._request("POST", "/api/admin/api-keys", json={"service": service, "key": key})

    def set_api_key_active(self, key_id: int, is_active: bool) -> None:
        self._request("PATCH", f"/api/admin/api-keys/{key_id}", json={"isActive": is_active})

    # ------------------------------------------------------------------
    # feedback
    # ------------------------------------------------------------------

    def list_feedback(self, page: int = 1, filter: str = "all") -> List[Feedback]:
        if filter not in FEEDBACK_FILTERS:
            raise ValueError(f"Unknown feedback filter: {filter}")
        params: Dict[str, Any] = {"page": page}
        if filter != "all":
            params["filter"] = filter
        data = self._request("GET", "/api/admin/feedback", params=params) or []
        return [Feedback.model_validate(f) for f in data]

    def delete_feedback(self, feedback_id: int) -> None:
        self._request("DELETE", f"/api/admin/feedback/{feedback_id}", json={})

    def submit_feedback(self, answer_id: int, type: str, comment: Optional[str] = None) -> Any:
        return self._request(
            "POST",
            "/api/feedback",
            json={"answerId": answer_id, "type": type, "comment": comment},
        )

    # ------------------------------------------------------------------
    # dashboard
    # ------------------------------------------------------------------

    def get_stats(self) -> Stats:
        return Stats.model_validate(self._request("GET", "/api/admin/stats"))

    def get_health(self) -> HealthStatus:
        return HealthStatus.model_validate(self._request("GET", "/api/admin/health"))

    # ------------------------------------------------------------------
    # questions and answers
    # ------------------------------------------------------------------

    def recent_questions(self) -> List[QuestionRecord]:
        data = self._request("GET", "/api/questions/recent") or []
        return [QuestionRecord.model_validate(q) for q in data]

    def create_question(self, text: str, language: str) -> QuestionRecord:
        data = self._request("POST", "/api/questions", json={"text": text, "language": language})
        return QuestionRecord.model_validate(data)

    def get_answer_for_question(self, question_id: int) -> Optional[AnswerRecord]:
        data = self._request("GET", f"/api/answers/question/{question_id}")
        return AnswerRecord.model_validate(data) if data else None

    def generate_answer(self, question_id: int) -> GeneratedAnswer:
        data = self._request("GET", f"/api/answers/generate/{question_id}")
        return GeneratedAnswer.model_validate(data)

    def detect_language(self, text: str) -> Optional[str]:
        data = self._request("POST", "/api/language/detect", json={"text": text}) or {}
        return data.get("language")

    # ------------------------------------------------------------------
    # vector database
    # ------------------------------------------------------------------

    def search_vector_db(self, query: str, limit: int = 5) -> List[VectorDocument]:
        data = self._request("POST", "/api/vector/search", json={"query": query, "limit": limit}) or {}
        return [VectorDocument.model_validate(d) for d in data.get("results") or []]

    def add_vector_document(self, document: VectorDocument) -> Dict[str, Any]:
        return self._request(
            "POST", "/api/vector/documents", json=document.model_dump(exclude_none=True)
        )

    def delete_vector_document(self, document_id: str) -> None:
        self._request("DELETE", f"/api/vector/documents/{document_id}")

    def clear_vector_documents(self) -> None:
        self._request("DELETE", "/api/vector/documents")

    # ------------------------------------------------------------------
    # admin session
    # ------------------------------------------------------------------

    def login(self, username: str, password: str) -> Any:
        return self._request(
            "POST", "/api/admin/login", json={"username": username, "password": password}
        )

    def logout(self) -> None:
        self._request("POST", "/api/admin/logout", json={})
