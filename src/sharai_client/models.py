"""Data Models Module

Defines Pydantic models for the records that flow through the client:
import-time documents and their citations, the bookkeeping produced while
normalizing an import, and the admin/QA records returned by the backend API.
"""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional, Dict, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


TITLE_MAX_CHARS = 200


class CategoryTag(str, Enum):
    """Subject classification assigned to a document."""
    FIQH = "fiqh"
    AQIDAH = "aqidah"
    QURAN = "quran"
    HADITH = "hadith"
    FAMILY = "family"
    WORSHIP = "worship"
    ETHICS = "ethics"
    HISTORY = "history"


DEFAULT_CATEGORY = CategoryTag.FIQH


class ImportFormat(str, Enum):
    FLAT_ARRAY = "flat_array"
    TOPIC_TREE = "topic_tree"


class Source(BaseModel):
    """A citation: a title plus its supporting text."""
    title: str
    text: str


class ImportDocument(BaseModel):
    """Normalized document record as sent to the import endpoint.

    ``type`` is kept as a plain string because the flat-array format is
    passed through without checking it against ``CategoryTag``.
    """
    title: str = Field(..., max_length=TITLE_MAX_CHARS)
    content: str
    type: str
    sources: List[Source]


class SkipRecord(BaseModel):
    """Why one element of the input was dropped."""
    location: str
    reason: str


class NormalizationResult(BaseModel):
    format: ImportFormat
    documents: List[Dict[str, Any]]
    skipped: List[SkipRecord] = []
    total_candidates: int = 0


class BatchResult(BaseModel):
    """Outcome of a single submission to the import endpoint."""
    submitted: int
    remaining: int
    offset: int = 0
    imported_count: Optional[int] = None
    notices: List[str] = []


class ImportReport(BaseModel):
    """Everything one run of the import pipeline produced."""
    format: ImportFormat
    total_candidates: int
    valid: int
    skipped: List[SkipRecord] = []
    batch: Optional[BatchResult] = None
    dry_run: bool = False
    output_paths: Dict[str, Path] = {}

    @property
    def notices(self) -> List[str]:
        return list(self.batch.notices) if self.batch else []


# ---------------------------------------------------------------------------
# Records returned by the backend (camelCase on the wire)
# ---------------------------------------------------------------------------


class _ApiRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class StoredDocument(_ApiRecord):
    id: int
    title: str
    content: str
    type: str
    sources: List[Source] = []
    vector_id: Optional[str] = Field(None, alias="vectorId")
    is_active: bool = Field(True, alias="isActive")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")


class ApiKey(_ApiRecord):
    id: int
    service: str
    key: str
    is_active: bool = Field(True, alias="isActive")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    last_used: Optional[datetime] = Field(None, alias="lastUsed")
    usage_count: int = Field(0, alias="usageCount")


class Feedback(_ApiRecord):
    id: int
    answer_id: Optional[int] = Field(None, alias="answerId")
    type: Literal["positive", "negative", "report"]
    comment: Optional[str] = None
    created_at: Optional[datetime] = Field(None, alias="createdAt")


class QuestionRecord(_ApiRecord):
    id: int
    text: str
    language: str
    user_id: Optional[int] = Field(None, alias="userId")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    views: int = 0


class AnswerRecord(_ApiRecord):
    id: Optional[int] = None
    text: str
    sources: List[Source] = []
    question_id: Optional[int] = Field(None, alias="questionId")
    created_at: Optional[datetime] = Field(None, alias="createdAt")


class GeneratedAnswer(_ApiRecord):
    answer: str
    sources: List[Source] = []


class Stats(_ApiRecord):
    total_questions: int = Field(0, alias="totalQuestions")
    api_requests: int = Field(0, alias="apiRequests")
    documents_count: int = Field(0, alias="documentsCount")
    system_health: str = Field("unknown", alias="systemHealth")


class ServiceHealth(_ApiRecord):
    status: Literal["healthy", "degraded", "down"]
    latency: float = 0.0


class HealthStatus(_ApiRecord):
    status: Literal["healthy", "degraded", "down"]
    uptime: float = 0.0
    last_check: Optional[datetime] = Field(None, alias="lastCheck")
    services: Dict[str, ServiceHealth] = {}


class VectorDocument(_ApiRecord):
    """Document format used by the vector database endpoints."""
    id: str
    title: str
    content: str
    type: str
    sources: List[Source] = []
    metadata: Optional[Dict[str, Any]] = None
