"""Pydantic models for uploads, knowledge graph data and beta feedback."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from .quiz import ApiModel


class ProcessingStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class Upload(ApiModel):
    """An uploaded study material."""

    id: str
    file_name: str | None = None
    original_name: str
    file_type: str | None = None
    mime_type: str | None = None
    file_size: int = Field(default=0, ge=0)
    processing_status: ProcessingStatus = ProcessingStatus.PENDING
    created_at: datetime | None = None


class UploadError(ApiModel):
    """A per-file failure reported by the batch upload endpoint."""

    file_name: str | None = None
    error: str


class BatchUploadResponse(ApiModel):
    """Response of POST /uploads/batch."""

    message: str | None = None
    uploads: list[Upload] = Field(default_factory=list)
    errors: list[UploadError] = Field(default_factory=list)

    @field_validator("errors", mode="before")
    @classmethod
    def coerce_errors(cls, v: Any) -> Any:
        """Accept bare error strings as well as error objects."""
        if isinstance(v, list):
            return [{"error": item} if isinstance(item, str) else item for item in v]
        return v


class GraphNode(ApiModel):
    id: str
    name: str
    entity_type: str
    importance: float = 0
    description: str | None = None
    upload_id: str | None = None
    upload_name: str | None = None


class GraphEdge(ApiModel):
    id: str
    source: str
    target: str
    relationship_type: str
    strength: float = 0
    bidirectional: bool = False


class KnowledgeGraph(ApiModel):
    """Response of GET /knowledge-graph/graph."""

    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)


class FeedbackType(str, Enum):
    """Beta feedback types."""

    BUG_REPORT = "BUG_REPORT"
    FEATURE_REQUEST = "FEATURE_REQUEST"
    GENERAL = "GENERAL"
    NPS_SURVEY = "NPS_SURVEY"
    USABILITY = "USABILITY"
    PERFORMANCE = "PERFORMANCE"


class FeedbackCategory(str, Enum):
    """Product areas feedback can be filed against."""

    UPLOAD = "UPLOAD"
    FLASHCARDS = "FLASHCARDS"
    QUIZZES = "QUIZZES"
    UI_UX = "UI_UX"
    PERFORMANCE = "PERFORMANCE"
    AUTHENTICATION = "AUTHENTICATION"
    KNOWLEDGE_GRAPH = "KNOWLEDGE_GRAPH"
    OTHER = "OTHER"


class FeedbackStatus(str, Enum):
    NEW = "NEW"
    REVIEWING = "REVIEWING"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    WONT_FIX = "WONT_FIX"
    DUPLICATE = "DUPLICATE"


class FeedbackSubmission(ApiModel):
    """Body for POST /beta/feedback, validated before any request is made."""

    type: FeedbackType = Field(..., description="Feedback type")
    category: FeedbackCategory = Field(..., description="Product area")
    title: str | None = Field(None, max_length=200)
    content: str = Field(..., min_length=1, description="Feedback text")
    rating: int | None = Field(None, ge=1, le=5, description="Star rating")
    nps_score: int | None = Field(None, ge=0, le=10, description="Net promoter score")
    feature_name: str | None = None
    page_url: str | None = None
    metadata: dict[str, Any] | None = None

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        """Reject whitespace-only feedback."""
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("Feedback content is required")
        return cleaned

    model_config = {
        "json_schema_extra": {
            "example": {
                "type": "BUG_REPORT",
                "category": "QUIZZES",
                "title": "Timer keeps running after submit",
                "content": "The countdown kept going on the results screen.",
                "rating": 3,
            }
        }
    }


class FeedbackRecord(ApiModel):
    """A stored feedback item."""

    id: str
    type: FeedbackType
    category: FeedbackCategory
    title: str | None = None
    content: str = ""
    rating: int | None = None
    nps_score: int | None = None
    status: FeedbackStatus = FeedbackStatus.NEW
    resolution: str | None = None
    created_at: datetime | None = None
    resolved_at: datetime | None = None
