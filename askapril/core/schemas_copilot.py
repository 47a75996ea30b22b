"""Pydantic schemas for the AI co-pilot document wizard."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, accepting either form on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Enums
# ============================================================================


class Stage(str, Enum):
    """Position of a conversation in its forward-only sequence."""

    GATHERING_INFO = "gathering_info"
    DOCUMENT_ANALYSIS = "document_analysis"  # upload/improve path only
    GENERATING_DOCUMENT = "generating_document"
    DOCUMENT_READY = "document_ready"


class QuestionKind(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"


class DownloadFormat(str, Enum):
    HTML = "html"
    TEXT = "text"


# ============================================================================
# Catalog
# ============================================================================


class QuestionOption(CamelModel):
    value: str
    label: str


class Question(CamelModel):
    """One catalog question shown to the user."""

    id: str
    question: str
    type: QuestionKind
    required: bool = False
    options: list[QuestionOption] | None = None
    placeholder: str | None = None


# ============================================================================
# Conversation state
# ============================================================================


class Message(CamelModel):
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime


class DocumentAnalysis(CamelModel):
    """Heuristic findings for an uploaded document."""

    word_count: int
    sections: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    gaps: list[str] = Field(default_factory=list)
    readability_score: str = "Good"
    compliance_issues: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class ImprovementSuggestion(CamelModel):
    category: str
    priority: Literal["High", "Medium", "Low"]
    items: list[str]
    description: str


class OriginalDocument(CamelModel):
    """Upload the conversation started from."""

    filename: str
    content: str
    analysis: DocumentAnalysis


class DocumentSection(CamelModel):
    title: str
    content: str


class GeneratedDocument(CamelModel):
    """Synthesized document plus both renditions."""

    title: str
    sections: list[DocumentSection]
    html_content: str
    text_content: str
    created_at: datetime
    business_info: dict[str, str] | None = None
    # Improvement path only
    original_filename: str | None = None
    improvements: list[str] = Field(default_factory=list)
    analysis_results: DocumentAnalysis | None = None


class Conversation(CamelModel):
    """One in-progress document-creation session."""

    id: str
    document_type: str
    stage: Stage
    collected_info: dict[str, str] = Field(default_factory=dict)
    business_info: dict[str, Any] = Field(default_factory=dict)
    messages: list[Message] = Field(default_factory=list)
    original_document: OriginalDocument | None = None
    generated_document: GeneratedDocument | None = None
    created_at: datetime
    updated_at: datetime


# ============================================================================
# Requests
# ============================================================================


class StartConversationRequest(CamelModel):
    document_type: str | None = None
    business_info: dict[str, Any] | None = None


class ContinueConversationRequest(CamelModel):
    conversation_id: str
    answers: dict[str, Any] | None = None
    message: str | None = None


# ============================================================================
# Responses
# ============================================================================


class StartConversationResponse(CamelModel):
    conversation_id: str
    message: str
    questions: list[Question]
    estimated_time: str
    next_step: str = "answer_questions"


class UploadAnalysisResponse(CamelModel):
    conversation_id: str
    message: str
    analysis: DocumentAnalysis
    suggestions: list[ImprovementSuggestion]
    next_step: str = "review_analysis"


class ContinueConversationResponse(CamelModel):
    message: str
    next_step: str
    questions: list[Question] | None = None
    status: str | None = None
    document: GeneratedDocument | None = None


class ConversationStatusResponse(CamelModel):
    status: Stage
    progress: int
    estimated_time_remaining: str
    document: GeneratedDocument | None = None
    message: str | None = None


@dataclass
class DocumentDownload:
    """Rendered bytes ready to be sent as an attachment."""

    content: bytes
    filename: str
    media_type: str
