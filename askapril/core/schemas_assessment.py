"""Pydantic schemas for the accountability assessment API."""

from datetime import datetime
from typing import Any

from pydantic import Field

from askapril.core.schemas_copilot import CamelModel


class AssessmentSubmission(CamelModel):
    """Validated, normalized assessment payload."""

    first_name: str
    email: str
    company_code: str | None = None
    assessment_answers: dict[str, Any]
    total_score: float
    percentage_score: float | None = None
    completed_at: str | None = None
    source: str = "web_assessment"


class PriorityStep(CamelModel):
    name: str
    score: float


class AssessmentResult(CamelModel):
    """Denormalized view of a stored assessment."""

    id: Any
    first_name: str
    email: str
    company_code: str | None = None
    total_score: float
    percentage_score: float
    priority_step: PriorityStep
    score_description: str
    completed_at: str | datetime
    company_analytics: dict[str, Any] | None = None


class AssessmentResponse(CamelModel):
    success: bool = True
    message: str = "Assessment saved successfully"
    data: AssessmentResult


class CompanyAnalyticsResponse(CamelModel):
    success: bool = True
    company_code: str
    analytics: dict[str, Any]
    recent_assessments: list[dict[str, Any]] = Field(default_factory=list)
