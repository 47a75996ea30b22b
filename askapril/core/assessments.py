"""Accountability assessment submission and company analytics."""

from datetime import datetime, timezone  # noqa: UP035
from typing import Any, Mapping

from askapril.core.errors import CompanyAnalyticsNotFoundError, ValidationError
from askapril.core.logging import get_logger
from askapril.core.schemas_assessment import (
    AssessmentResult,
    AssessmentSubmission,
    CompanyAnalyticsResponse,
    PriorityStep,
)
from askapril.core.scoring import classify_band, score
from askapril.core.validators import normalize_email, require_fields
from askapril.db import assessments as assessments_db

logger = get_logger(__name__)

REQUIRED_FIELDS = ["firstName", "email", "assessmentAnswers", "totalScore"]


def validate_submission(payload: Mapping[str, Any]) -> AssessmentSubmission:
    """
    Check and normalize a raw submission body.

    Args:
        payload: camelCase request body

    Returns:
        AssessmentSubmission with trimmed name, normalized email and code

    Raises:
        ValidationError: If a required field is absent, answers are not a
            mapping or the email is malformed
    """
    require_fields(payload, REQUIRED_FIELDS)

    answers = payload["assessmentAnswers"]
    if not isinstance(answers, dict):
        raise ValidationError("assessmentAnswers must be an object", required=REQUIRED_FIELDS)

    company_code = payload.get("companyCode")
    company_code = company_code.strip() if isinstance(company_code, str) else None

    try:
        return AssessmentSubmission(
            first_name=str(payload["firstName"]).strip(),
            email=normalize_email(str(payload["email"])),
            company_code=company_code or None,
            assessment_answers=answers,
            total_score=payload["totalScore"],
            percentage_score=payload.get("percentageScore"),
            completed_at=payload.get("completedAt"),
            source=payload.get("source") or "web_assessment",
        )
    except ValueError as e:
        # pydantic's ValidationError subclasses ValueError
        raise ValidationError(f"Invalid assessment submission: {e}") from e


def _fetch_analytics_quietly(company_code: str) -> dict[str, Any] | None:
    try:
        return assessments_db.get_company_analytics(company_code)
    except Exception as e:
        logger.warning(f"Company analytics not yet available for {company_code}: {e}")
        return None


def submit(payload: Mapping[str, Any]) -> AssessmentResult:
    """
    Validate, score and persist one assessment.

    Args:
        payload: camelCase request body

    Returns:
        AssessmentResult for the stored row

    Raises:
        ValidationError: If the payload is invalid
        PersistenceError: If the insert fails
    """
    submission = validate_submission(payload)
    result = score(submission.assessment_answers)

    percentage = (
        submission.percentage_score
        if submission.percentage_score is not None
        else result.percentage
    )
    band = classify_band(percentage)
    completed_at = submission.completed_at or datetime.now(timezone.utc).isoformat()  # noqa: UP017

    record = {
        "first_name": submission.first_name,
        "email": submission.email,
        "company_code": submission.company_code,
        "total_score": submission.total_score,
        "percentage_score": percentage,
        **{
            f"step_{i}_score": value
            for i, value in enumerate(result.step_scores().values(), start=1)
        },
        "assessment_answers": submission.assessment_answers,
        "priority_step_name": result.priority.name,
        "priority_step_score": result.priority.value,
        "score_description": band,
        "completed_at": completed_at,
        "source": submission.source,
    }

    logger.info(
        f"Processing assessment for {submission.first_name} "
        f"(company={submission.company_code}, priority={result.priority.name})"
    )
    stored = assessments_db.insert_assessment(record)

    analytics = None
    if submission.company_code:
        analytics = _fetch_analytics_quietly(submission.company_code)

    return AssessmentResult(
        id=stored.get("id"),
        first_name=stored.get("first_name", submission.first_name),
        email=stored.get("email", submission.email),
        company_code=stored.get("company_code", submission.company_code),
        total_score=stored.get("total_score", submission.total_score),
        percentage_score=stored.get("percentage_score", percentage),
        priority_step=PriorityStep(
            name=stored.get("priority_step_name", result.priority.name),
            score=stored.get("priority_step_score", result.priority.value),
        ),
        score_description=stored.get("score_description", band),
        completed_at=stored.get("completed_at", completed_at),
        company_analytics=analytics,
    )


def get_company_analytics_view(company_code: str | None) -> CompanyAnalyticsResponse:
    """
    Aggregate analytics plus the ten most recent assessments for a company.

    Raises:
        ValidationError: If no company code is given
        CompanyAnalyticsNotFoundError: If no aggregate exists yet
    """
    if not company_code or not company_code.strip():
        raise ValidationError("Company code required")

    try:
        analytics = assessments_db.get_company_analytics(company_code)
    except Exception as e:
        logger.warning(f"Company analytics lookup failed for {company_code}: {e}")
        analytics = None

    if not analytics:
        raise CompanyAnalyticsNotFoundError(company_code)

    return CompanyAnalyticsResponse(
        company_code=company_code,
        analytics=analytics,
        recent_assessments=assessments_db.list_recent_company_assessments(company_code),
    )
