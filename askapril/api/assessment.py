"""API endpoints for the accountability assessment."""

from typing import Any

from fastapi import APIRouter, Body, Query

from askapril.api.errors import http_error, internal_error
from askapril.core.assessments import get_company_analytics_view, submit
from askapril.core.errors import AprilError
from askapril.core.logging import get_logger
from askapril.core.schemas_assessment import AssessmentResponse, CompanyAnalyticsResponse

logger = get_logger(__name__)

router = APIRouter()


@router.post("/assessment")
async def submit_assessment(payload: dict[str, Any] = Body(...)) -> AssessmentResponse:
    """
    Score and store a completed assessment.

    Raises:
        HTTPException 400: If required fields are missing or the email is invalid
        HTTPException 500: If the assessment could not be saved
    """
    try:
        result = submit(payload)
        return AssessmentResponse(data=result)

    except AprilError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.exception(f"Assessment submission failed: {e}")
        raise internal_error(str(e)) from e


@router.get("/assessment")
async def company_analytics(
    company_code: str | None = Query(default=None, alias="companyCode"),
) -> CompanyAnalyticsResponse:
    """
    Company aggregate plus the ten most recent assessments.

    Raises:
        HTTPException 400: If companyCode is missing
        HTTPException 404: If the company has no assessments yet
    """
    try:
        return get_company_analytics_view(company_code)

    except AprilError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.exception(f"Company analytics lookup failed: {e}")
        raise internal_error(str(e)) from e
