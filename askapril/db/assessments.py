"""Accountability assessment database operations."""

from typing import Any

from askapril.core.errors import PersistenceError
from askapril.core.logging import get_logger
from askapril.db.supabase_client import get_supabase

logger = get_logger(__name__)

RECENT_ASSESSMENT_COLUMNS = "id, first_name, percentage_score, priority_step_name, completed_at"


def insert_assessment(record: dict[str, Any]) -> dict[str, Any]:
    """
    Insert one assessment row.

    Args:
        record: Column values for accountability_assessments

    Returns:
        The stored row (including its generated id)

    Raises:
        PersistenceError: If the insert fails or returns no row
    """
    supabase = get_supabase()

    try:
        response = supabase.table("accountability_assessments").insert(record).execute()
    except Exception as e:
        logger.error(f"Failed to insert assessment: {e}")
        raise PersistenceError(str(e)) from e

    if not response.data:
        logger.error("No data returned from insert_assessment")
        raise PersistenceError("No data returned from assessment insert")

    stored = response.data[0]
    logger.info(f"Assessment saved: {stored.get('id')}")
    return stored


def get_company_analytics(company_code: str) -> dict[str, Any] | None:
    """
    Get the precomputed aggregate row for a company.

    Args:
        company_code: Company code (already trimmed)

    Returns:
        Analytics dict or None if no aggregate exists yet

    Raises:
        Exception: If database operation fails
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table("company_analytics")
            .select("*")
            .eq("company_code", company_code)
            .maybe_single()
            .execute()
        )
        return response.data if response else None
    except Exception as e:
        logger.error(f"Failed to get company analytics for {company_code}: {e}")
        raise


def list_recent_company_assessments(company_code: str, limit: int = 10) -> list[dict[str, Any]]:
    """
    List the most recently completed assessments for a company.

    Args:
        company_code: Company code
        limit: Maximum rows to return

    Returns:
        Assessment summaries ordered by completed_at desc

    Raises:
        Exception: If database operation fails
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table("accountability_assessments")
            .select(RECENT_ASSESSMENT_COLUMNS)
            .eq("company_code", company_code)
            .order("completed_at", desc=True)
            .limit(limit)
            .execute()
        )
        return response.data or []
    except Exception as e:
        logger.error(f"Failed to list assessments for {company_code}: {e}")
        raise
