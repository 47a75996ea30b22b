"""Contact form and newsletter database operations."""

from datetime import datetime, timezone  # noqa: UP035

from askapril.core.errors import PersistenceError
from askapril.core.logging import get_logger
from askapril.db.supabase_client import get_supabase

logger = get_logger(__name__)


def _utc_now_iso() -> str:
    """Get current UTC time as ISO string."""
    return datetime.now(timezone.utc).isoformat()  # noqa: UP017


def insert_contact_submission(
    name: str,
    email: str,
    subject: str,
    message: str,
    company: str | None = None,
    industry: str | None = None,
) -> None:
    """
    Record a contact form submission.

    Raises:
        PersistenceError: If the insert fails
    """
    supabase = get_supabase()

    try:
        supabase.table("contact_submissions").insert(
            {
                "name": name,
                "email": email,
                "company": company or None,
                "industry": industry or None,
                "subject": subject,
                "message": message,
                "submitted_at": _utc_now_iso(),
                "status": "new",
            }
        ).execute()
        logger.info(f"Contact submission recorded for {email}")
    except Exception as e:
        logger.error(f"Failed to record contact submission: {e}")
        raise PersistenceError(str(e)) from e


def insert_newsletter_subscriber(email: str, name: str | None = None) -> None:
    """
    Record a newsletter subscription.

    Raises:
        PersistenceError: If the insert fails
    """
    supabase = get_supabase()

    try:
        supabase.table("newsletter_subscribers").insert(
            {
                "email": email,
                "name": name,
                "subscribed_at": _utc_now_iso(),
                "status": "active",
            }
        ).execute()
        logger.info(f"Newsletter subscriber recorded: {email}")
    except Exception as e:
        logger.error(f"Failed to record newsletter subscriber: {e}")
        raise PersistenceError(str(e)) from e
