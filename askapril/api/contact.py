"""API endpoints for contact form and newsletter signups."""

from typing import Any

from fastapi import APIRouter, Body

from askapril.api.errors import http_error, internal_error
from askapril.core.contact import submit_contact, subscribe_newsletter
from askapril.core.errors import AprilError
from askapril.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/contact")
async def contact(form: dict[str, Any] = Body(...)) -> dict[str, Any]:
    """
    Record a contact form submission.

    Raises:
        HTTPException 400: If name, email, subject or message is missing
    """
    try:
        submit_contact(form)
    except AprilError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.exception(f"Contact submission failed: {e}")
        raise internal_error("Failed to submit contact form") from e

    return {"success": True, "message": "Thanks for reaching out! We'll be in touch soon."}


@router.post("/newsletter")
async def newsletter(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    """
    Subscribe an email address to the newsletter.

    Raises:
        HTTPException 400: If the email is missing or invalid
    """
    try:
        subscribe_newsletter(payload.get("email"), payload.get("name"))
    except AprilError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.exception(f"Newsletter signup failed: {e}")
        raise internal_error("Failed to subscribe") from e

    return {"success": True, "message": "You're subscribed!"}
