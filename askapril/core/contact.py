"""Contact form and newsletter signup handling."""

from typing import Any, Mapping

from askapril.core.logging import get_logger
from askapril.core.validators import normalize_email, require_fields
from askapril.db import contact as contact_db

logger = get_logger(__name__)

CONTACT_REQUIRED_FIELDS = ["name", "email", "subject", "message"]


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def submit_contact(form: Mapping[str, Any]) -> None:
    """
    Validate and store a contact form submission.

    Raises:
        ValidationError: If a required field is absent or the email is malformed
        PersistenceError: If the insert fails
    """
    require_fields(form, CONTACT_REQUIRED_FIELDS)
    email = normalize_email(str(form["email"]))

    contact_db.insert_contact_submission(
        name=str(form["name"]).strip(),
        email=email,
        subject=str(form["subject"]).strip(),
        message=str(form["message"]).strip(),
        company=_clean(form.get("company")),
        industry=_clean(form.get("industry")),
    )


def subscribe_newsletter(email: str | None, name: str | None = None) -> None:
    """
    Validate and store a newsletter subscription.

    Raises:
        ValidationError: If the email is absent or malformed
        PersistenceError: If the insert fails
    """
    require_fields({"email": email}, ["email"])
    contact_db.insert_newsletter_subscriber(normalize_email(email), _clean(name))
