"""Field checks shared by the public submission endpoints."""

import re
from typing import Any, Iterable, Mapping

from askapril.core.errors import ValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_absent(value: Any) -> bool:
    """None, blank strings and empty mappings/lists are absent; 0 and False are not."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (dict, list)):
        return not value
    return False


def require_fields(payload: Mapping[str, Any], required: Iterable[str]) -> None:
    """Raise ValidationError listing every required field when any is absent."""
    required = list(required)
    if any(is_absent(payload.get(field)) for field in required):
        raise ValidationError("Missing required fields", required=required)


def normalize_email(email: str) -> str:
    """
    Trim, validate and lowercase an email address.

    Raises:
        ValidationError: If the address does not look like an email
    """
    email = email.strip()
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Invalid email format")
    return email.lower()
