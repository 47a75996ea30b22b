"""Translation of domain errors into HTTP responses."""

from fastapi import HTTPException

from askapril.core.errors import AprilError


def http_error(error: AprilError) -> HTTPException:
    """HTTPException carrying the error's status and structured detail."""
    return HTTPException(status_code=error.status_code, detail=error.to_detail())


def internal_error(message: str) -> HTTPException:
    return HTTPException(
        status_code=500, detail={"error": "internal_error", "message": message}
    )
