"""Error taxonomy shared by the assessment, co-pilot and ripple services.

Every error carries a stable ``kind`` tag and the HTTP status the API layer
maps it to. ``extra`` holds structured detail (e.g. the list of required
fields) that is merged into the error response body.
"""

from typing import Any


class AprilError(Exception):
    """Base class for errors surfaced to API callers."""

    kind = "internal_error"
    status_code = 500

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_detail(self) -> dict[str, Any]:
        """Response body for this error."""
        return {"error": self.kind, "message": self.message, **self.extra}


# ============================================================================
# 400
# ============================================================================


class ValidationError(AprilError):
    """Missing or malformed request fields."""

    kind = "validation_error"
    status_code = 400


class UnknownDocumentTypeError(ValidationError):
    """Document type is not in the question catalog."""

    kind = "unknown_document_type"


class EmptyDocumentError(ValidationError):
    """Uploaded document has no readable text."""

    kind = "empty_document"


class UnsupportedFormatError(ValidationError):
    """Requested download format is not html or text."""

    kind = "unsupported_format"


# ============================================================================
# 404
# ============================================================================


class NotFoundError(AprilError):
    """Requested entity does not exist (yet)."""

    kind = "not_found"
    status_code = 404


class ConversationNotFoundError(NotFoundError):
    kind = "conversation_not_found"

    def __init__(self, conversation_id: str):
        super().__init__("Conversation not found", conversation_id=conversation_id)


class DocumentNotReadyError(NotFoundError):
    kind = "document_not_ready"

    def __init__(self, conversation_id: str):
        super().__init__("Document not found", conversation_id=conversation_id)


class CompanyAnalyticsNotFoundError(NotFoundError):
    kind = "company_analytics_not_found"

    def __init__(self, company_code: str):
        super().__init__(
            "No assessments yet for this company code", company_code=company_code
        )


# ============================================================================
# 5xx
# ============================================================================


class PersistenceError(AprilError):
    """The Supabase store rejected a required read or write."""

    kind = "persistence_error"
    status_code = 500


class UpstreamError(AprilError):
    """The text-to-speech provider failed."""

    kind = "upstream_error"
    status_code = 502


class StageTransitionError(AprilError):
    """Raised when a conversation would move backward through its stages."""

    kind = "stage_transition_error"
    status_code = 409
