"""API endpoints for the AI co-pilot document wizard."""

from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile

from askapril.api.errors import http_error, internal_error
from askapril.core.config import get_settings
from askapril.core.conversation_engine import ConversationEngine, get_conversation_engine
from askapril.core.errors import AprilError
from askapril.core.file_text import extract_text_from_upload
from askapril.core.logging import get_logger
from askapril.core.schemas_copilot import (
    ContinueConversationRequest,
    ContinueConversationResponse,
    ConversationStatusResponse,
    StartConversationRequest,
    StartConversationResponse,
    UploadAnalysisResponse,
)

logger = get_logger(__name__)

router = APIRouter()


def content_disposition(filename: str) -> str:
    """Attachment header with an ASCII filename plus the UTF-8 original when they differ."""
    fallback = filename.encode("ascii", "ignore").decode("ascii")
    fallback = fallback.replace('"', "").replace("\\", "")
    if fallback == filename:
        return f'attachment; filename="{filename}"'
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


@router.post("/start")
async def start_conversation(
    request: StartConversationRequest,
    engine: ConversationEngine = Depends(get_conversation_engine),
) -> StartConversationResponse:
    """
    Start a new document conversation.

    Raises:
        HTTPException 400: If the document type is unknown
    """
    try:
        return engine.start(request.document_type, request.business_info)

    except AprilError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.exception(f"Failed to start conversation: {e}")
        raise internal_error("Failed to start conversation") from e


@router.post("/upload")
async def upload_document(
    document: UploadFile = File(...),
    document_type: str | None = Form(default=None, alias="documentType"),
    improvement_goals: str | None = Form(default=None, alias="improvementGoals"),
    engine: ConversationEngine = Depends(get_conversation_engine),
) -> UploadAnalysisResponse:
    """
    Analyze an existing document and open an improvement conversation.

    Accepts plain text, HTML, Markdown, PDF and Word files.

    Raises:
        HTTPException 400: If the file type is not accepted, too large or unreadable
    """
    filename = document.filename or "document"
    max_bytes = get_settings().MAX_UPLOAD_BYTES
    # One byte past the limit is enough to reject an oversize upload
    file_bytes = await document.read(max_bytes + 1)

    try:
        extracted = extract_text_from_upload(
            filename=filename,
            content_type=document.content_type,
            raw_bytes=file_bytes,
            max_bytes=max_bytes,
        )
        return engine.start_from_upload(
            raw_text=extracted.text,
            filename=filename,
            document_type=document_type or None,
            improvement_goals=improvement_goals,
        )

    except AprilError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.exception(f"Failed to process uploaded document {filename}: {e}")
        raise internal_error("Failed to process uploaded document") from e


@router.post("/continue")
async def continue_conversation(
    request: ContinueConversationRequest,
    engine: ConversationEngine = Depends(get_conversation_engine),
) -> ContinueConversationResponse:
    """
    Submit answers or a message and get the next step.

    Raises:
        HTTPException 404: If the conversation does not exist
    """
    try:
        return engine.continue_conversation(
            request.conversation_id, answers=request.answers, message=request.message
        )

    except AprilError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.exception(
            f"Failed to continue conversation: {e}",
            extra={"conversation_id": request.conversation_id},
        )
        raise internal_error("Failed to continue conversation") from e


@router.get("/status/{conversation_id}")
async def conversation_status(
    conversation_id: str,
    engine: ConversationEngine = Depends(get_conversation_engine),
) -> ConversationStatusResponse:
    """
    Poll document generation progress.

    Raises:
        HTTPException 404: If the conversation does not exist
    """
    try:
        return engine.status(conversation_id)

    except AprilError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.exception(
            f"Failed to get conversation status: {e}",
            extra={"conversation_id": conversation_id},
        )
        raise internal_error("Failed to get status") from e


@router.get("/download/{conversation_id}")
async def download_document(
    conversation_id: str,
    format: str = Query(default="html"),
    engine: ConversationEngine = Depends(get_conversation_engine),
) -> Response:
    """
    Download the generated document as HTML or plain text.

    Raises:
        HTTPException 400: If the format is not html or txt
        HTTPException 404: If the conversation or its document does not exist
    """
    try:
        download = engine.download(conversation_id, format)

    except AprilError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.exception(
            f"Failed to render download: {e}",
            extra={"conversation_id": conversation_id},
        )
        raise internal_error("Failed to download document") from e

    return Response(
        content=download.content,
        media_type=download.media_type,
        headers={"Content-Disposition": content_disposition(download.filename)},
    )
