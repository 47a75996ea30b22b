"""Text extraction from uploaded documents."""

from dataclasses import dataclass
from io import BytesIO

from askapril.core.errors import EmptyDocumentError, ValidationError
from askapril.core.logging import get_logger

logger = get_logger(__name__)

DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PDF_CONTENT_TYPE = "application/pdf"

# Accepted upload MIME types
ALLOWED_CONTENT_TYPES = {
    "text/plain",
    "text/html",
    "text/markdown",
    PDF_CONTENT_TYPE,
    "application/msword",
    DOCX_CONTENT_TYPE,
}

# Fallback when the client sends no content type or a generic one
EXTENSION_CONTENT_TYPES = {
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".html": "text/html",
    ".htm": "text/html",
    ".pdf": PDF_CONTENT_TYPE,
    ".doc": "application/msword",
    ".docx": DOCX_CONTENT_TYPE,
}

GENERIC_CONTENT_TYPE = "application/octet-stream"

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


@dataclass
class FileTextResult:
    """Result of text extraction from a file."""

    text: str
    detected_encoding: str


def _get_extension(filename: str) -> str:
    """Extract lowercase file extension from filename."""
    if "." in filename:
        return "." + filename.rsplit(".", 1)[-1].lower()
    return ""


def resolve_content_type(filename: str, content_type: str | None) -> str | None:
    """Return the accepted MIME type for an upload, or None if it is not accepted."""
    base_type = (content_type or "").split(";", 1)[0].strip().lower()
    if base_type and base_type != GENERIC_CONTENT_TYPE:
        return base_type if base_type in ALLOWED_CONTENT_TYPES else None
    return EXTENSION_CONTENT_TYPES.get(_get_extension(filename))


def _decode_bytes(raw_bytes: bytes) -> tuple[str, str]:
    """
    Attempt to decode bytes using fallback chain.

    Returns:
        Tuple of (decoded_text, encoding_name)

    Raises:
        ValidationError: If no encoding works
    """
    # Check for UTF-8 BOM first
    if raw_bytes.startswith(b"\xef\xbb\xbf"):
        try:
            return raw_bytes.decode("utf-8-sig"), "utf-8-sig"
        except UnicodeDecodeError:
            pass

    for encoding in ("utf-8", "latin-1"):
        try:
            return raw_bytes.decode(encoding), encoding
        except UnicodeDecodeError:
            continue

    raise ValidationError(
        "Unable to decode file content. Supported encodings: UTF-8, UTF-8-BOM, Latin-1."
    )


def _extract_docx(raw_bytes: bytes) -> str:
    from docx import Document

    try:
        doc = Document(BytesIO(raw_bytes))
    except Exception as e:
        raise EmptyDocumentError(f"Failed to open DOCX: {e}") from e

    parts = [p.text for p in doc.paragraphs if p.text.strip()]
    for table in doc.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells]
            if any(cells):
                parts.append(" | ".join(cells))
    return "\n".join(parts)


def _extract_pdf(raw_bytes: bytes) -> str:
    # Lazy import to avoid loading PyMuPDF at module load
    import fitz

    try:
        doc = fitz.open(stream=raw_bytes, filetype="pdf")
    except Exception as e:
        raise EmptyDocumentError(f"Failed to open PDF: {e}") from e

    try:
        return "\n".join(page.get_text() for page in doc)
    finally:
        doc.close()


def extract_text_from_upload(
    filename: str,
    content_type: str | None,
    raw_bytes: bytes,
    max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
) -> FileTextResult:
    """
    Extract text content from an uploaded document.

    Args:
        filename: Original filename
        content_type: MIME content type (may be None)
        raw_bytes: Raw file bytes
        max_bytes: Upload size bound

    Returns:
        FileTextResult with extracted text and detected encoding

    Raises:
        ValidationError: If the type is not accepted or the file is too large
        EmptyDocumentError: If no text could be read
    """
    resolved_type = resolve_content_type(filename, content_type)
    if resolved_type is None:
        raise ValidationError(
            "Invalid file type. Please upload PDF, Word, HTML, Markdown, or text files.",
            allowedTypes=sorted(ALLOWED_CONTENT_TYPES),
        )

    if len(raw_bytes) > max_bytes:
        raise ValidationError(
            f"File too large ({len(raw_bytes)} bytes). Maximum is {max_bytes} bytes."
        )

    if resolved_type == DOCX_CONTENT_TYPE:
        result = FileTextResult(text=_extract_docx(raw_bytes), detected_encoding="docx")
    elif resolved_type == PDF_CONTENT_TYPE:
        result = FileTextResult(text=_extract_pdf(raw_bytes), detected_encoding="pdf")
    else:
        text, encoding = _decode_bytes(raw_bytes)
        result = FileTextResult(text=text, detected_encoding=encoding)

    if not result.text.strip():
        raise EmptyDocumentError("Could not read uploaded file")

    logger.debug(
        f"Extracted {len(result.text)} chars from {filename} ({result.detected_encoding})"
    )
    return result
