"""Document extractor - uploaded bytes to a text or image artifact.

PDFs are read from their text layer only (no rendering or rasterisation).
Word documents go through python-docx. Images are never run through text
extraction; they are wrapped as-is for multi-modal submission.
"""

import base64
import io
import re
from pathlib import PurePath

import pdfplumber
from docx import Document
from docx.table import Table

from planassist.models.artifact import Artifact, ImageArtifact, TextArtifact
from planassist.utils.logging import content_logger
from planassist.utils.metrics import content_metrics

PDF_MIME_TYPE = "application/pdf"
DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOC_MIME_TYPE = "application/msword"
RTF_MIME_TYPE = "application/rtf"

IMAGE_MIME_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})
PLAIN_TEXT_MIME_TYPES = frozenset({"text/plain", "text/markdown"})

SUPPORTED_MIME_TYPES = (
    frozenset({PDF_MIME_TYPE, DOCX_MIME_TYPE, DOC_MIME_TYPE, RTF_MIME_TYPE})
    | IMAGE_MIME_TYPES
    | PLAIN_TEXT_MIME_TYPES
)

EXTENSION_MIME_TYPES: dict[str, str] = {
    ".pdf": PDF_MIME_TYPE,
    ".doc": DOC_MIME_TYPE,
    ".docx": DOCX_MIME_TYPE,
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".rtf": RTF_MIME_TYPE,
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
}

FALLBACK_MIME_TYPE = "application/octet-stream"

_RTF_CONTROL_WORD = re.compile(r"\\[a-z]+\d* ?", re.IGNORECASE)
_RTF_HEX_ESCAPE = re.compile(r"\\'[0-9a-f]{2}", re.IGNORECASE)


class ExtractionError(Exception):
    """A document with a supported MIME type could not be read."""

    def __init__(self, format_name: str, reason: str) -> None:
        self.format_name = format_name
        self.reason = reason
        super().__init__(f"Failed to extract text from {format_name}: {reason}")


class UnsupportedMimeTypeError(ValueError):
    """MIME type outside the accepted upload whitelist."""

    def __init__(self, mime_type: str) -> None:
        self.mime_type = mime_type
        super().__init__(f"Unsupported file type: {mime_type}")


def normalize_mime_type(mime_type: str) -> str:
    """Lower-case and drop parameters (``text/plain; charset=utf-8``)."""
    return mime_type.split(";", 1)[0].strip().lower()


def is_supported_mime_type(mime_type: str) -> bool:
    return normalize_mime_type(mime_type) in SUPPORTED_MIME_TYPES


def is_image_mime_type(mime_type: str) -> bool:
    return normalize_mime_type(mime_type) in IMAGE_MIME_TYPES


def guess_mime_type(filename: str) -> str:
    """MIME type from a file extension, or application/octet-stream."""
    return EXTENSION_MIME_TYPES.get(PurePath(filename).suffix.lower(), FALLBACK_MIME_TYPE)


def extract_pdf_text(data: bytes) -> str:
    """Join each page's text items with a space; pages are newline-separated."""
    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            pages = [
                " ".join(word["text"] for word in page.extract_words()) for page in pdf.pages
            ]
    except Exception as e:  # pdfminer raises several unrelated exception types
        raise ExtractionError("PDF", f"{type(e).__name__}: {e}") from e

    return "\n".join(pages)


def extract_docx_text(data: bytes, *, format_name: str = "DOCX") -> str:
    """Paragraph and table text in document order.

    Table rows are rendered as ``cell | cell``.
    """
    try:
        document = Document(io.BytesIO(data))
    except Exception as e:  # invalid zip, missing part, legacy binary .doc
        reason = f"{type(e).__name__}: {e}"
        if format_name == "DOC":
            reason += ". Please convert the file to DOCX"
        raise ExtractionError(format_name, reason) from e

    parts: list[str] = []
    for block in document.iter_inner_content():
        if isinstance(block, Table):
            for row in block.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    parts.append(" | ".join(cells))
        elif block.text.strip():
            parts.append(block.text)

    return "\n".join(parts)


def extract_rtf_text(data: bytes) -> str:
    """Best-effort RTF to text by stripping control words and groups."""
    raw = data.decode("utf-8", errors="replace")
    stripped = _RTF_HEX_ESCAPE.sub("", raw)
    stripped = _RTF_CONTROL_WORD.sub("", stripped)
    return stripped.replace("{", "").replace("}", "").strip()


def extract_plain_text(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ExtractionError("TXT", "file is not valid UTF-8 text") from e


def _extract_text(data: bytes, mime_type: str) -> tuple[str, str]:
    """Return (format_name, text) for a non-image MIME type."""
    if mime_type == PDF_MIME_TYPE:
        return "PDF", extract_pdf_text(data)
    if mime_type == DOCX_MIME_TYPE:
        return "DOCX", extract_docx_text(data)
    if mime_type == DOC_MIME_TYPE:
        return "DOC", extract_docx_text(data, format_name="DOC")
    if mime_type == RTF_MIME_TYPE:
        return "RTF", extract_rtf_text(data)
    if mime_type in PLAIN_TEXT_MIME_TYPES:
        return "TXT", extract_plain_text(data)
    raise UnsupportedMimeTypeError(mime_type)


def extract_artifact(data: bytes, mime_type: str) -> Artifact:
    """Turn uploaded bytes into a text or image artifact.

    Args:
        data: Raw file bytes
        mime_type: Declared MIME type (validated at the upload boundary)

    Returns:
        ImageArtifact for image types, TextArtifact otherwise

    Raises:
        UnsupportedMimeTypeError: MIME type outside the whitelist
        ExtractionError: Document could not be read or held no text
    """
    normalized = normalize_mime_type(mime_type)

    if normalized in IMAGE_MIME_TYPES:
        return ImageArtifact(data=data, mime_type=normalized)

    try:
        format_name, text = _extract_text(data, normalized)
        if not text.strip():
            raise ExtractionError(format_name, "no text content found")
    except ExtractionError as e:
        content_logger.log_extraction_failure(
            format_name=e.format_name, mime_type=normalized, reason=e.reason
        )
        content_metrics.inc_extraction_error(e.format_name)
        raise

    return TextArtifact(content=text)


def to_data_url(artifact: ImageArtifact) -> str:
    """Base64 data URL for an image part of a multi-modal message."""
    encoded = base64.b64encode(artifact.data).decode("utf-8")
    return f"data:{artifact.mime_type};base64,{encoded}"
