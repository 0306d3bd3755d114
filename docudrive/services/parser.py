"""Text and metadata extraction for the file types docudrive can read.

Every public entry point returns an OperationResult; failures are reported in
the envelope rather than raised.
"""

import io
import json
import logging
from datetime import datetime

from pypdf import DocumentInformation, PdfReader

from docudrive.config import Settings
from docudrive.exceptions import DocudriveError, ParseError, UnsupportedTypeError
from docudrive.models.common import OperationResult
from docudrive.models.documents import DocumentMetadata, ParsedContent
from docudrive.services import drive as drive_service

logger = logging.getLogger(__name__)

GOOGLE_NATIVE_TYPES = (
    "application/vnd.google-apps.document",
    "application/vnd.google-apps.spreadsheet",
    "application/vnd.google-apps.presentation",
)

SUPPORTED_MIME_TYPES = (
    "application/pdf",
    "text/plain",
    "text/csv",
    "application/json",
    "text/markdown",
    *GOOGLE_NATIVE_TYPES,
)

TEXT_FILE_TYPES = {
    "text/plain": "Text",
    "text/csv": "CSV",
    "text/markdown": "Markdown",
}


def is_supported_file_type(mime_type: str) -> bool:
    return mime_type in SUPPORTED_MIME_TYPES


def get_supported_file_types() -> list[str]:
    return list(SUPPORTED_MIME_TYPES)


def _check_supported(mime_type: str) -> None:
    if not is_supported_file_type(mime_type):
        raise UnsupportedTypeError(
            f"Unsupported file type: {mime_type}. Supported types: {', '.join(SUPPORTED_MIME_TYPES)}"
        )
    if mime_type in GOOGLE_NATIVE_TYPES:
        raise UnsupportedTypeError(
            f"Google Apps files ({mime_type}) need to be exported to a supported format first. "
            "Use Google Drive API export functionality."
        )


def _pdf_date(info: DocumentInformation, attr: str) -> datetime | None:
    try:
        return getattr(info, attr)
    except ValueError as e:
        logger.warning("Ignoring malformed PDF %s: %s", attr, e)
        return None


def _pdf_text(value: str | None) -> str | None:
    return str(value) if value else None


def _parse_pdf(data: bytes, file_name: str) -> ParsedContent:
    try:
        reader = PdfReader(io.BytesIO(data))
        text = "\n\n".join(page.extract_text() or "" for page in reader.pages)
        page_count = len(reader.pages)
        info = reader.metadata
    except Exception as e:
        raise ParseError(f"Failed to parse PDF: {e}") from e

    metadata = DocumentMetadata(file_type="PDF", file_name=file_name, file_size=len(data), page_count=page_count)
    if info is not None:
        metadata.author = _pdf_text(info.author)
        metadata.title = _pdf_text(info.title)
        metadata.subject = _pdf_text(info.subject)
        metadata.creator = _pdf_text(info.creator)
        metadata.producer = _pdf_text(info.producer)
        metadata.creation_date = _pdf_date(info, "creation_date")
        metadata.modification_date = _pdf_date(info, "modification_date")
    return ParsedContent(content=text, metadata=metadata)


def _parse_text(data: bytes, file_name: str, mime_type: str) -> ParsedContent:
    return ParsedContent(
        content=data.decode("utf-8", errors="replace"),
        metadata=DocumentMetadata(
            file_type=TEXT_FILE_TYPES.get(mime_type, "Text"),
            file_name=file_name,
            file_size=len(data),
        ),
    )


def _parse_json(data: bytes, file_name: str) -> ParsedContent:
    content = data.decode("utf-8", errors="replace")
    try:
        json.loads(content)
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse JSON file: Invalid JSON format ({e})") from e
    return ParsedContent(
        content=content,
        metadata=DocumentMetadata(file_type="JSON", file_name=file_name, file_size=len(data)),
    )


def parse_file(data: bytes, file_name: str, mime_type: str) -> OperationResult[ParsedContent]:
    """Extract text and metadata from raw file bytes according to mime_type."""
    try:
        _check_supported(mime_type)
        if mime_type == "application/pdf":
            parsed = _parse_pdf(data, file_name)
        elif mime_type == "application/json":
            parsed = _parse_json(data, file_name)
        else:
            parsed = _parse_text(data, file_name, mime_type)
    except DocudriveError as e:
        logger.warning("Could not parse %s: %s", file_name, e)
        return OperationResult[ParsedContent].fail(str(e))
    except Exception as e:
        logger.exception("Unexpected error parsing %s", file_name)
        return OperationResult[ParsedContent].fail(f"Failed to parse file: {e}")
    return OperationResult[ParsedContent].ok(parsed)


def parse_file_from_drive(settings: Settings, file_id: str) -> OperationResult[ParsedContent]:
    """Fetch a Drive file's metadata and bytes, then parse it.

    Unsupported and Google-native files are rejected before downloading.
    """
    try:
        meta = drive_service.get_file_metadata(settings, file_id)
        _check_supported(meta.mime_type)
        data = drive_service.download_bytes(settings, file_id)
    except DocudriveError as e:
        logger.warning("Could not fetch %s for parsing: %s", file_id, e)
        return OperationResult[ParsedContent].fail(str(e))
    return parse_file(data, meta.name, meta.mime_type)
