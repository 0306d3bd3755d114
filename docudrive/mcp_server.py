import json
import logging

from fastmcp import FastMCP

from docudrive.config import require_settings
from docudrive.exceptions import DocudriveError
from docudrive.models.common import OperationResult
from docudrive.models.documents import AnalyzedContent, SupportCheck
from docudrive.services import analyzer
from docudrive.services import drive as drive_service
from docudrive.services import parser as parser_service

logger = logging.getLogger(__name__)

mcp = FastMCP("Docudrive")

ENTRY_SUMMARY_FIELDS = {"name", "id", "mime_type"}


def _handle_mcp_error(e: DocudriveError) -> str:
    """Convert a domain error into a failure envelope the agent can read."""
    logger.warning("Tool call failed: %s", e)
    return OperationResult.fail(str(e)).to_json()


def _dump_models(items, include: set[str] | None = None) -> str:
    return json.dumps([item.model_dump(mode="json", by_alias=True, include=include) for item in items])


# --- Listing tools ---

@mcp.tool(name="listFiles")
def list_files() -> str:
    """List all files (not folders) in the configured root folder.
    Returns a JSON array of {name, id}."""
    settings = require_settings()
    try:
        return _dump_models(drive_service.list_files(settings))
    except DocudriveError as e:
        return _handle_mcp_error(e)


@mcp.tool(name="listFilesInFolder")
def list_files_in_folder(folderId: str) -> str:
    """List all files and folders in a specific folder, ordered by name.
    Returns a JSON array of {name, id, mimeType, isFolder}."""
    settings = require_settings()
    logger.info("Listing contents in folder: %s", folderId)
    try:
        contents = drive_service.list_children(settings, folderId)
    except DocudriveError as e:
        return _handle_mcp_error(e)
    logger.info("Found %d items in folder %s", len(contents), folderId)
    return _dump_models(contents)


@mcp.tool(name="listRootContents")
def list_root_contents() -> str:
    """List all contents (files and folders) in the root folder.
    Returns a JSON array of {name, id, mimeType}. Ordering is not guaranteed."""
    settings = require_settings()
    logger.info("Listing root contents")
    try:
        contents = drive_service.list_root_contents(settings)
    except DocudriveError as e:
        return _handle_mcp_error(e)
    return _dump_models(contents, include=ENTRY_SUMMARY_FIELDS)


@mcp.tool(name="getCurrentFolder")
def get_current_folder() -> str:
    """Get details about the configured root folder: {id, name, mimeType, parents?}."""
    settings = require_settings()
    try:
        folder = drive_service.get_folder(settings, settings.folder_id)
    except DocudriveError as e:
        return _handle_mcp_error(e)
    return folder.model_dump_json(by_alias=True, exclude_none=True)


@mcp.tool(name="listFoldersWithDetails")
def list_folders_with_details() -> str:
    """List the folders in the root folder, ordered by name.
    Returns a JSON array of {name, id, mimeType}."""
    settings = require_settings()
    logger.info("Listing all folders")
    try:
        folders = drive_service.list_folders_with_details(settings)
    except DocudriveError as e:
        return _handle_mcp_error(e)
    return _dump_models(folders, include=ENTRY_SUMMARY_FIELDS)


@mcp.tool(name="listDriveFiles")
def list_drive_files(folderId: str | None = None) -> str:
    """List files in a folder (default: root) with size and created/modified times.
    Fails if the folder does not exist."""
    settings = require_settings()
    try:
        return _dump_models(drive_service.list_drive_files(settings, folderId))
    except DocudriveError as e:
        return _handle_mcp_error(e)


# --- Parsing tools ---

@mcp.tool(name="parseFile")
def parse_file(fileId: str) -> str:
    """Download a file from Drive and extract its text and metadata.
    Supports PDF, plain text, CSV, JSON and Markdown. Returns {success, data?, error?}."""
    settings = require_settings()
    logger.info("Parsing file %s", fileId)
    return parser_service.parse_file_from_drive(settings, fileId).to_json()


@mcp.tool(name="parseAndAnalyzeFile")
def parse_and_analyze_file(fileId: str) -> str:
    """Parse a file from Drive, then add a heuristic analysis (summary, keywords, headings,
    table detection, word and line counts) under data.analysis."""
    settings = require_settings()
    logger.info("Parsing and analyzing file %s", fileId)
    result = parser_service.parse_file_from_drive(settings, fileId)
    if not result.success:
        return result.to_json()
    analyzed = AnalyzedContent(
        content=result.data.content,
        metadata=result.data.metadata,
        analysis=analyzer.extract_key_information(result.data),
    )
    return OperationResult[AnalyzedContent].ok(analyzed).to_json()


@mcp.tool(name="getSupportedFileTypes")
def get_supported_file_types() -> str:
    """List the mime types the parser accepts."""
    require_settings()
    return json.dumps(parser_service.get_supported_file_types())


@mcp.tool(name="isFileTypeSupported")
def is_file_type_supported(mimeType: str) -> str:
    """Check whether a mime type can be parsed. Returns {supported, mimeType}."""
    require_settings()
    check = SupportCheck(supported=parser_service.is_supported_file_type(mimeType), mime_type=mimeType)
    return check.model_dump_json(by_alias=True)
