from fastapi import APIRouter

from docudrive.config import require_settings
from docudrive.models.common import OperationResult
from docudrive.models.documents import AnalyzedContent, ParsedContent, SupportCheck
from docudrive.models.drive import DriveEntry, FolderDetails, NamedItem
from docudrive.services import analyzer
from docudrive.services import drive as drive_service
from docudrive.services import parser as parser_service

router = APIRouter(prefix="/api/drive", tags=["drive"])


@router.get("/files")
def list_files() -> list[NamedItem]:
    return drive_service.list_files(require_settings())


@router.get("/folders/{folder_id}/contents")
def list_folder_contents(folder_id: str) -> list[DriveEntry]:
    return drive_service.list_children(require_settings(), folder_id)


@router.get("/root")
def list_root_contents() -> list[DriveEntry]:
    return drive_service.list_root_contents(require_settings())


@router.get("/folder", response_model_exclude_none=True)
def get_current_folder() -> FolderDetails:
    settings = require_settings()
    return drive_service.get_folder(settings, settings.folder_id)


@router.get("/folders")
def list_folders_with_details() -> list[DriveEntry]:
    return drive_service.list_folders_with_details(require_settings())


@router.get("/files/{file_id}/parse", response_model_exclude_none=True)
def parse_file(file_id: str) -> OperationResult[ParsedContent]:
    return parser_service.parse_file_from_drive(require_settings(), file_id)


@router.get("/files/{file_id}/analysis", response_model_exclude_none=True)
def parse_and_analyze_file(file_id: str) -> OperationResult[AnalyzedContent]:
    result = parser_service.parse_file_from_drive(require_settings(), file_id)
    if not result.success:
        return OperationResult[AnalyzedContent].fail(result.error)
    return OperationResult[AnalyzedContent].ok(AnalyzedContent(
        content=result.data.content,
        metadata=result.data.metadata,
        analysis=analyzer.extract_key_information(result.data),
    ))


@router.get("/supported-types")
def get_supported_file_types() -> list[str]:
    require_settings()
    return parser_service.get_supported_file_types()


@router.get("/supported-types/check")
def is_file_type_supported(mime_type: str) -> SupportCheck:
    require_settings()
    return SupportCheck(supported=parser_service.is_supported_file_type(mime_type), mime_type=mime_type)
