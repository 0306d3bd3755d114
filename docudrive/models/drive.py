from pydantic import computed_field

from docudrive.models.common import CamelModel

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"


class DriveEntry(CamelModel):
    id: str = ""
    name: str = ""
    mime_type: str = ""

    @computed_field(alias="isFolder")
    @property
    def is_folder(self) -> bool:
        return self.mime_type == FOLDER_MIME_TYPE


class DriveFile(CamelModel):
    id: str
    name: str
    mime_type: str
    size: str | None = None
    created_time: str | None = None
    modified_time: str | None = None


class NamedItem(CamelModel):
    name: str
    id: str


class FileMetadata(CamelModel):
    name: str = ""
    mime_type: str = ""
    size: int | None = None


class FolderDetails(CamelModel):
    id: str = ""
    name: str = ""
    mime_type: str = ""
    parents: list[str] | None = None
