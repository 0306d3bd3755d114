import logging
from typing import Any, Callable, TypeVar

import requests

from docudrive.auth import AccessToken, credential_from_settings, mint_access_token
from docudrive.config import Settings
from docudrive.exceptions import RemoteAPIError
from docudrive.http_client import get_session
from docudrive.models.drive import (
    FOLDER_MIME_TYPE,
    DriveEntry,
    DriveFile,
    FileMetadata,
    FolderDetails,
    NamedItem,
)

logger = logging.getLogger(__name__)

ENTRY_FIELDS = "files(id,name,mimeType)"
PAGE_SIZE = 1000

T = TypeVar("T")


def _clean_id(item_id: str) -> str:
    """Drop any '?query' suffix pasted along with a Drive id."""
    return item_id.split("?")[0]


def _get_token(settings: Settings) -> AccessToken:
    return mint_access_token(credential_from_settings(settings))


def _handle_response(resp: requests.Response, action: str) -> None:
    if not resp.ok:
        raise RemoteAPIError(
            f"Failed to {action}: {resp.status_code} {resp.reason} {resp.text[:500]}".rstrip(),
            status_code=resp.status_code,
            body=resp.text,
        )


def _drive_get(
    settings: Settings,
    path: str,
    action: str,
    params: dict | None = None,
    token: AccessToken | None = None,
) -> requests.Response:
    """Authenticated GET against the Drive v3 API. Mints a token unless one is given."""
    token = token or _get_token(settings)
    url = f"{settings.drive_api_base}/{path}"
    try:
        resp = get_session().get(url, headers={"Authorization": f"Bearer {token.access_token}"}, params=params)
    except requests.RequestException as e:
        raise RemoteAPIError(f"Failed to {action}: {e}") from e
    _handle_response(resp, action)
    return resp


def _read_body(resp: requests.Response, action: str, parse: Callable[[Any], T]) -> T:
    """Decode a 2xx JSON body and hand it to parse.

    Covers both non-JSON bodies and payloads the models reject (both raise ValueError).
    """
    try:
        return parse(resp.json())
    except ValueError as e:
        raise RemoteAPIError(
            f"Failed to {action}: unreadable response ({e})",
            status_code=resp.status_code,
            body=resp.text,
        ) from e


def _list_query(
    settings: Settings,
    query: str,
    action: str,
    model: type[T] = DriveEntry,
    fields: str = ENTRY_FIELDS,
    all_drives: bool = True,
    order_by_name: bool = False,
    token: AccessToken | None = None,
    keep: Callable[[dict], bool] | None = None,
) -> list[T]:
    params = {"q": query, "fields": fields, "pageSize": PAGE_SIZE}
    if all_drives:
        params["supportsAllDrives"] = "true"
        params["includeItemsFromAllDrives"] = "true"
    if order_by_name:
        params["orderBy"] = "name"
    resp = _drive_get(settings, "files", action, params=params, token=token)

    def parse(payload) -> list[T]:
        if not isinstance(payload, dict):
            raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
        files = payload.get("files") or []
        if not isinstance(files, list):
            raise ValueError("'files' is not a list")
        return [model.model_validate(f) for f in files if keep is None or keep(f)]

    return _read_body(resp, action, parse)


def _children_query(folder_id: str) -> str:
    return f"'{folder_id}' in parents and trashed=false"


def list_children(settings: Settings, folder_id: str | None = None) -> list[DriveEntry]:
    """List direct children (files and folders) of a folder, ordered by name."""
    folder_id = _clean_id(folder_id or settings.folder_id)
    return _list_query(settings, _children_query(folder_id), "list folder contents", order_by_name=True)


def list_subfolders(settings: Settings, folder_id: str | None = None) -> list[DriveEntry]:
    return [entry for entry in list_children(settings, folder_id) if entry.is_folder]


def list_files_only(settings: Settings, folder_id: str | None = None) -> list[DriveEntry]:
    return [entry for entry in list_children(settings, folder_id) if not entry.is_folder]


def list_folders(settings: Settings, folder_id: str | None = None) -> list[NamedItem]:
    return [NamedItem(name=e.name, id=e.id) for e in list_subfolders(settings, folder_id)]


def list_files(settings: Settings, folder_id: str | None = None) -> list[NamedItem]:
    return [NamedItem(name=e.name, id=e.id) for e in list_files_only(settings, folder_id)]


def list_root_contents(settings: Settings) -> list[DriveEntry]:
    """List everything in the configured root. Order is whatever Drive returns."""
    return _list_query(
        settings,
        _children_query(_clean_id(settings.folder_id)),
        "list folder",
        fields="files(id,name,mimeType,owners,permissions,shared,parents)",
    )


def list_folders_with_details(settings: Settings) -> list[DriveEntry]:
    """List the folders directly under the configured root, ordered by name."""
    folder_id = _clean_id(settings.folder_id)
    query = f"'{folder_id}' in parents and mimeType='{FOLDER_MIME_TYPE}' and trashed=false"
    return _list_query(settings, query, "list folders", all_drives=False, order_by_name=True)


def _has_entry_fields(item) -> bool:
    return isinstance(item, dict) and all(isinstance(item.get(key), str) for key in ("id", "name", "mimeType"))


def list_drive_files(settings: Settings, folder_id: str | None = None) -> list[DriveFile]:
    """List a folder's children with size and timestamps after checking the folder exists.

    Entries missing an id, name or mimeType are skipped.
    """
    folder_id = _clean_id(folder_id or settings.folder_id)
    token = _get_token(settings)
    _drive_get(settings, f"files/{folder_id}", "check folder", params={"fields": "id,name,mimeType"}, token=token)
    return _list_query(
        settings,
        _children_query(folder_id),
        "list drive files",
        model=DriveFile,
        fields="files(id,name,mimeType,size,modifiedTime,createdTime)",
        order_by_name=True,
        token=token,
        keep=_has_entry_fields,
    )


def get_folder(settings: Settings, folder_id: str) -> FolderDetails:
    resp = _drive_get(
        settings,
        f"files/{_clean_id(folder_id)}",
        "fetch folder details",
        params={"fields": "id,name,mimeType,parents"},
    )
    return _read_body(resp, "fetch folder details", FolderDetails.model_validate)


def get_file_metadata(settings: Settings, file_id: str) -> FileMetadata:
    resp = _drive_get(
        settings,
        f"files/{_clean_id(file_id)}",
        "get file metadata",
        params={"fields": "id,name,mimeType,size"},
    )
    return _read_body(resp, "get file metadata", FileMetadata.model_validate)


def download_bytes(settings: Settings, file_id: str) -> bytes:
    resp = _drive_get(settings, f"files/{_clean_id(file_id)}", "download file", params={"alt": "media"})
    return resp.content
