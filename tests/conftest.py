import pytest
from unittest.mock import MagicMock

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi.testclient import TestClient

from docudrive.auth import AccessToken
from docudrive.config import Settings


# --- Keys and settings ---

TEST_RSA_KEY = rsa.generate_private_key(public_exponent=65537, key_size=2048)

TEST_PRIVATE_KEY_PEM = TEST_RSA_KEY.private_bytes(
    encoding=serialization.Encoding.PEM,
    format=serialization.PrivateFormat.PKCS8,
    encryption_algorithm=serialization.NoEncryption(),
).decode("utf-8")

# As it arrives from an env var: newlines escaped as literal backslash-n
TEST_PRIVATE_KEY_ESCAPED = TEST_PRIVATE_KEY_PEM.replace("\n", "\\n")


def make_settings(**overrides) -> Settings:
    values = {
        "google_client_email": "reader@docudrive-test.iam.gserviceaccount.com",
        "google_private_key": TEST_PRIVATE_KEY_ESCAPED,
        "google_project_id": "docudrive-test",
        "folder_id": "root123",
        "shared_secret": "s3cret",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


# --- Canned API responses ---

FOLDER_MIME = "application/vnd.google-apps.folder"

DRIVE_API_FOLDER = {
    "id": "root123",
    "name": "Research",
    "mimeType": FOLDER_MIME,
    "parents": ["parent0"],
}

DRIVE_API_LIST = {
    "files": [
        {"id": "fld1", "name": "Archive", "mimeType": FOLDER_MIME},
        {"id": "file1", "name": "paper.pdf", "mimeType": "application/pdf"},
        {"id": "fld2", "name": "Drafts", "mimeType": FOLDER_MIME},
        {"id": "file2", "name": "notes.txt", "mimeType": "text/plain"},
        {"id": "file3", "name": "data.json", "mimeType": "application/json"},
    ],
}

DRIVE_API_FILE_METADATA = {
    "id": "file2",
    "name": "notes.txt",
    "mimeType": "text/plain",
    "size": "11",
}


def make_response(status_code: int = 200, json_data=None, content: bytes = b"", text: str = "", reason: str = "OK"):
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = status_code < 400
    resp.reason = reason
    resp.text = text
    resp.content = content
    resp.json.return_value = json_data if json_data is not None else {}
    return resp


def make_pdf(text: str = "Hello World", info: dict | None = None) -> bytes:
    """Build a one-page PDF with a single line of Helvetica text."""
    stream = f"BT /F1 24 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R "
        b"/Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    if info:
        entries = " ".join(f"/{key} ({value})" for key, value in info.items())
        objects.append(f"<< {entries} >>".encode("latin-1"))

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, obj in enumerate(objects, 1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + obj + b"\nendobj\n"
    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    trailer = b"<< /Size %d /Root 1 0 R" % (len(objects) + 1)
    if info:
        trailer += b" /Info %d 0 R" % len(objects)
    out += b"trailer\n" + trailer + b" >>\nstartxref\n%d\n%%%%EOF\n" % xref_offset
    return bytes(out)


# --- Fixtures ---

@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def mock_drive_session(mocker):
    session = MagicMock()
    mocker.patch("docudrive.services.drive.get_session", return_value=session)
    return session


@pytest.fixture
def mock_drive_token(mocker):
    return mocker.patch(
        "docudrive.services.drive.mint_access_token",
        return_value=AccessToken(access_token="tok123", expires_in=3599, token_type="Bearer"),
    )


@pytest.fixture
def mock_drive_api(mock_drive_token, mock_drive_session):
    """Drive client with token minting stubbed out; configure .get on the returned session."""
    return mock_drive_session


@pytest.fixture
def mock_auth_session(mocker):
    session = MagicMock()
    mocker.patch("docudrive.auth.get_session", return_value=session)
    return session


@pytest.fixture
def api_client():
    """FastAPI TestClient for router tests (no shared-secret middleware)."""
    from docudrive.main import api
    return TestClient(api)
