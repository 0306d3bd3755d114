class DocudriveError(Exception):
    """Base class for errors surfaced to RPC callers."""


class ConfigurationError(DocudriveError):
    """Raised when required settings are missing."""


class KeyFormatError(DocudriveError):
    """Raised when the service account private key is not valid PEM."""


class TokenExchangeError(DocudriveError):
    """Raised when the token endpoint rejects the signed assertion."""


class RemoteAPIError(DocudriveError):
    """Raised when the Drive API returns a non-success status."""

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class UnsupportedTypeError(DocudriveError):
    """Raised when a file's mime type is not on the allow-list."""


class ParseError(DocudriveError):
    """Raised when file bytes do not decode as their declared format."""
