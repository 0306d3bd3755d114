from functools import lru_cache

from pydantic_settings import BaseSettings

from docudrive.exceptions import ConfigurationError

REQUIRED_SETTINGS = (
    "google_client_email",
    "google_private_key",
    "google_project_id",
    "folder_id",
    "shared_secret",
)


class Settings(BaseSettings):
    host: str = "127.0.0.1"
    port: int = 9000
    log_level: str = "INFO"

    google_client_email: str = ""
    google_private_key: str = ""
    google_project_id: str = ""
    folder_id: str = ""
    shared_secret: str = ""

    token_uri: str = "https://oauth2.googleapis.com/token"
    drive_api_base: str = "https://www.googleapis.com/drive/v3"
    drive_scope: str = "https://www.googleapis.com/auth/drive.readonly"
    http_max_retries: int = 0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()


def require_settings(settings: Settings | None = None) -> Settings:
    """Return settings, raising ConfigurationError if any required value is blank."""
    settings = settings or get_settings()
    missing = [name.upper() for name in REQUIRED_SETTINGS if not getattr(settings, name)]
    if missing:
        raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")
    return settings
