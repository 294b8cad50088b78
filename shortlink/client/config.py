"""Client configuration.

Settings for the command-line client, read from SHORTLINK_CLIENT_* environment
variables or a .env file.
"""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STORAGE_PATH = Path.home() / ".shortlink" / "local_storage.json"


class ClientSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SHORTLINK_CLIENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    SERVER_URL: str = "http://localhost:8000"
    STORAGE_PATH: Path = DEFAULT_STORAGE_PATH
    TIMEOUT: float = 10.0  # seconds

    @field_validator("SERVER_URL")
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


client_settings = ClientSettings()
