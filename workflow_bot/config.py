"""Configuration management for the send-message workflow step."""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env early so BaseSettings can pick values up seamlessly.
load_dotenv()


class Settings(BaseSettings):
    """App configuration derived from environment variables."""

    messaging_agent_url: HttpUrl = Field(..., alias="MESSAGING_AGENT_URL")
    messaging_session_token: str = Field(..., alias="MESSAGING_SESSION_TOKEN")
    messaging_key_manager_token: str | None = Field(None, alias="MESSAGING_KEY_MANAGER_TOKEN")
    messaging_timeout_secs: float = Field(30.0, alias="MESSAGING_TIMEOUT_SECS")

    workflow_resources_dir: Path = Field(Path("resources"), alias="WORKFLOW_RESOURCES_DIR")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("messaging_key_manager_token", mode="before")
    @classmethod
    def _empty_str_to_none(cls, value):
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @field_validator("messaging_timeout_secs")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("MESSAGING_TIMEOUT_SECS must be greater than zero.")
        return value

    @property
    def agent_url(self) -> str:
        return str(self.messaging_agent_url).rstrip("/")
