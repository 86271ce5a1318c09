"""Configuration management for the build test-content downloader."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from urllib.parse import quote

from dotenv import load_dotenv
from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError
from .models import DownloadRequest

# Load .env early so BaseSettings can pick values up seamlessly.
load_dotenv()


class Settings(BaseSettings):
    """Pipeline configuration derived from the variables Azure Pipelines exports."""

    collection_uri: HttpUrl | None = Field(None, alias="SYSTEM_TEAMFOUNDATIONCOLLECTIONURI")
    team_project: str | None = Field(None, alias="SYSTEM_TEAMPROJECT")
    access_token: str | None = Field(None, alias="SYSTEM_ACCESSTOKEN", repr=False)
    build_uri: str | None = Field(None, alias="BUILD_BUILDURI")
    output_folder: Path | None = Field(None, alias="COMMON_TESTRESULTSDIRECTORY")

    retry_count: int = Field(3, ge=0, alias="TEST_CONTENT_RETRY_COUNT")
    retry_delay_ms: int = Field(1000, ge=0, alias="TEST_CONTENT_RETRY_DELAY_MS")
    request_timeout: float = Field(30.0, gt=0, alias="TEST_CONTENT_REQUEST_TIMEOUT")

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    system_debug: bool = Field(False, alias="SYSTEM_DEBUG")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "collection_uri",
        "team_project",
        "access_token",
        "build_uri",
        "output_folder",
        mode="before",
    )
    @classmethod
    def _empty_str_to_none(cls, value):
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @property
    def project_uri(self) -> str | None:
        """Collection URI joined with the URL-quoted project name."""
        if self.collection_uri is None or not self.team_project:
            return None
        return f"{str(self.collection_uri).rstrip('/')}/{quote(self.team_project)}"

    @property
    def effective_log_level(self) -> str:
        if self.system_debug:
            return "DEBUG"
        return self.log_level.upper()

    def to_request(self, **overrides: Any) -> DownloadRequest:
        """Build a :class:`DownloadRequest`, letting non-empty ``overrides`` win.

        Accepted overrides: ``project_uri``, ``access_token``, ``build_uri``
        and ``output_folder``.
        """
        values = {
            "project_uri": self.project_uri,
            "access_token": self.access_token,
            "build_uri": self.build_uri,
            "output_folder": self.output_folder,
        }
        unknown = set(overrides) - set(values)
        if unknown:
            raise TypeError(f"Unexpected overrides: {', '.join(sorted(unknown))}")
        values.update({key: value for key, value in overrides.items() if value})

        variables = {
            "project_uri": "SYSTEM_TEAMFOUNDATIONCOLLECTIONURI and SYSTEM_TEAMPROJECT",
            "access_token": "SYSTEM_ACCESSTOKEN",
            "build_uri": "BUILD_BUILDURI",
            "output_folder": "COMMON_TESTRESULTSDIRECTORY",
        }
        missing = [variables[key] for key, value in values.items() if not value]
        if missing:
            raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")

        return DownloadRequest(
            project_uri=str(values["project_uri"]),
            access_token=str(values["access_token"]),
            build_uri=str(values["build_uri"]),
            output_folder=Path(values["output_folder"]),
            retry_count=self.retry_count,
            retry_delay=self.retry_delay_ms / 1000,
            timeout=self.request_timeout,
        )
