"""Exceptions raised while fetching build test content."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class ContentDownloadError(Exception):
    """Base class for every failure the downloader surfaces."""


class ConfigurationError(ContentDownloadError):
    """Required settings are missing or invalid."""


class RemoteError(ContentDownloadError):
    """A remote call kept failing after its retry budget was spent."""

    def __init__(self, message: str, *, url: Optional[str] = None, retries: int = 0) -> None:
        super().__init__(message)
        self.url = url
        self.retries = retries


class ParseError(ContentDownloadError):
    """Content could not be read as the expected structure."""

    def __init__(self, message: str, *, source: Optional[str] = None) -> None:
        super().__init__(message)
        self.source = source


class ResponseFormatError(ParseError):
    """An API response lacked required fields or was not JSON."""


class FileSystemError(ContentDownloadError):
    """Creating a directory or writing a file failed."""

    def __init__(self, message: str, *, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path
