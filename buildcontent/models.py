"""Typed containers shared across the downloader."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class RunMetadata:
    """A test run listed for a build."""

    url: str
    run_id: Optional[int] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class AttachmentMetadata:
    """Metadata for a test run attachment."""

    file_name: str
    url: str
    attachment_type: Optional[str] = None


@dataclass(frozen=True)
class ClassifiedAttachments:
    """Run attachments split into summary files and everything else."""

    summaries: tuple[AttachmentMetadata, ...] = ()
    others: tuple[AttachmentMetadata, ...] = ()


@dataclass(frozen=True)
class DownloadedSummary:
    """A summary file that is already on disk."""

    name: str
    path: Path


@dataclass(frozen=True)
class DownloadRequest:
    """Everything needed to fetch the test content of one build."""

    project_uri: str
    access_token: str = field(repr=False)
    build_uri: str
    output_folder: Path
    retry_count: int = 3
    retry_delay: float = 1.0
    timeout: float = 30.0


@dataclass
class DownloadStats:
    runs: int = 0
    summaries: int = 0
    downloaded: int = 0
    copied: int = 0
    duplicates: int = 0
