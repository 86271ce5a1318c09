"""Local filesystem operations used while laying out downloaded content."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Iterable

from .errors import FileSystemError

logger = logging.getLogger(__name__)


def ensure_directory(path: Path) -> Path:
    """Create ``path`` (and parents); an existing directory is fine."""
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FileSystemError(f"Unable to create directory {path}: {exc}", path=path) from exc
    return path


def ensure_parent_directories(paths: Iterable[Path]) -> list[Path]:
    """Create the distinct parent directories of ``paths``, in first-seen order."""
    created: list[Path] = []
    for path in paths:
        parent = Path(path).parent
        if parent in created:
            continue
        logger.debug("Ensuring directory %s", parent)
        created.append(ensure_directory(parent))
    return created


def write_bytes(path: Path, payload: bytes) -> Path:
    path = Path(path)
    try:
        path.write_bytes(payload)
    except OSError as exc:
        raise FileSystemError(f"Unable to write {path}: {exc}", path=path) from exc
    logger.debug("Wrote %d bytes to %s", len(payload), path)
    return path


def copy_file(source: Path, destination: Path) -> Path:
    """Copy ``source`` over ``destination``, replacing any existing file."""
    destination = Path(destination)
    try:
        shutil.copyfile(source, destination)
    except OSError as exc:
        raise FileSystemError(
            f"Unable to copy {source} to {destination}: {exc}", path=destination
        ) from exc
    logger.debug("Copied %s to %s", source, destination)
    return destination
