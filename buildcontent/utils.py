"""Utility helpers shared across modules."""

from __future__ import annotations

from base64 import b64encode
from pathlib import PurePath
from typing import Hashable, Iterable, TypeVar

T = TypeVar("T", bound=Hashable)


def has_extension(file_name: str, extension: str) -> bool:
    """Case-insensitive extension check (`extension` includes the dot)."""
    return PurePath(file_name).suffix.lower() == extension.lower()


def sanitize_segment(value: str) -> str:
    """Replace spaces so the value can be used as a single directory name."""
    return value.replace(" ", "_")


def unique_in_order(items: Iterable[T]) -> list[T]:
    """Drop repeated items, keeping the first occurrence of each."""
    seen: set[T] = set()
    unique: list[T] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        unique.append(item)
    return unique


def basic_auth_header(token: str) -> str:
    """Basic credentials with an empty user name, as Azure DevOps expects for PATs."""
    encoded = b64encode(f":{token}".encode("utf-8")).decode("ascii")
    return f"Basic {encoded}"
