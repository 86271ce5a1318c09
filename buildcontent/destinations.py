"""Work out where each auxiliary attachment has to be written."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, Sequence, Tuple

from .utils import has_extension, unique_in_order

logger = logging.getLogger(__name__)

COVERAGE_EXTENSION = ".coverage"

DestinationMap = Dict[str, Tuple[Path, ...]]


def is_matchable(file_name: str) -> bool:
    """Only coverage files are placed according to summary references."""
    return has_extension(file_name, COVERAGE_EXTENSION)


def resolve_destinations(
    reference_paths: Sequence[Path],
    other_names: Iterable[str],
    output_folder: Path,
) -> DestinationMap:
    """Map each distinct file name to one or more local destinations.

    Coverage files go to every distinct reference path with the same file
    name, in reference order, so each summary's ``In`` tree gets its own copy.
    Everything else, and coverage files no summary mentions, is written
    directly below ``output_folder``.
    """
    output_folder = Path(output_folder)
    destinations: DestinationMap = {}

    for name in unique_in_order(other_names):
        flat = (output_folder / name,)
        if not reference_paths or not is_matchable(name):
            destinations[name] = flat
            continue

        matches = tuple(unique_in_order(path for path in reference_paths if path.name == name))
        if not matches:
            logger.warning(
                "Coverage file '%s' is not referenced by any summary; writing it to %s",
                name,
                output_folder,
            )
            destinations[name] = flat
            continue

        logger.debug("Coverage file '%s' resolved to %d destination(s)", name, len(matches))
        destinations[name] = matches

    return destinations
