"""Read the attachment references embedded in TRX summary files.

A TRX file lists the content produced by its data collectors (code coverage
most notably) as relative ``href`` values::

    <TestRun xmlns="http://microsoft.com/schemas/VisualStudio/TeamTest/2010">
      <ResultSummary>
        <CollectorDataEntries>
          <Collector uri="datacollector://microsoft/CodeCoverage/2.0">
            <UriAttachments>
              <UriAttachment>
                <A href="agent\\out.coverage" />
              </UriAttachment>
            </UriAttachments>
          </Collector>
        </CollectorDataEntries>
      </ResultSummary>
    </TestRun>

Test tooling expects each reference under ``<summary stem>/In/`` next to the
TRX file, which is what :func:`extract_references` computes.
"""

from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
from pathlib import Path, PurePath, PurePosixPath
from typing import Iterable, Iterator

from .errors import ParseError
from .models import DownloadedSummary
from .utils import sanitize_segment

logger = logging.getLogger(__name__)

TRX_NAMESPACE = "http://microsoft.com/schemas/VisualStudio/TeamTest/2010"
CHILD_CONTENT_DIR = "In"

# Element path from the TestRun root down to the reference elements.
_REFERENCE_PATH = (
    "ResultSummary",
    "CollectorDataEntries",
    "Collector",
    "UriAttachments",
    "UriAttachment",
    "A",
)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _children(element: ET.Element, name: str) -> Iterator[ET.Element]:
    for child in element:
        if _local_name(child.tag) == name:
            yield child


def read_reference_hrefs(summary_path: Path) -> list[str]:
    """Return every collector attachment ``href`` in document order."""
    try:
        root = ET.parse(summary_path).getroot()
    except ET.ParseError as exc:
        raise ParseError(
            f"Summary file {summary_path} is not well-formed XML: {exc}", source=str(summary_path)
        ) from exc
    except OSError as exc:
        raise ParseError(
            f"Unable to read summary file {summary_path}: {exc}", source=str(summary_path)
        ) from exc

    if _local_name(root.tag) != "TestRun":
        raise ParseError(
            f"Summary file {summary_path} has root element '{_local_name(root.tag)}', expected 'TestRun'",
            source=str(summary_path),
        )

    level = [root]
    for name in _REFERENCE_PATH:
        level = [child for element in level for child in _children(element, name)]

    hrefs = [element.get("href") for element in level]
    return [href for href in hrefs if href]


def summary_child_root(output_folder: Path, summary_name: str) -> Path:
    """Directory that holds the child content of one summary file."""
    stem = sanitize_segment(PurePath(summary_name).stem)
    return Path(os.path.abspath(Path(output_folder) / stem / CHILD_CONTENT_DIR))


def reference_path(child_root: Path, href: str, *, source: str | None = None) -> Path:
    """Map one ``href`` onto an absolute path below ``child_root``."""
    relative = PurePosixPath(href.replace("\\", "/"))
    if relative.is_absolute():
        raise ParseError(f"Reference '{href}' must be relative", source=source)

    resolved = Path(os.path.normpath(child_root / relative.parent / relative.name))
    if resolved == child_root or child_root not in resolved.parents:
        raise ParseError(f"Reference '{href}' points outside {child_root}", source=source)
    return resolved


def extract_references(
    summaries: Iterable[DownloadedSummary], output_folder: Path
) -> tuple[Path, ...]:
    """Compute the expected location of every piece of referenced child content."""
    paths: list[Path] = []
    for summary in summaries:
        child_root = summary_child_root(output_folder, summary.name)
        hrefs = read_reference_hrefs(summary.path)
        logger.debug("Summary '%s' references %d attachment(s)", summary.name, len(hrefs))
        for href in hrefs:
            paths.append(reference_path(child_root, href, source=str(summary.path)))
    return tuple(paths)
