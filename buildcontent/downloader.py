"""Download a build's test results and lay them out for test tooling.

For every test run of the build:

1. list the run attachments and split them into summary (TRX) files and
   everything else;
2. download the summary files directly into the output folder;
3. read the references inside each summary and create the ``<stem>/In``
   directories they imply;
4. download every other attachment once to its first destination and copy it
   to any further destination.

Processing is sequential and stops at the first error.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .classifier import classify
from .config import Settings
from .destinations import resolve_destinations
from .devops_client import DevOpsTestClient
from .models import DownloadedSummary, DownloadRequest, DownloadStats, RunMetadata
from .references import extract_references
from .storage import copy_file, ensure_directory, ensure_parent_directories

logger = logging.getLogger(__name__)


class BuildContentDownloader:
    """Walk a build's test runs and place their attachments on disk."""

    def __init__(self, client: DevOpsTestClient, output_folder: Path, *, dry_run: bool = False) -> None:
        self.client = client
        self.output_folder = Path(output_folder)
        self.dry_run = dry_run

    def download_build(self, build_uri: str) -> DownloadStats:
        stats = DownloadStats()
        if not self.dry_run:
            ensure_directory(self.output_folder)

        for run in self.client.iter_test_runs(build_uri):
            stats.runs += 1
            self.process_run(run, stats)

        logger.info(
            "Run complete: runs=%s summaries=%s downloaded=%s copied=%s duplicates=%s",
            stats.runs,
            stats.summaries,
            stats.downloaded,
            stats.copied,
            stats.duplicates,
        )
        return stats

    def process_run(self, run: RunMetadata, stats: DownloadStats) -> None:
        attachments = self.client.list_attachments(run)
        classified = classify(attachments)
        logger.info(
            "Test run %s: %d summary file(s), %d other attachment(s)",
            run.name or run.run_id or run.url,
            len(classified.summaries),
            len(classified.others),
        )

        if self.dry_run:
            for attachment in classified.summaries:
                logger.info("[DRY-RUN] Would download summary '%s'", attachment.file_name)
            for attachment in classified.others:
                logger.info("[DRY-RUN] Would download attachment '%s'", attachment.file_name)
            return

        summaries = []
        for attachment in classified.summaries:
            path = self.client.download_attachment(attachment, self.output_folder / attachment.file_name)
            summaries.append(DownloadedSummary(name=attachment.file_name, path=path))
            stats.summaries += 1

        reference_paths = extract_references(summaries, self.output_folder)
        ensure_parent_directories(reference_paths)

        destinations = resolve_destinations(
            reference_paths,
            [attachment.file_name for attachment in classified.others],
            self.output_folder,
        )

        summary_paths = {summary.path for summary in summaries}
        fetched: set[str] = set()
        for attachment in classified.others:
            if attachment.file_name in fetched:
                logger.debug(
                    "Attachment '%s' already fetched for this run; skipping duplicate",
                    attachment.file_name,
                )
                stats.duplicates += 1
                continue
            fetched.add(attachment.file_name)

            first, *copies = destinations[attachment.file_name]
            if first in summary_paths:
                logger.warning(
                    "Attachment '%s' has the same name as a summary file; overwriting %s",
                    attachment.file_name,
                    first,
                )
            self.client.download_attachment(attachment, first)
            stats.downloaded += 1
            for destination in copies:
                copy_file(first, destination)
                stats.copied += 1


def download_test_content(
    request: DownloadRequest,
    *,
    dry_run: bool = False,
    client: DevOpsTestClient | None = None,
) -> DownloadStats:
    """Fetch all test content of ``request.build_uri`` into ``request.output_folder``."""
    client = client or DevOpsTestClient(
        request.project_uri,
        request.access_token,
        retry_count=request.retry_count,
        retry_delay=request.retry_delay,
        timeout=request.timeout,
    )
    logger.info("Retrieving test content for build %s into %s", request.build_uri, request.output_folder)
    downloader = BuildContentDownloader(client, request.output_folder, dry_run=dry_run)
    return downloader.download_build(request.build_uri)


def get_build_test_content(
    project_uri: str,
    access_token: str,
    build_uri: str,
    output_folder: Path | str,
    *,
    retry_count: int = 3,
    retry_delay: float = 1.0,
    timeout: float = 30.0,
    dry_run: bool = False,
) -> DownloadStats:
    """Retrieve the test content of a specific build."""
    request = DownloadRequest(
        project_uri=project_uri,
        access_token=access_token,
        build_uri=build_uri,
        output_folder=Path(output_folder),
        retry_count=retry_count,
        retry_delay=retry_delay,
        timeout=timeout,
    )
    return download_test_content(request, dry_run=dry_run)


def get_pipeline_test_content(settings: Settings | None = None, *, dry_run: bool = False) -> DownloadStats:
    """Retrieve the test content of the build the current pipeline is running."""
    settings = settings or Settings()
    return download_test_content(settings.to_request(), dry_run=dry_run)
