"""Entry point that downloads a build's test results for local test tooling."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

# Ensure project root is on sys.path when running as a script
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pydantic import ValidationError

from buildcontent.config import Settings
from buildcontent.downloader import download_test_content
from buildcontent.errors import ContentDownloadError
from buildcontent.models import DownloadRequest


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Download test run summaries and coverage files of a build."
    )
    parser.add_argument(
        "--project-uri",
        help="Project URI, e.g. https://dev.azure.com/org/project (default: pipeline variables)",
    )
    parser.add_argument("--access-token", help="Personal access token (default: SYSTEM_ACCESSTOKEN)")
    parser.add_argument("--build-uri", help="vstfs:///Build/Build/<id> (default: BUILD_BUILDURI)")
    parser.add_argument(
        "--output-folder",
        type=Path,
        help="Where to write the content (default: COMMON_TESTRESULTSDIRECTORY)",
    )
    parser.add_argument("--dry-run", action="store_true", help="List attachments without downloading")
    return parser


def resolve_request(args: argparse.Namespace, settings: Settings) -> DownloadRequest:
    return settings.to_request(
        project_uri=args.project_uri,
        access_token=args.access_token,
        build_uri=args.build_uri,
        output_folder=args.output_folder,
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings()
    except ValidationError as exc:
        configure_logging("INFO")
        logging.error("Invalid configuration: %s", exc)
        return 1
    configure_logging(settings.effective_log_level)

    try:
        request = resolve_request(args, settings)
        download_test_content(request, dry_run=args.dry_run)
    except ContentDownloadError as exc:
        logging.error("Test content download failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
