"""Azure DevOps test-management API helper focused on run attachments."""

from __future__ import annotations

import logging
from pathlib import Path, PurePath
from typing import Iterator, List

import requests
from requests import Response

from .errors import ResponseFormatError
from .models import AttachmentMetadata, RunMetadata
from .retry import DEFAULT_RETRY_COUNT, DEFAULT_RETRY_DELAY, call_with_retries
from .storage import write_bytes
from .utils import basic_auth_header

logger = logging.getLogger(__name__)


class DevOpsTestClient:
    """Thin wrapper that lists a build's test runs and fetches their attachments."""

    RUNS_API_VERSION = "5.0"
    ATTACHMENTS_API_VERSION = "5.0-preview.1"
    CONTINUATION_HEADER = "x-ms-continuationtoken"

    def __init__(
        self,
        project_uri: str,
        access_token: str,
        *,
        retry_count: int = DEFAULT_RETRY_COUNT,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self.project_uri = project_uri.rstrip("/")
        self.retry_count = retry_count
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["Authorization"] = basic_auth_header(access_token)

    def iter_test_runs(self, build_uri: str) -> Iterator[RunMetadata]:
        """Yield the build's test runs in the order the API returns them."""
        url = f"{self.project_uri}/_apis/test/runs"
        params = {"api-version": self.RUNS_API_VERSION, "buildUri": build_uri}

        while True:
            logger.debug("Listing test runs for %s", build_uri)
            response = self._get(url, "List test runs", params=params, accept="application/json")
            for raw in self._values(response):
                yield self._to_run(raw)

            token = response.headers.get(self.CONTINUATION_HEADER)
            if not token:
                return
            params = {**params, "continuationToken": token}

    def list_attachments(self, run: RunMetadata) -> list[AttachmentMetadata]:
        url = f"{run.url.rstrip('/')}/attachments"
        params = {"api-version": self.ATTACHMENTS_API_VERSION}
        response = self._get(url, "List attachments", params=params, accept="application/json")
        attachments: List[AttachmentMetadata] = [self._to_attachment(raw) for raw in self._values(response)]
        logger.debug("Run %s has %d attachment(s)", run.run_id or run.url, len(attachments))
        return attachments

    def download_attachment(self, attachment: AttachmentMetadata, destination: Path) -> Path:
        """Fetch attachment bytes and write them verbatim to ``destination``."""
        logger.info("Downloading '%s' to %s", attachment.file_name, destination)
        response = self._get(
            attachment.url,
            f"Download attachment '{attachment.file_name}'",
            accept="application/octet-stream",
        )
        return write_bytes(destination, response.content)

    def _get(self, url: str, description: str, *, params: dict | None = None, accept: str) -> Response:
        def attempt() -> Response:
            resp = self.session.get(
                url, headers={"Accept": accept}, params=params, timeout=self.timeout
            )
            if resp.status_code >= 400:
                logger.debug("Request to %s failed (%s): %s", url, resp.status_code, resp.text)
                resp.raise_for_status()
            return resp

        return call_with_retries(
            description,
            attempt,
            url=url,
            retry_count=self.retry_count,
            delay=self.retry_delay,
        )

    @staticmethod
    def _values(response: Response) -> list[dict]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise ResponseFormatError(
                f"Response from {response.url} is not JSON", source=response.url
            ) from exc
        values = payload.get("value") if isinstance(payload, dict) else None
        if not isinstance(values, list):
            raise ResponseFormatError(
                f"Response from {response.url} has no 'value' list", source=response.url
            )
        return values

    @staticmethod
    def _to_run(raw: dict) -> RunMetadata:
        url = raw.get("url") if isinstance(raw, dict) else None
        if not url:
            raise ResponseFormatError(f"Test run entry is missing 'url': {raw!r}")
        return RunMetadata(url=url, run_id=raw.get("id"), name=raw.get("name"))

    @staticmethod
    def _to_attachment(raw: dict) -> AttachmentMetadata:
        if not isinstance(raw, dict):
            raise ResponseFormatError(f"Attachment entry is not an object: {raw!r}")
        file_name = raw.get("fileName")
        url = raw.get("url")
        if not file_name or not url:
            raise ResponseFormatError(f"Attachment entry needs 'fileName' and 'url': {raw!r}")
        if PurePath(file_name.replace("\\", "/")).name != file_name or file_name in (".", ".."):
            raise ResponseFormatError(f"Attachment file name '{file_name}' is not a plain file name")
        return AttachmentMetadata(
            file_name=file_name,
            url=url,
            attachment_type=raw.get("attachmentType"),
        )
