"""Pytest configuration and fixtures for build test-content tests."""

from pathlib import Path

import pytest

from buildcontent.devops_client import DevOpsTestClient
from buildcontent.models import AttachmentMetadata
from buildcontent.references import TRX_NAMESPACE

PROJECT_URI = "https://dev.azure.com/contoso/Web%20Shop"
ACCESS_TOKEN = "pat-token-123"
BUILD_URI = "vstfs:///Build/Build/42"
RUNS_URL = f"{PROJECT_URI}/_apis/test/runs"


def trx_document(*hrefs: str, namespace: str = TRX_NAMESPACE) -> str:
    """Render a minimal TRX file whose coverage collector lists ``hrefs``."""
    xmlns = f' xmlns="{namespace}"' if namespace else ""
    entries = "".join(f'<UriAttachment><A href="{href}" /></UriAttachment>' for href in hrefs)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<TestRun id="1" name="run"{xmlns}>'
        '<ResultSummary outcome="Completed">'
        '<Counters total="1" passed="1" />'
        "<CollectorDataEntries>"
        '<Collector agentName="agent" uri="datacollector://microsoft/CodeCoverage/2.0">'
        f"<UriAttachments>{entries}</UriAttachments>"
        "</Collector>"
        "</CollectorDataEntries>"
        "</ResultSummary>"
        "</TestRun>"
    )


def attachment(file_name: str, attachment_type: str | None = None) -> AttachmentMetadata:
    return AttachmentMetadata(
        file_name=file_name,
        url=f"https://dev.azure.com/contoso/attachments/{file_name}",
        attachment_type=attachment_type,
    )


@pytest.fixture
def write_trx(tmp_path: Path):
    """Write a TRX file into ``tmp_path`` and return its path."""

    def _write(name: str, *hrefs: str) -> Path:
        path = tmp_path / name
        path.write_text(trx_document(*hrefs), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def client() -> DevOpsTestClient:
    """Client that retries immediately so failure tests stay fast."""
    return DevOpsTestClient(PROJECT_URI, ACCESS_TOKEN, retry_count=3, retry_delay=0, timeout=5)
