"""Pytest configuration and fixtures."""

from typing import List, Optional, Sequence

import pytest

from cactiwmi.config.loader import AdapterConfig
from cactiwmi.query.models import QueryRequest
from cactiwmi.retrieval.client import ClientResult, WmiClient


class FakeWmiClient(WmiClient):
    """Returns canned output and records every argv it was given."""
    
    def __init__(self, lines: Optional[List[str]] = None, exit_status: int = 0):
        self.lines = lines or []
        self.exit_status = exit_status
        self.calls: List[List[str]] = []
    
    def invoke(self, argv: Sequence[str]) -> ClientResult:
        self.calls.append(list(argv))
        return ClientResult(lines=list(self.lines), exit_status=self.exit_status)


@pytest.fixture
def fake_client():
    """Factory for canned wmic clients."""
    def _make(lines: Optional[List[str]] = None, exit_status: int = 0) -> FakeWmiClient:
        return FakeWmiClient(lines, exit_status)
    return _make


@pytest.fixture
def config(tmp_path):
    """Adapter config writing verbose logs under a temp directory."""
    return AdapterConfig(log_directory=str(tmp_path / "logs"))


@pytest.fixture
def request_obj():
    return QueryRequest(
        host="10.0.0.1",
        credential_path="/etc/cacti/wmi.pw",
        class_name="Win32_LogicalDisk",
        columns="Name,Size",
    )
