"""Shared pytest fixtures for cdnsieve tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator
from unittest.mock import Mock, patch

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tests.fixtures.range_fixtures import mock_provider_response  # noqa: E402


@pytest.fixture
def mock_all_network_requests() -> Iterator[Mock]:
    """Mock every outbound range request.

    Provider feeds and BGPView lookups return canned documents from
    tests/fixtures/range_fixtures.py; any other URL returns 404.
    """
    with patch("cdnsieve.ranges._http.requests.get", side_effect=mock_provider_response) as mock_get:
        yield mock_get


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run each test in an empty directory with no CDNSIEVE_* variables.

    Keeps a developer's local cdnsieve.toml or environment out of the tests.
    """
    for key in ("CDNSIEVE_REQUEST_TIMEOUT", "CDNSIEVE_WORKERS", "CDNSIEVE_ASN_LOOKUP_URL"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
