"""Shared pytest configuration for wfmt tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: fast, isolated unit tests")


@pytest.fixture(autouse=True)
def _default_unicode_version(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("WFMT_UNICODE_VERSION", raising=False)
