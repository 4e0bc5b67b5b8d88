from __future__ import annotations

import sys
from pathlib import Path

import pytest


# Ensure the repo root is importable (so `import bookseed` and `tests.fakes` work without an install).
REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT))

from tests.fakes import FakeClock  # noqa: E402


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def mysql_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("MYSQL_HOST", "MYSQL_PORT", "MYSQL_USERNAME", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("MYSQL_PASSWORD", "secret")
    monkeypatch.setenv("MYSQL_DB", "library")
