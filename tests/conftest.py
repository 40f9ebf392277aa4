# tests/conftest.py
"""
Global test bootstrap
- Keeps the default statement timeout off unless a test sets one
- Exposes the in-memory database fixture and a repository bound to it
"""

from __future__ import annotations

import os

import pytest

os.environ.setdefault("DB_STATEMENT_TIMEOUT_MS", "0")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from repositories.singer_repo import SingerRepository  # noqa: E402
from tests.fixtures.fake_db import *  # noqa: F401,F403,E402


@pytest.fixture()
def repo(fake_db):
    """SingerRepository wired to the in-memory database."""
    return SingerRepository(fake_db)
