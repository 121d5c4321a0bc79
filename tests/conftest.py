"""Shared fixtures for the json-typeset test suite."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    """Undo setup_logging() calls made by CLI tests.

    The CLI attaches a stdout handler bound to CliRunner's temporary stream;
    leaving it on the root logger would break logging in later tests.
    """
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
