from __future__ import annotations

import logging
from collections.abc import Generator

import pytest


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None, None, None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    mkrepo_logger = logging.getLogger("mkrepo")
    mkrepo_level = mkrepo_logger.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    mkrepo_logger.setLevel(mkrepo_level)
