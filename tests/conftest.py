"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from layoutkit.multipane import ID_GENERATOR


@pytest.fixture(autouse=True)
def reset_layout_ids():
    """Restart generated layout node ids at ``id0`` for every test."""
    ID_GENERATOR.reset()
    yield
    ID_GENERATOR.reset()
