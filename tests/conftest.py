from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from abipacks.networks import NetworkRegistry
from tests._fixtures.explorer import make_registry
from tests._fixtures.project_builder import ProjectBuilder


@pytest.fixture
def project_builder(tmp_path: Path) -> ProjectBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _restore_logger_propagation() -> Iterator[None]:
    """configure_logging() detaches the abipacks logger; reattach it so caplog sees records."""
    yield
    logger = logging.getLogger("abipacks")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def registry() -> NetworkRegistry:
    """Registry with two fake networks and a permissive rate limit."""
    return make_registry()
