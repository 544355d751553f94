"""
Pytest configuration and shared fixtures.

Adds the project root to the Python path so tests can import domain,
repositories, services and api directly, and provides fresh store instances
with a fixed clock so ids and timestamps are predictable.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add the project root to the Python path
# so tests can import domain, repositories, etc.
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from domain.time import IdGenerator  # noqa: E402
from repositories.mock_store import MockStore  # noqa: E402
from repositories.sheet_table import Workbook  # noqa: E402
from services.sheet_service import SheetBackend  # noqa: E402

FIXED_NOW = datetime(2025, 1, 10, 12, 0, 0, tzinfo=timezone.utc)
FIXED_EPOCH = FIXED_NOW.timestamp()


def fixed_clock() -> datetime:
    return FIXED_NOW


def fixed_ids() -> IdGenerator:
    return IdGenerator(clock=lambda: FIXED_EPOCH)


@pytest.fixture
def mock_store() -> MockStore:
    """Mock store with the sample rows loaded."""
    return MockStore(id_generator=fixed_ids(), clock=fixed_clock)


@pytest.fixture
def empty_store() -> MockStore:
    return MockStore(seed=False, id_generator=fixed_ids(), clock=fixed_clock)


@pytest.fixture
def sheet_backend() -> SheetBackend:
    """Sheet backend over an empty in-memory workbook."""
    return SheetBackend(Workbook.in_memory(), id_generator=fixed_ids(), clock=fixed_clock)
