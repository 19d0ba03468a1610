"""Pytest configuration and shared fixtures."""

import pytest

from sheetrecon.api import routes
from sheetrecon.config import Settings
from sheetrecon.engine import ReconciliationSession
from sheetrecon.models import KeySelection, Side


@pytest.fixture
def mock_settings() -> Settings:
    """Create settings with test values."""
    return Settings(
        similarity_threshold=0.3,
        match_strategy="greedy",
        key_separator="|",
        duplicate_key_policy="last",
        host="127.0.0.1",
        port=8000,
        debug=False,
        cors_allow_origins=["*"],
    )


@pytest.fixture
def table_a() -> list[list]:
    """Source table with a date and size column."""
    return [
        ["Name", "Date", "Size", "Price"],
        ["alpha", "2024-01-01", "10", 100],
        ["beta", "2024-01-02", "20", 200],
        ["gamma", "2024-01-03", "30", 300],
        ["delta", "2024-01-04", "40", 400],
    ]


@pytest.fixture
def table_b() -> list[list]:
    """Comparison table with renamed, reordered columns and shuffled rows."""
    return [
        ["Created Date", "Item Name", "Unit Price", "Size"],
        ["2024-01-03", "gamma", 300, "30"],
        ["2024-01-01", "alpha", 101, "10"],
        ["2024-01-02", "BETA", 200, "20"],
    ]


@pytest.fixture
def key_selection() -> KeySelection:
    """Date and size keys for table_a and table_b."""
    return KeySelection(date_a=1, size_a=2, date_b=0, size_b=3)


@pytest.fixture
def session(table_a, table_b) -> ReconciliationSession:
    """Session with both tables loaded."""
    session = ReconciliationSession()
    session.load_table(Side.A, table_a, ["Internal"])
    session.load_table(Side.B, table_b, ["External", "Notes"])
    return session


@pytest.fixture
def fresh_api_session(mock_settings):
    """Replace the global API session with an empty one for each test."""
    routes._session = ReconciliationSession.from_settings(mock_settings)
    yield routes._session
    routes._session = None
