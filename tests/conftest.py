"""
Shared fixtures: a fixed clock and settings pinned to values the tests can reason about.
"""
from datetime import datetime, timezone

import pytest

from config import Settings


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        launch_reference=datetime(2024, 1, 1, tzinfo=timezone.utc),
        launch_grace_days=30,
        block_lookup_concurrency=4,
    )
