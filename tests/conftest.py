from datetime import datetime, timezone

import pytest


@pytest.fixture
def fixed_now():
    return datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc)
