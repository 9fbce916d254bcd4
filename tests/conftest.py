from __future__ import annotations

from datetime import datetime

import pytest


@pytest.fixture
def fixed_now() -> datetime:
    # Tuesday
    return datetime(2025, 1, 7, 9, 0, 0)
