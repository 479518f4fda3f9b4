from __future__ import annotations

import pytest
import structlog


@pytest.fixture
def logger():
    return structlog.get_logger("tests")
