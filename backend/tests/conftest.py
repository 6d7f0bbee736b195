import os

import pytest
from fastapi.testclient import TestClient

# Settings are read at import time, so the environment must be set first.
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["NUMEROLOGY_DEBUG"] = "false"

from app.main import app  # noqa: E402
from app.numerology_theme import BirthRecord  # noqa: E402


@pytest.fixture()
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def jean_dupont():
    return BirthRecord(first_name="Jean", family_name="Dupont", birth_date="15/06/1990")
