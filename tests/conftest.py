import os

os.environ["ENVIRONMENT"] = "testing"
os.environ.pop("OPENAI_API_KEY", None)

import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from app.models.ai_settings import AppSettings
from app.services.auth import BearerTokenSessionProvider
from app.services.match_service import MatchScoreService

TEST_TOKEN = "test-token"


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {TEST_TOKEN}"}


@pytest.fixture
def ai_backend():
    backend = MagicMock()
    backend.name = "ai"
    return backend


@pytest.fixture
def service():
    return MatchScoreService()


@pytest.fixture
def test_app(service):
    from app.main import create_app

    return create_app(
        settings=AppSettings(),
        service=service,
        session_provider=BearerTokenSessionProvider([TEST_TOKEN]),
    )


@pytest.fixture
def client(test_app):
    with TestClient(test_app) as c:
        yield c
