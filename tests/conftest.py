from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from cyber_ai.config import Settings
from cyber_ai.main import create_app
from cyber_ai.services.llm_service import ResponseGenerator
from cyber_ai.services.memory import MemStorage

CHAT_REPLY = "Greetings, human. Systems online."
TITLE_REPLY = '"Friendly Greeting"'


def _fake_generate_content(**kwargs):
    # chat calls carry a system instruction config, title calls don't
    if kwargs.get("config") is not None:
        return SimpleNamespace(text=CHAT_REPLY)
    return SimpleNamespace(text=TITLE_REPLY)


@pytest.fixture
def genai_client():
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(side_effect=_fake_generate_content)
    return client


@pytest.fixture
def generator(genai_client):
    return ResponseGenerator(api_key="test-key", client=genai_client)


@pytest.fixture
def storage():
    return MemStorage()


@pytest.fixture
def settings():
    return Settings(gemini_api_key="test-key", database_url=None, cors_origins="*")


@pytest.fixture
def app(settings, storage, generator):
    return create_app(settings=settings, storage=storage, generator=generator)


@pytest.fixture
def client(app):
    return TestClient(app)
