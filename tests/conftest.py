import pytest
from fastapi.testclient import TestClient

from app.main import app, get_provider_factory, get_interaction_logger


class FakeProvider:
    """Stands in for an upstream model and records what it was asked."""

    name = "fake"

    def __init__(self, reply="Nice work. What is your main claim?", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def complete(self, system_prompt, user_text, temperature):
        self.calls.append({
            "system_prompt": system_prompt,
            "user_text": user_text,
            "temperature": temperature,
        })
        if self.error:
            raise self.error
        return self.reply


class RecordingLogger:
    def __init__(self):
        self.records = []

    async def log_interaction(self, participant_id, group, input_text, feedback):
        self.records.append({
            "participant_id": participant_id,
            "group": group,
            "input_text": input_text,
            "feedback": feedback,
        })


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def provider_factory():
    """Build fake providers with a chosen reply or error."""
    return FakeProvider


@pytest.fixture
def fake_provider(provider_factory):
    return provider_factory()


@pytest.fixture
def recording_logger():
    return RecordingLogger()


@pytest.fixture
def client(fake_provider, recording_logger):
    app.dependency_overrides[get_provider_factory] = lambda: (lambda: fake_provider)
    app.dependency_overrides[get_interaction_logger] = lambda: recording_logger
    yield TestClient(app)
    app.dependency_overrides.clear()
