"""Pytest configuration and shared fixtures."""
import pytest

from backend.core.assistant_gateway import AssistantGateway
from backend.core.conversation_store import ConversationStore
from fakes import FakeReplyClient


@pytest.fixture
def fake_client():
    """Return a fake reply client with a canned successful answer."""
    return FakeReplyClient()


@pytest.fixture
def gateway(fake_client):
    """Return a gateway wired to the fake client."""
    return AssistantGateway(client=fake_client)


@pytest.fixture
def store(gateway):
    """Return a fresh conversation store (greeting only, idle)."""
    return ConversationStore(gateway=gateway)


@pytest.fixture(autouse=True)
def no_real_gemini_key(monkeypatch):
    """Make sure no test ever reaches the real service."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
