"""Unit tests for the assistant gateway and the Gemini client wrapper."""
import logging
from types import SimpleNamespace

import pytest

from backend.core.assistant_gateway import AssistantGateway
from backend.llm.gemini_client import EmptyReply, GatewayUnavailable, GeminiClient
from backend.prompts.canned_replies import CONNECTION_ERROR_MESSAGE, EMPTY_REPLY_MESSAGE
from backend.prompts.system_prompt import build_system_prompt
from fakes import FakeReplyClient


class FakeModels:
    """Mimics `client.aio.models` of the google-genai SDK."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    async def generate_content(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return self.response


def _sdk(response=None, error=None):
    models = FakeModels(response=response, error=error)
    return SimpleNamespace(aio=SimpleNamespace(models=models)), models


class TestAssistantGateway:
    """Tests for AssistantGateway.respond."""

    @pytest.mark.asyncio
    async def test_success_returns_reply_text(self, gateway, fake_client):
        text = await gateway.respond("How do MOKSH granules work?")

        assert text == fake_client.reply

    @pytest.mark.asyncio
    async def test_sends_single_message_and_fixed_instruction(self, gateway, fake_client):
        await gateway.respond("first question")
        await gateway.respond("second question")

        assert fake_client.calls[0] == ("first question", build_system_prompt())
        assert fake_client.calls[1] == ("second question", build_system_prompt())

    @pytest.mark.asyncio
    async def test_empty_reply_maps_to_retry_message(self):
        gateway = AssistantGateway(client=FakeReplyClient(error=EmptyReply("nothing")))

        assert await gateway.respond("hello") == EMPTY_REPLY_MESSAGE

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reply", ["", "   "])
    async def test_blank_text_from_client_maps_to_retry_message(self, reply):
        gateway = AssistantGateway(client=FakeReplyClient(reply=reply))

        assert await gateway.respond("hello") == EMPTY_REPLY_MESSAGE

    @pytest.mark.asyncio
    async def test_non_text_reply_maps_to_connection_message(self):
        gateway = AssistantGateway(client=FakeReplyClient(reply=42))  # type: ignore[arg-type]

        assert await gateway.respond("hello") == CONNECTION_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_reply_text_passed_through_unchanged(self):
        reply = "    pip install moksh\n\nWater at dawn."
        gateway = AssistantGateway(client=FakeReplyClient(reply=reply))

        assert await gateway.respond("hello") == reply

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [GatewayUnavailable("503"), ConnectionError("reset"), ValueError("bad payload")],
    )
    async def test_failures_map_to_connection_message(self, error, caplog):
        gateway = AssistantGateway(client=FakeReplyClient(error=error))

        with caplog.at_level(logging.ERROR, logger="backend.core.assistant_gateway"):
            text = await gateway.respond("hello")

        assert text == CONNECTION_ERROR_MESSAGE
        assert any(r.levelno == logging.ERROR for r in caplog.records)

    @pytest.mark.asyncio
    async def test_missing_api_key_becomes_connection_message(self):
        # Default factory builds a GeminiClient, which refuses to start without a key.
        gateway = AssistantGateway()

        assert await gateway.respond("hello") == CONNECTION_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_client_is_created_lazily_once(self, fake_client):
        created = []

        def factory():
            created.append(1)
            return fake_client

        gateway = AssistantGateway(client_factory=factory)
        assert created == []

        await gateway.respond("one")
        await gateway.respond("two")
        assert created == [1]


class TestGeminiClient:
    """Tests for GeminiClient against a fake SDK client."""

    def test_missing_key_raises(self):
        with pytest.raises(GatewayUnavailable):
            GeminiClient()

    def test_model_defaults_from_env(self, monkeypatch):
        monkeypatch.setenv("GEMINI_MODEL", "gemini-test")
        sdk, _ = _sdk()

        client = GeminiClient(client=sdk)

        assert client.model_name == "gemini-test"

    @pytest.mark.asyncio
    async def test_generate_reply_passes_instruction(self):
        sdk, models = _sdk(response=SimpleNamespace(text="  Mulch your beds.  "))
        client = GeminiClient(model="gemini-x", temperature=0.2, client=sdk)

        text = await client.generate_reply("How to save water?", "be concise")

        assert text == "Mulch your beds."
        call = models.calls[0]
        assert call["model"] == "gemini-x"
        assert call["contents"] == "How to save water?"
        assert call["config"].system_instruction == "be concise"
        assert call["config"].temperature == 0.2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", [None, "", "  "])
    async def test_empty_text_raises_empty_reply(self, text):
        sdk, _ = _sdk(response=SimpleNamespace(text=text))
        client = GeminiClient(client=sdk)

        with pytest.raises(EmptyReply):
            await client.generate_reply("hello", "sys")

    @pytest.mark.asyncio
    async def test_sdk_error_is_wrapped(self):
        sdk, _ = _sdk(error=TimeoutError("timed out"))
        client = GeminiClient(client=sdk)

        with pytest.raises(GatewayUnavailable) as exc:
            await client.generate_reply("hello", "sys")
        assert isinstance(exc.value.__cause__, TimeoutError)

    @pytest.mark.asyncio
    async def test_malformed_payload_is_unavailable(self):
        sdk, _ = _sdk(response=SimpleNamespace(text=42))
        client = GeminiClient(client=sdk)

        with pytest.raises(GatewayUnavailable):
            await client.generate_reply("hello", "sys")

    @pytest.mark.asyncio
    async def test_blank_prompt_rejected(self):
        sdk, models = _sdk(response=SimpleNamespace(text="x"))
        client = GeminiClient(client=sdk)

        with pytest.raises(ValueError):
            await client.generate_reply("  ", "sys")
        assert models.calls == []
