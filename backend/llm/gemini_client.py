# Role: Minimal async wrapper around the Gemini API. Centralizes model name, temperature and error shapes,
# so the rest of the code calls a single method: generate_reply(user_text, system_instruction).

from __future__ import annotations

from typing import Any, Optional, Protocol

from google import genai
from google.genai import types

import backend.config as config


class GatewayError(RuntimeError):
    """Base for every failure of the remote text-generation call."""


class EmptyReply(GatewayError):
    """The service succeeded but returned no usable text."""


class GatewayUnavailable(GatewayError):
    """Network, protocol, configuration or service-side failure."""


class ReplyClient(Protocol):
    async def generate_reply(self, user_text: str, system_instruction: str) -> str: ...


class GeminiClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        client: Optional[Any] = None,
    ) -> None:
        # Key lines:
        # - Reads secrets from env (no secrets in code).
        # - Model and temperature are configurable for experiments.
        # - `client` lets tests hand in a fake SDK client.
        cfg = config.settings()
        self.api_key = api_key or cfg.gemini_api_key
        if client is None and not self.api_key:
            raise GatewayUnavailable("Missing GEMINI_API_KEY in environment or .env")

        self.model_name = model or cfg.gemini_model
        self.temperature = cfg.gemini_temperature if temperature is None else temperature

        self.client = client or genai.Client(api_key=self.api_key)

    async def generate_reply(self, user_text: str, system_instruction: str) -> str:
        # 1) Validate input
        # 2) Call Gemini once with the single user text + static instruction
        # 3) Validate non-empty response
        if not user_text or not user_text.strip():
            raise ValueError("User text must be non-empty.")

        try:
            resp = await self.client.aio.models.generate_content(
                model=self.model_name,
                contents=user_text,
                config=types.GenerateContentConfig(
                    system_instruction=system_instruction,
                    temperature=self.temperature,
                ),
            )
            text = getattr(resp, "text", None)
        except Exception as e:
            raise GatewayUnavailable(f"Gemini API call failed: {e}") from e

        if text is not None and not isinstance(text, str):
            raise GatewayUnavailable(f"Gemini returned a malformed payload: {type(text).__name__}")
        if not text or not text.strip():
            raise EmptyReply("Gemini returned an empty response.")

        return text.strip()
