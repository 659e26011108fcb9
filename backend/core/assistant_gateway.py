# Role: Boundary between the conversation and the remote model. Turns one user utterance into one
# displayable assistant utterance and absorbs every failure: respond() always resolves to text, never raises.

from __future__ import annotations

import logging
from typing import Callable, Optional

from backend.llm.gemini_client import EmptyReply, GatewayError, GatewayUnavailable, GeminiClient, ReplyClient
from backend.prompts.canned_replies import CONNECTION_ERROR_MESSAGE, EMPTY_REPLY_MESSAGE
from backend.prompts.system_prompt import build_system_prompt

logger = logging.getLogger(__name__)


class AssistantGateway:
    def __init__(
        self,
        client: Optional[ReplyClient] = None,
        client_factory: Callable[[], ReplyClient] = GeminiClient,
        system_instruction: Optional[str] = None,
    ) -> None:
        # Key line: lazy-init avoids crashing if GEMINI_API_KEY is missing (failure becomes a fallback reply).
        self._client = client
        self._client_factory = client_factory
        self.system_instruction = system_instruction or build_system_prompt()

    def _get_client(self) -> ReplyClient:
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    async def respond(self, user_text: str) -> str:
        # 1) One isolated request: the user text + the fixed instruction (no transcript context).
        # 2) EmptyReply -> retry fallback.
        # 3) Anything else that goes wrong -> connectivity fallback.
        try:
            text = await self._get_client().generate_reply(user_text, self.system_instruction)
            if text is not None and not isinstance(text, str):
                raise GatewayUnavailable(f"Reply client returned a malformed payload: {type(text).__name__}")
            if not text or not text.strip():
                raise EmptyReply("Reply client returned no text.")
            return text
        except EmptyReply as e:
            logger.warning("Gemini returned no usable text: %s", e)
            return EMPTY_REPLY_MESSAGE
        except GatewayError as e:
            logger.error("Gemini error: %s", e, exc_info=True)
            return CONNECTION_ERROR_MESSAGE
        except Exception:
            # Unexpected client shape (e.g. a substituted client raising its own errors).
            logger.exception("Gemini error: unexpected failure in reply client")
            return CONNECTION_ERROR_MESSAGE
