# Role: The chat widget as one owned session object. Visibility is a plain toggle; the ConversationStore
# is created on first open and lives as long as this object (one page view). Nothing is global.
# Hosts without their own running loop (Streamlit) drive turns through run(); the loop is tied to the
# conversation and closed with it.

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional

from backend.core.conversation_store import ConversationStore


class ChatWidget:
    def __init__(self, store_factory: Callable[[], ConversationStore] = ConversationStore) -> None:
        self._store_factory = store_factory
        self._store: Optional[ConversationStore] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self.is_open = False

    @property
    def store(self) -> Optional[ConversationStore]:
        # None until the panel has been opened at least once.
        return self._store

    def open(self) -> ConversationStore:
        self.is_open = True
        if self._store is None:
            self._store = self._store_factory()
        return self._store

    def close(self) -> None:
        # Hiding the panel keeps the conversation.
        self.is_open = False

    def toggle(self) -> bool:
        if self.is_open:
            self.close()
        else:
            self.open()
        return self.is_open

    def run(self, coro: Awaitable[Any]) -> Any:
        # One loop per conversation, so the async Gemini client is never shared across loops.
        if self._loop is None or self._loop.is_closed():
            self._loop = asyncio.new_event_loop()
        return self._loop.run_until_complete(coro)

    def reset(self) -> None:
        # Page reload / navigation: the session is discarded, never persisted.
        self._store = None
        self.is_open = False
        if self._loop is not None:
            self._loop.close()
            self._loop = None
