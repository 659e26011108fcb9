# Role: In-memory session store for the HTTP surface. Owns lifecycle of ConversationStore objects:
# create/get by session_id, discard on navigation, and cleanup of abandoned sessions. Nothing is persisted.

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from backend.core.conversation_store import ConversationStore

logger = logging.getLogger(__name__)


class SessionRegistry:
    def __init__(
        self,
        store_factory: Callable[[], ConversationStore] = ConversationStore,
        session_ttl_minutes: int = 60,
    ) -> None:
        self._stores: Dict[str, ConversationStore] = {}
        self._last_seen: Dict[str, datetime] = {}
        self._store_factory = store_factory
        self._ttl = timedelta(minutes=session_ttl_minutes)

    def __len__(self) -> int:
        return len(self._stores)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._stores

    def get(self, session_id: str) -> Optional[ConversationStore]:
        return self._stores.get(session_id)

    def get_or_create(self, session_id: str) -> ConversationStore:
        # Reuse existing store or lazily open a fresh conversation (seeded with the greeting).
        store = self._stores.get(session_id)
        if store is None:
            store = self._store_factory()
            self._stores[session_id] = store
            logger.debug("Opened session %s", session_id)
        self._last_seen[session_id] = datetime.now(timezone.utc)
        return store

    def discard(self, session_id: str) -> bool:
        self._last_seen.pop(session_id, None)
        return self._stores.pop(session_id, None) is not None

    def cleanup_expired(self, now: Optional[datetime] = None) -> int:
        # Role: drop inactive sessions to avoid unbounded growth. A session with a reply in flight is kept.
        now = now or datetime.now(timezone.utc)
        to_delete = [
            sid
            for sid, seen in self._last_seen.items()
            if (now - seen) > self._ttl and not self._stores[sid].pending
        ]
        for sid in to_delete:
            self.discard(sid)
        if to_delete:
            logger.info("Cleaned up %d expired session(s)", len(to_delete))
        return len(to_delete)
