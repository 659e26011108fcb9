# Role: Process-wide wiring for the HTTP layer. One SessionRegistry per API process; routers receive it
# through FastAPI Depends so tests can swap in a registry backed by a fake reply client.

from __future__ import annotations

from functools import lru_cache

import backend.config as config
from backend.core.session_registry import SessionRegistry


@lru_cache
def get_registry() -> SessionRegistry:
    return SessionRegistry(session_ttl_minutes=config.settings().session_ttl_minutes)
