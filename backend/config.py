# Role: Central configuration module. Loads .env into environment variables and computes runtime flags.
# Importers call backend.config.settings() (DEBUG only picks the default log level) instead of threading values through every call.

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEBUG: bool = False

DEFAULT_MODEL = "gemini-3-flash-preview"


@dataclass(frozen=True)
class Settings:
    gemini_api_key: str | None
    gemini_model: str
    gemini_temperature: float
    session_ttl_minutes: int
    log_level: str


def load_env() -> None:
    """
    Load .env into os.environ, then recompute DEBUG.
    This makes DEBUG correct even if load_env() is called after import.
    """
    global DEBUG
    load_dotenv()
    # Key line: accept common truthy values.
    DEBUG = os.getenv("DEBUG", "0").lower() in {"1", "true", "yes"}


def settings() -> Settings:
    # Read on every call so tests can monkeypatch the environment.
    default_level = "DEBUG" if DEBUG else "INFO"
    return Settings(
        gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
        gemini_model=os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
        gemini_temperature=float(os.getenv("GEMINI_TEMPERATURE", "0.7")),
        session_ttl_minutes=int(os.getenv("SESSION_TTL_MINUTES", "60")),
        log_level=os.getenv("LOG_LEVEL", default_level),
    )
