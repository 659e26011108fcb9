# Role: Single chat message schema for the transcript. Immutable once created; identity is its position
# in Conversation.messages (no ids, nothing is persisted).

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Role = Literal["user", "assistant"]


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    text: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, v: str) -> str:
        # Key line: an empty bubble is never a valid transcript entry.
        if not v or not v.strip():
            raise ValueError("Message text must be non-empty.")
        return v
