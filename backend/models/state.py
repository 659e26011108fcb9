# Role: Per-widget conversation state. Holds the transcript, the in-flight flag and the uncommitted draft.
# ConversationStore is the only writer; everything else reads ConversationSnapshot.

from datetime import datetime, timezone
from enum import Enum
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field

from backend.models.message import Message
from backend.prompts.canned_replies import GREETING_MESSAGE


class ChatStatus(str, Enum):
    IDLE = "idle"
    AWAITING_REPLY = "awaiting-reply"


def _greeting() -> List[Message]:
    return [Message(role="assistant", text=GREETING_MESSAGE)]


class Conversation(BaseModel):
    # Key line: seeded with exactly one assistant greeting.
    messages: List[Message] = Field(default_factory=_greeting)

    # Key line: the only concurrency primitive. True while a reply is awaited.
    pending: bool = False

    draft_input: str = ""

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def status(self) -> ChatStatus:
        return ChatStatus.AWAITING_REPLY if self.pending else ChatStatus.IDLE


class ConversationSnapshot(BaseModel):
    """Read-only copy of a Conversation, handed to observers and the HTTP layer."""

    model_config = ConfigDict(frozen=True)

    messages: Tuple[Message, ...]
    pending: bool
    draft_input: str
    status: ChatStatus

    @classmethod
    def of(cls, conversation: Conversation) -> "ConversationSnapshot":
        return cls(
            messages=tuple(conversation.messages),
            pending=conversation.pending,
            draft_input=conversation.draft_input,
            status=conversation.status,
        )
