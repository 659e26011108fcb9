# Role: What the widget renders, as a pure function of a ConversationSnapshot.
# Front-ends (Streamlit, the marketing page script) only draw a ChatView; they never read store internals.

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from backend.models.state import ChatStatus, ConversationSnapshot

INPUT_PLACEHOLDER = "Ask about water saving..."


@dataclass(frozen=True)
class Bubble:
    role: str
    text: str
    align: str  # "right" for the visitor, "left" for the assistant


@dataclass(frozen=True)
class ChatView:
    bubbles: Tuple[Bubble, ...]
    show_loading: bool
    input_value: str
    input_disabled: bool
    submit_disabled: bool
    scroll_to: Optional[int]
    placeholder: str = INPUT_PLACEHOLDER


def build_chat_view(snapshot: ConversationSnapshot, previous_length: Optional[int] = None) -> ChatView:
    # Key line: the loading affordance and the disabled input both mean exactly "awaiting-reply".
    waiting = snapshot.status == ChatStatus.AWAITING_REPLY
    bubbles = tuple(
        Bubble(role=m.role, text=m.text, align="right" if m.role == "user" else "left")
        for m in snapshot.messages
    )

    scroll_to = None
    if bubbles and previous_length != len(bubbles):
        scroll_to = len(bubbles) - 1

    return ChatView(
        bubbles=bubbles,
        show_loading=waiting,
        input_value=snapshot.draft_input,
        input_disabled=waiting,
        submit_disabled=waiting,
        scroll_to=scroll_to,
    )


class ScrollTracker:
    """Remembers how many entries were last rendered, so each render knows whether to auto-scroll."""

    def __init__(self) -> None:
        self.rendered_length: Optional[int] = None

    def render(self, snapshot: ConversationSnapshot) -> ChatView:
        view = build_chat_view(snapshot, self.rendered_length)
        self.rendered_length = len(view.bubbles)
        return view
