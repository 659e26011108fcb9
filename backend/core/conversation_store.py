# Role: Owns one Conversation and enforces the submission protocol.
# Two states (idle / awaiting-reply). A turn is committed synchronously (user message + pending + draft clear)
# and settled exactly once (_settle), which appends the single assistant reply and clears pending.
# A turn whose remote call is cancelled settles with the connectivity fallback instead.

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional

from backend.core.assistant_gateway import AssistantGateway
from backend.models.message import Message
from backend.models.state import ChatStatus, Conversation, ConversationSnapshot
from backend.prompts.canned_replies import CONNECTION_ERROR_MESSAGE

logger = logging.getLogger(__name__)

Listener = Callable[[ConversationSnapshot], None]


@dataclass(frozen=True)
class PendingTurn:
    user_text: str
    user_index: int


class ConversationStore:
    def __init__(
        self,
        gateway: Optional[AssistantGateway] = None,
        conversation: Optional[Conversation] = None,
    ) -> None:
        # Key line: dependencies are injectable for testing/mocking.
        self.gateway = gateway or AssistantGateway()
        self._conversation = conversation or Conversation()
        self._in_flight: Optional[PendingTurn] = None
        self._listeners: List[Listener] = []

    # ----------------------------
    # Reads
    # ----------------------------
    @property
    def status(self) -> ChatStatus:
        return self._conversation.status

    @property
    def pending(self) -> bool:
        return self._conversation.pending

    def snapshot(self) -> ConversationSnapshot:
        return ConversationSnapshot.of(self._conversation)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ----------------------------
    # Writes
    # ----------------------------
    def set_draft(self, text: str) -> None:
        # Allowed at any time, including while a reply is pending.
        self._conversation.draft_input = text
        self._touch()

    def begin_turn(self, text: str) -> Optional[PendingTurn]:
        """
        Commit a user message if the preconditions hold, otherwise do nothing.

        Preconditions: trimmed text is non-empty and no reply is pending.
        On success the user message is appended, the draft is cleared and
        pending is set in the same step, so no second submission can slip in.
        """
        trimmed = (text or "").strip()
        if not trimmed or self._conversation.pending:
            logger.debug("Submission ignored (empty=%s, pending=%s)", not trimmed, self._conversation.pending)
            return None

        conv = self._conversation
        conv.messages.append(Message(role="user", text=trimmed))
        conv.draft_input = ""
        conv.pending = True

        turn = PendingTurn(user_text=trimmed, user_index=len(conv.messages) - 1)
        self._in_flight = turn
        self._touch()
        return turn

    async def complete_turn(self, turn: PendingTurn) -> Message:
        """Await the gateway for an in-flight turn and settle it. The single resolution point."""
        if turn is not self._in_flight:
            raise RuntimeError("complete_turn() called for a turn that is not in flight.")

        # respond() absorbs every failure; only cancellation can interrupt the await.
        try:
            reply_text = await self.gateway.respond(turn.user_text)
        except asyncio.CancelledError:
            logger.warning("Reply for turn %d was cancelled; settling with fallback", turn.user_index)
            self.abandon_turn(turn)
            raise

        return self._settle(reply_text)

    def abandon_turn(self, turn: PendingTurn) -> Optional[Message]:
        """
        Settle `turn` with the connectivity fallback if it is still in flight.

        Used when the remote call can no longer finish (cancelled task, host
        interrupted mid-wait). Returns None when the turn was already settled.
        """
        if turn is not self._in_flight:
            return None
        return self._settle(CONNECTION_ERROR_MESSAGE)

    def _settle(self, reply_text: str) -> Message:
        # Append + clear pending in one step, then notify once.
        conv = self._conversation
        reply = Message(role="assistant", text=reply_text)
        conv.messages.append(reply)
        conv.pending = False
        self._in_flight = None
        self._touch()
        return reply

    def submit(self, text: str) -> Optional[asyncio.Task]:
        """
        Commit `text` and schedule the remote call on the running event loop.

        Returns the task settling the turn, or None when the submission was a
        no-op (empty text or a reply still pending).
        """
        turn = self.begin_turn(text)
        if turn is None:
            return None
        task = asyncio.get_running_loop().create_task(self.complete_turn(turn))
        # A task cancelled before its first step never enters complete_turn().
        task.add_done_callback(lambda _task: self.abandon_turn(turn))
        return task

    async def send(self, text: str) -> Optional[Message]:
        # Convenience for callers that just want the reply: submit, then wait for settlement.
        task = self.submit(text)
        if task is None:
            return None
        return await task

    # ----------------------------
    # Internals
    # ----------------------------
    def _touch(self) -> None:
        self._conversation.updated_at = datetime.now(timezone.utc)
        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:
                # An observer must never block the state machine.
                logger.exception("Conversation listener %r failed", listener)
