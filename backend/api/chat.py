# Role: Thin HTTP adapter for the chat endpoint. Validates request/response shapes and delegates the turn
# to the session's ConversationStore (business logic lives in core, not in the API layer).

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from backend.api.deps import get_registry
from backend.core.session_registry import SessionRegistry
from backend.models.message import Message

router = APIRouter(tags=["chat"])


class ChatRequest(BaseModel):
    session_id: str
    user_message: str


class ChatResponse(BaseModel):
    session_id: str
    assistant_message: str
    messages: List[Message]
    pending: bool


@router.post("/chat", response_model=ChatResponse)
async def chat(req: ChatRequest, registry: SessionRegistry = Depends(get_registry)) -> ChatResponse:
    # 1) Reject what the store would ignore, with a status the client can act on
    # 2) Run one turn (commit -> gateway -> settle)
    # 3) Return the reply plus the transcript so the widget can re-render
    if not req.user_message.strip():
        raise HTTPException(status_code=422, detail="Message must not be empty.")

    registry.cleanup_expired()
    store = registry.get_or_create(req.session_id)
    if store.pending:
        raise HTTPException(status_code=409, detail="A reply is still pending for this session.")

    reply = await store.send(req.user_message)
    if reply is None:
        raise HTTPException(status_code=409, detail="A reply is still pending for this session.")

    snap = store.snapshot()
    return ChatResponse(
        session_id=req.session_id,
        assistant_message=reply.text,
        messages=list(snap.messages),
        pending=snap.pending,
    )
