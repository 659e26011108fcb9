# Role: Session endpoints for the widget. Opening the widget GETs the snapshot (lazily creating the session),
# typing PUTs the draft, leaving the page DELETEs the session. No flow logic lives here.

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from backend.api.deps import get_registry
from backend.core.session_registry import SessionRegistry
from backend.models.state import ConversationSnapshot

router = APIRouter(tags=["state"])


class DraftUpdate(BaseModel):
    text: str


@router.get("/state/{session_id}", response_model=ConversationSnapshot)
def get_state(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> ConversationSnapshot:
    return registry.get_or_create(session_id).snapshot()


@router.put("/state/{session_id}/draft", response_model=ConversationSnapshot)
def put_draft(
    session_id: str,
    body: DraftUpdate,
    registry: SessionRegistry = Depends(get_registry),
) -> ConversationSnapshot:
    store = registry.get_or_create(session_id)
    store.set_draft(body.text)
    return store.snapshot()


@router.delete("/state/{session_id}", status_code=204)
def delete_state(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> None:
    if not registry.discard(session_id):
        raise HTTPException(status_code=404, detail="Unknown session.")
