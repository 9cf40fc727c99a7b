"""
Debrief API.

Review queue for incomplete contacts. Skipping a card is client-side only.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from cortex.supabase_client import get_supabase_admin
from cortex.middleware.auth import verify_supabase_token, get_user_id
from cortex.agents.schemas import Contact, ContactUpdate
from cortex.services.debrief import get_debrief_queue, confirm_contact, discard_contact

router = APIRouter(prefix="/debrief", tags=["debrief"])


class DebriefItem(BaseModel):
    contact: Contact
    context: Optional[str] = None


class DebriefQueueResponse(BaseModel):
    items: list[DebriefItem]
    total: int


@router.get("", response_model=DebriefQueueResponse)
async def debrief_queue(token_payload: dict = Depends(verify_supabase_token)):
    user_id = get_user_id(token_payload)
    supabase = get_supabase_admin()

    queue = get_debrief_queue(supabase, user_id)
    items = [DebriefItem(contact=Contact(**q["contact"]), context=q["context"]) for q in queue]
    return DebriefQueueResponse(items=items, total=len(items))


@router.post("/{contact_id}/confirm", response_model=Contact)
async def confirm(
    contact_id: str,
    edits: ContactUpdate,
    token_payload: dict = Depends(verify_supabase_token)
):
    """Save the reviewed fields and move the contact to active."""
    user_id = get_user_id(token_payload)
    supabase = get_supabase_admin()

    try:
        contact = confirm_contact(supabase, user_id, contact_id, edits.model_dump(exclude_none=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return Contact(**contact)


@router.delete("/{contact_id}")
async def discard(
    contact_id: str,
    token_payload: dict = Depends(verify_supabase_token)
):
    user_id = get_user_id(token_payload)
    supabase = get_supabase_admin()

    discard_contact(supabase, user_id, contact_id)
    return {"success": True, "contact_id": contact_id}
