"""
Contacts API.

Endpoints for browsing and editing contacts and their notes.
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from cortex.middleware.auth import verify_supabase_token, get_user_id
from cortex.agents.schemas import Contact, ContactUpdate, ContactDraft, DraftRequest, Interaction
from cortex.services.contacts import ContactService, get_contact_service
from cortex.services.extraction import draft_contact

router = APIRouter(prefix="/contacts", tags=["contacts"])


@router.get("", response_model=list[Contact])
async def list_contacts(
    status: Optional[str] = Query(None, pattern="^(active|incomplete)$"),
    limit: int = Query(100, ge=1, le=500),
    token_payload: dict = Depends(verify_supabase_token),
    service: ContactService = Depends(get_contact_service)
):
    """List contacts, newest first."""
    user_id = get_user_id(token_payload)
    return [Contact(**c) for c in service.list_contacts(user_id, status=status, limit=limit)]


@router.post("/draft", response_model=ContactDraft)
async def draft(
    draft_request: DraftRequest,
    token_payload: dict = Depends(verify_supabase_token)
):
    """
    Structure a note about one person into a contact card without saving it.
    """
    try:
        return await asyncio.to_thread(draft_contact, draft_request.text)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{contact_id}", response_model=Contact)
async def get_contact(
    contact_id: str,
    token_payload: dict = Depends(verify_supabase_token),
    service: ContactService = Depends(get_contact_service)
):
    user_id = get_user_id(token_payload)
    return Contact(**service.get_contact(user_id, contact_id))


@router.patch("/{contact_id}", response_model=Contact)
async def update_contact(
    contact_id: str,
    update: ContactUpdate,
    token_payload: dict = Depends(verify_supabase_token),
    service: ContactService = Depends(get_contact_service)
):
    """Partial update; omitted fields are left unchanged."""
    user_id = get_user_id(token_payload)
    try:
        contact = service.update_contact(user_id, contact_id, update.model_dump(exclude_none=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return Contact(**contact)


@router.delete("/{contact_id}")
async def delete_contact(
    contact_id: str,
    token_payload: dict = Depends(verify_supabase_token),
    service: ContactService = Depends(get_contact_service)
):
    user_id = get_user_id(token_payload)
    service.delete_contact(user_id, contact_id)
    return {"success": True, "contact_id": contact_id}


@router.get("/{contact_id}/interactions", response_model=list[Interaction])
async def list_contact_interactions(
    contact_id: str,
    limit: int = Query(20, ge=1, le=100),
    token_payload: dict = Depends(verify_supabase_token),
    service: ContactService = Depends(get_contact_service)
):
    """Notes that mention this contact, newest first."""
    user_id = get_user_id(token_payload)
    service.get_contact(user_id, contact_id)
    return [Interaction(**i) for i in service.list_interactions(user_id, contact_id, limit=limit)]
