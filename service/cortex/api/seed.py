import asyncio

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from cortex.config import get_settings
from cortex.supabase_client import get_supabase_admin
from cortex.middleware.auth import verify_supabase_token, get_user_id
from cortex.services.seed import seed_demo_network

router = APIRouter(tags=["seed"])


class SeedResponse(BaseModel):
    contacts_created: int
    interactions_created: int
    log: list[str]


@router.post("/seed", response_model=SeedResponse)
async def seed(token_payload: dict = Depends(verify_supabase_token)):
    """Fill the caller's account with demo contacts. Disabled unless SEED_ENABLED."""
    settings = get_settings()
    if not settings.seed_enabled:
        raise HTTPException(status_code=403, detail="Seeding is disabled")

    user_id = get_user_id(token_payload)
    supabase = get_supabase_admin()

    result = await asyncio.to_thread(seed_demo_network, supabase, user_id)
    return SeedResponse(
        contacts_created=result.contacts_created,
        interactions_created=result.interactions_created,
        log=result.log
    )
