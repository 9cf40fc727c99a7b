from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from cortex.supabase_client import get_supabase_admin
from cortex.middleware.auth import verify_supabase_token, get_user_id
from cortex.services.dashboard import get_dashboard

router = APIRouter(tags=["dashboard"])


class NetworkStatsResponse(BaseModel):
    total_active: int
    engaged_recently: int
    health_score: int


class ReconnectContact(BaseModel):
    id: str
    first_name: str
    last_name: str = ""
    role: Optional[str] = None
    company: Optional[str] = None
    phone: Optional[str] = None
    last_interaction_at: Optional[str] = None
    ping_message: str


class DashboardResponse(BaseModel):
    stats: NetworkStatsResponse
    reconnect: list[ReconnectContact]


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(token_payload: dict = Depends(verify_supabase_token)):
    """
    Network at a glance: % of active contacts engaged recently, and who to reconnect with.
    """
    user_id = get_user_id(token_payload)
    supabase = get_supabase_admin()

    result = get_dashboard(supabase, user_id)

    return DashboardResponse(
        stats=NetworkStatsResponse(
            total_active=result.stats.total_active,
            engaged_recently=result.stats.engaged_recently,
            health_score=result.stats.health_score
        ),
        reconnect=[ReconnectContact(**c) for c in result.reconnect]
    )
