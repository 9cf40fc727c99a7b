from fastapi import APIRouter, Depends, HTTPException, Request

from cortex.config import get_settings
from cortex.supabase_client import get_supabase_admin
from cortex.middleware.auth import verify_supabase_token, get_user_id
from cortex.middleware.rate_limit import limiter
from cortex.agents.schemas import SearchRequest, SearchResponse, ContactCard
from cortex.services.search import search_network

router = APIRouter(tags=["search"])


def _search_limit() -> str:
    return get_settings().rate_limit_search


@router.post("/search", response_model=SearchResponse)
@limiter.limit(_search_limit)
async def search(
    request: Request,  # Required for rate limiter
    search_request: SearchRequest,
    token_payload: dict = Depends(verify_supabase_token)
):
    """
    Ask a question about your network.
    Semantic match over your notes, answered by the chat model.
    """
    user_id = get_user_id(token_payload)
    supabase = get_supabase_admin()

    try:
        result = await search_network(supabase, user_id, search_request.query)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return SearchResponse(
        answer=result.answer,
        contacts=[ContactCard(**c) for c in result.contacts]
    )
