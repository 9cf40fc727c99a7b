from fastapi import APIRouter, Depends, HTTPException, Request

from cortex.config import get_settings
from cortex.supabase_client import get_supabase_admin
from cortex.middleware.auth import verify_supabase_token, get_user_id
from cortex.middleware.rate_limit import limiter
from cortex.agents.schemas import (
    IngestTextRequest,
    IngestVoiceRequest,
    IngestResponse,
    IngestData,
)
from cortex.services.ingestion import IngestionResult, ingest_note, ingest_voice_note

router = APIRouter(prefix="/notes", tags=["notes"])


def _ingest_limit() -> str:
    return get_settings().rate_limit_ingest


def to_response(result: IngestionResult) -> IngestResponse:
    return IngestResponse(
        success=True,
        data=IngestData(
            summary=result.summary,
            contacts_processed=result.contacts_processed,
            contact_ids=result.contact_ids,
            created_count=result.created_count,
            matched_count=result.matched_count,
            interaction_id=result.interaction_id,
            transcript=result.transcript
        )
    )


@router.post("/text", response_model=IngestResponse)
@limiter.limit(_ingest_limit)
async def ingest_text_note(
    request: Request,  # Required for rate limiter
    note: IngestTextRequest,
    token_payload: dict = Depends(verify_supabase_token)
):
    """
    Process a text note.
    Extracts people, links them to contacts and saves the note.
    """
    user_id = get_user_id(token_payload)
    supabase = get_supabase_admin()

    try:
        result = await ingest_note(supabase, user_id, note.text)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return to_response(result)


@router.post("/voice", response_model=IngestResponse)
@limiter.limit(_ingest_limit)
async def ingest_voice(
    request: Request,  # Required for rate limiter
    note: IngestVoiceRequest,
    token_payload: dict = Depends(verify_supabase_token)
):
    """
    Process a voice note: inline base64 audio or a path in the voice-notes bucket.
    Transcribes, then runs the same pipeline as text notes.
    """
    user_id = get_user_id(token_payload)
    supabase = get_supabase_admin()

    try:
        result = await ingest_voice_note(
            supabase,
            user_id,
            audio_base64=note.audio_base64,
            storage_path=note.storage_path,
            mime_type=note.mime_type
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return to_response(result)
