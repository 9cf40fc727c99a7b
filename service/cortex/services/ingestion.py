import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from postgrest.exceptions import APIError

from cortex.errors import IngestionError
from cortex.logging_config import get_logger
from cortex.services.embedding import generate_embedding
from cortex.services.extraction import extract_people
from cortex.services.identity import ContactResolver
from cortex.services.transcription import (
    decode_audio_base64,
    filename_for_mime,
    transcribe_audio,
    transcribe_from_storage,
)

logger = get_logger("ingestion")


@dataclass
class IngestionResult:
    """Result of processing one note through the pipeline."""
    summary: str
    contact_ids: list[str]
    created_count: int
    matched_count: int
    interaction_id: Optional[str]
    people_names: list[str] = field(default_factory=list)
    transcript: Optional[str] = None

    @property
    def contacts_processed(self) -> int:
        return len(self.contact_ids)


async def ingest_note(
    supabase,
    user_id: str,
    text: str,
    source: str = "text",
    now: Optional[datetime] = None
) -> IngestionResult:
    """
    Main note pipeline:
    1. Extract people + summary and embed the note (in parallel)
    2. Resolve every person to an existing or new contact
    3. Save the note as an interaction linked to those contacts

    This is the SINGLE SOURCE OF TRUTH for note processing.
    Used by both the text and voice endpoints.

    Raises:
        ValueError: blank note
        ExtractionError / EmbeddingError: AI calls failed, nothing was written
        IngestionError: contacts may be written but the interaction was not
    """
    if not text or not text.strip():
        raise ValueError("Missing text")

    now = now or datetime.now(timezone.utc)
    logger.info(f"[INGEST] Processing note for user {user_id}: {text[:50]}...")

    extraction, embedding = await asyncio.gather(
        asyncio.to_thread(extract_people, text),
        asyncio.to_thread(generate_embedding, text),
    )

    resolver = ContactResolver(supabase, user_id)
    contact_ids: list[str] = []
    people_names: list[str] = []
    created_count = 0
    matched_count = 0

    for person in extraction.people:
        resolution = resolver.resolve(person, now)
        if resolution is None:
            continue
        # Same person mentioned twice in one note links once
        if resolution.contact_id in contact_ids:
            continue

        contact_ids.append(resolution.contact_id)
        people_names.append(resolution.display_name)
        if resolution.created:
            created_count += 1
        else:
            matched_count += 1

    logger.info(f"[INGEST] Resolved {len(contact_ids)} contacts ({created_count} new, {matched_count} existing)")

    try:
        interaction_result = supabase.table("interactions").insert({
            "user_id": user_id,
            "raw_text": text,
            "summary": extraction.summary or None,
            "source": source,
            "contact_ids": contact_ids,
            "embedding": embedding
        }).execute()
    except APIError as e:
        raise IngestionError(f"Failed to save interaction: {e.message}") from e

    interaction_id = interaction_result.data[0]["id"] if interaction_result.data else None
    logger.info(f"[INGEST] Saved interaction {interaction_id}")

    return IngestionResult(
        summary=extraction.summary,
        contact_ids=contact_ids,
        created_count=created_count,
        matched_count=matched_count,
        interaction_id=interaction_id,
        people_names=people_names
    )


async def ingest_voice_note(
    supabase,
    user_id: str,
    audio_base64: Optional[str] = None,
    storage_path: Optional[str] = None,
    mime_type: str = "audio/webm",
    now: Optional[datetime] = None
) -> IngestionResult:
    """Transcribe a voice note, then run it through ingest_note."""
    if audio_base64:
        audio_bytes = decode_audio_base64(audio_base64)
        transcript = await asyncio.to_thread(
            transcribe_audio, audio_bytes, filename_for_mime(mime_type)
        )
    elif storage_path:
        transcript = await transcribe_from_storage(storage_path)
    else:
        raise ValueError("No audio provided")

    logger.info(f"[INGEST] Voice note transcribed: {len(transcript)} chars")

    result = await ingest_note(supabase, user_id, transcript, source="voice", now=now)
    result.transcript = transcript
    return result
