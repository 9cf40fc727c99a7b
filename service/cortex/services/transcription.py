import asyncio
import base64
import binascii

import httpx

from cortex.config import get_settings
from cortex.errors import TranscriptionError
from cortex.logging_config import get_logger
from cortex.openai_client import get_openai_client

logger = get_logger("transcription")

VOICE_NOTES_BUCKET = "voice-notes"

# mime type -> file extension the speech-to-text API uses for format detection
AUDIO_EXTENSIONS = {
    "audio/webm": "webm",
    "audio/ogg": "ogg",
    "audio/mpeg": "mp3",
    "audio/mp4": "m4a",
    "audio/x-m4a": "m4a",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
}


def filename_for_mime(mime_type: str) -> str:
    base = mime_type.split(";")[0].strip().lower()
    return f"audio.{AUDIO_EXTENSIONS.get(base, 'webm')}"


def decode_audio_base64(data: str) -> bytes:
    """Decode base64 audio, stripping a data URL prefix (e.g. "data:audio/webm;base64,")."""
    if data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]

    try:
        audio = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 audio: {e}") from e

    if not audio:
        raise ValueError("Audio payload is empty")
    return audio


async def download_audio_from_storage(storage_path: str, supabase_url: str, service_key: str) -> bytes:
    """Download audio file from Supabase Storage."""
    url = f"{supabase_url}/storage/v1/object/{VOICE_NOTES_BUCKET}/{storage_path}"

    async with httpx.AsyncClient() as client:
        try:
            response = await client.get(
                url,
                headers={"apikey": service_key, "Authorization": f"Bearer {service_key}"},
                timeout=30.0
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise TranscriptionError(f"Could not download {storage_path}: {e}") from e
        return response.content


def transcribe_audio(audio_bytes: bytes, filename: str = "audio.webm") -> str:
    """
    Transcribe audio with the configured speech-to-text model.

    Args:
        audio_bytes: Raw audio file bytes
        filename: Filename with extension for format detection

    Returns:
        Transcribed text
    """
    settings = get_settings()
    client = get_openai_client()

    response = client.audio.transcriptions.create(
        model=settings.transcription_model,
        file=(filename, audio_bytes),
        response_format="text"
    )

    transcript = (response if isinstance(response, str) else getattr(response, "text", "")) or ""
    transcript = transcript.strip()
    if not transcript:
        raise TranscriptionError("Transcription is empty")

    logger.info(f"[TRANSCRIBE] {len(audio_bytes)} bytes -> {len(transcript)} chars")
    return transcript


async def transcribe_from_storage(storage_path: str) -> str:
    """
    Download audio from Supabase Storage and transcribe it.

    Args:
        storage_path: Path to audio file in voice-notes bucket

    Returns:
        Transcribed text
    """
    settings = get_settings()

    audio_bytes = await download_audio_from_storage(
        storage_path,
        settings.supabase_url,
        settings.supabase_service_role_key
    )

    # Determine filename from path for format detection
    filename = storage_path.split("/")[-1] if "/" in storage_path else storage_path

    return await asyncio.to_thread(transcribe_audio, audio_bytes, filename)
