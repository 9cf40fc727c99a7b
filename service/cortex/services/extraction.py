"""
Structured extraction from free-form notes.

Both functions use chat completions in JSON mode and validate the output with
pydantic. Nothing here touches the database.
"""

import json

from pydantic import ValidationError

from cortex.config import get_settings
from cortex.errors import ExtractionError
from cortex.logging_config import get_logger
from cortex.openai_client import get_openai_client
from cortex.agents.prompts import (
    EXTRACTION_SYSTEM_PROMPT,
    EXTRACTION_USER_TEMPLATE,
    DRAFT_SYSTEM_PROMPT,
    DRAFT_USER_TEMPLATE,
)
from cortex.agents.schemas import NoteExtraction, ContactDraft

logger = get_logger("extraction")


def _complete_json(system_prompt: str, user_prompt: str, temperature: float = 0.1) -> dict:
    settings = get_settings()
    client = get_openai_client()

    response = client.chat.completions.create(
        model=settings.extraction_model,
        messages=[
            {"role": "system", "content": system_prompt + "\n\nRespond with valid JSON matching the schema."},
            {"role": "user", "content": user_prompt}
        ],
        response_format={"type": "json_object"},
        temperature=temperature
    )

    result_json = response.choices[0].message.content
    if not result_json:
        raise ExtractionError("Empty response from AI")

    try:
        result = json.loads(result_json)
    except json.JSONDecodeError as e:
        raise ExtractionError(f"AI returned invalid JSON: {e}") from e

    if not isinstance(result, dict):
        raise ExtractionError("AI returned JSON that is not an object")
    return result


def parse_extraction(result_dict: dict) -> NoteExtraction:
    """Validate raw extractor JSON, tolerating null or missing fields."""
    people = result_dict.get("people") or []
    if not isinstance(people, list):
        people = []

    try:
        return NoteExtraction(
            people=[p for p in people if isinstance(p, dict)],
            summary=result_dict.get("summary") or ""
        )
    except ValidationError as e:
        raise ExtractionError(f"Extraction did not match schema: {e}") from e


def extract_people(text: str) -> NoteExtraction:
    """
    Extract the people mentioned in a note plus a short summary.

    Raises:
        ExtractionError: empty, non-JSON or schema-violating model output
    """
    result_dict = _complete_json(
        EXTRACTION_SYSTEM_PROMPT,
        EXTRACTION_USER_TEMPLATE.format(text=text)
    )
    extraction = parse_extraction(result_dict)
    logger.info(f"[EXTRACT] {len(extraction.people)} people from {len(text)} chars")
    return extraction


def draft_contact(text: str) -> ContactDraft:
    """
    Structure a note about a single person into a contact card.

    Used for the quick-capture preview; the caller decides whether to save it.
    """
    if not text or not text.strip():
        raise ValueError("No input provided")

    result_dict = _complete_json(
        DRAFT_SYSTEM_PROMPT,
        DRAFT_USER_TEMPLATE.format(text=text)
    )
    for key in ("first_name", "last_name", "notes"):
        if result_dict.get(key) is None:
            result_dict[key] = ""
    if result_dict.get("interests") is None:
        result_dict["interests"] = []

    try:
        return ContactDraft(**result_dict)
    except ValidationError as e:
        raise ExtractionError(f"Draft did not match schema: {e}") from e
