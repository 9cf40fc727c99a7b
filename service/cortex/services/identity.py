"""
Identity resolution.

Decides whether a person extracted from a note is an existing contact of the
user or a new one. A match is a case-insensitive equality on
(user_id, first_name, last_name); there is no fuzzy matching.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from postgrest.exceptions import APIError

from cortex.agents.schemas import ExtractedPerson
from cortex.logging_config import get_logger
from cortex.utils import (
    normalize_name,
    normalize_email,
    normalize_phone,
    normalize_tags,
    escape_like,
    full_name,
)

logger = get_logger("identity")

CONTACT_MATCH_COLUMNS = "id, first_name, last_name, company, role, email, phone, tags, status"

STATUS_ACTIVE = "active"
STATUS_INCOMPLETE = "incomplete"


@dataclass
class Resolution:
    """Outcome of resolving one extracted person."""
    contact_id: str
    created: bool
    display_name: str


def initial_status(last_name: str, company: Optional[str], role: Optional[str]) -> str:
    """
    New contacts with a full name and some professional context are active.
    Everything else goes to the debrief queue for the user to complete.
    """
    if last_name and (company or role):
        return STATUS_ACTIVE
    return STATUS_INCOMPLETE


def merge_contact_fields(existing: dict, person: ExtractedPerson) -> dict:
    """
    Compute the update for a matched contact.

    Only blank fields are filled; tags are unioned. Non-empty values the user
    already has are never overwritten by the extractor.
    """
    updates: dict = {}

    candidates = {
        "company": normalize_name(person.company) or None,
        "role": normalize_name(person.role) or None,
        "email": normalize_email(person.email),
        "phone": normalize_phone(person.phone),
    }
    for field, value in candidates.items():
        if value and not existing.get(field):
            updates[field] = value

    existing_tags = existing.get("tags") or []
    merged_tags = list(existing_tags)
    for tag in normalize_tags(person.tags):
        if tag not in merged_tags:
            merged_tags.append(tag)
    if merged_tags != existing_tags:
        updates["tags"] = merged_tags

    return updates


class ContactResolver:
    """Resolves extracted people against one user's contacts."""

    def __init__(self, supabase, user_id: str):
        self.supabase = supabase
        self.user_id = user_id

    def find_existing(self, first_name: str, last_name: str) -> Optional[dict]:
        """Case-insensitive exact match on both name parts."""
        result = self.supabase.table("contacts").select(
            CONTACT_MATCH_COLUMNS
        ).eq("user_id", self.user_id).ilike(
            "first_name", escape_like(first_name)
        ).ilike(
            "last_name", escape_like(last_name)
        ).limit(1).execute()

        if not result.data:
            return None
        return result.data[0]

    def resolve(self, person: ExtractedPerson, seen_at: datetime) -> Optional[Resolution]:
        """
        Link an extracted person to a contact, creating one if needed.

        Returns None when the person has no first name, or when the lookup
        or the insert failed.
        """
        first_name = normalize_name(person.first_name)
        last_name = normalize_name(person.last_name)

        if not first_name:
            logger.debug(f"[RESOLVE] Skipping person without first name: {person.model_dump()}")
            return None

        display_name = full_name(first_name, last_name)
        try:
            existing = self.find_existing(first_name, last_name)
        except APIError as e:
            logger.error(f"[RESOLVE] Lookup failed for {display_name}, skipping: {e}")
            return None

        if existing:
            updates = merge_contact_fields(existing, person)
            updates["last_interaction_at"] = seen_at.isoformat()

            # the note still links to the contact when the touch fails
            try:
                self.supabase.table("contacts").update(updates).eq(
                    "id", existing["id"]
                ).eq("user_id", self.user_id).execute()
            except APIError as e:
                logger.warning(f"[RESOLVE] Failed to update {existing['id']}: {e}")

            logger.info(f"[RESOLVE] Matched {display_name} -> {existing['id']}")
            return Resolution(contact_id=existing["id"], created=False, display_name=display_name)

        company = normalize_name(person.company) or None
        role = normalize_name(person.role) or None

        try:
            result = self.supabase.table("contacts").insert({
                "user_id": self.user_id,
                "first_name": first_name,
                "last_name": last_name,
                "company": company,
                "role": role,
                "email": normalize_email(person.email),
                "phone": normalize_phone(person.phone),
                "tags": normalize_tags(person.tags),
                "status": initial_status(last_name, company, role),
                "last_interaction_at": seen_at.isoformat()
            }).execute()
        except APIError as e:
            logger.error(f"[RESOLVE] Failed to insert contact {display_name}: {e}")
            return None

        if not result.data:
            logger.error(f"[RESOLVE] Insert returned no row for {display_name}")
            return None

        contact_id = result.data[0]["id"]
        logger.info(f"[RESOLVE] Created {display_name} -> {contact_id}")
        return Resolution(contact_id=contact_id, created=True, display_name=display_name)
