"""
Contact Service

Read and edit a user's contacts and their interaction history.
"""

from typing import Optional

from cortex.errors import ContactNotFoundError
from cortex.logging_config import get_logger
from cortex.supabase_client import get_supabase_admin
from cortex.utils import normalize_name, normalize_email, normalize_phone, normalize_tags

logger = get_logger("contacts")

CONTACT_COLUMNS = (
    "id, first_name, last_name, company, role, email, phone, tags, "
    "status, last_interaction_at, created_at"
)
INTERACTION_COLUMNS = "id, raw_text, summary, source, created_at"


def clean_contact_update(fields: dict) -> dict:
    """Normalize user-submitted edits. Keys with None are dropped (no change)."""
    cleaned: dict = {}
    for key, value in fields.items():
        if value is None:
            continue
        if key in ("first_name", "last_name", "company", "role"):
            cleaned[key] = normalize_name(value)
        elif key == "email":
            cleaned[key] = normalize_email(value)
            if cleaned[key] is None and value.strip():
                raise ValueError("Invalid email")
        elif key == "phone":
            cleaned[key] = normalize_phone(value)
            if cleaned[key] is None and value.strip():
                raise ValueError("Invalid phone")
        elif key == "tags":
            cleaned[key] = normalize_tags(value)
        else:
            cleaned[key] = value

    if "first_name" in cleaned and not cleaned["first_name"]:
        raise ValueError("first_name cannot be empty")
    return cleaned


class ContactService:
    """All queries are scoped to one owner."""

    def __init__(self, supabase=None):
        self.supabase = supabase or get_supabase_admin()

    def list_contacts(
        self,
        user_id: str,
        status: Optional[str] = None,
        limit: int = 100
    ) -> list[dict]:
        query = self.supabase.table("contacts").select(CONTACT_COLUMNS).eq("user_id", user_id)

        if status:
            query = query.eq("status", status)

        result = query.order("created_at", desc=True).limit(limit).execute()
        return result.data or []

    def get_contact(self, user_id: str, contact_id: str) -> dict:
        result = self.supabase.table("contacts").select(CONTACT_COLUMNS).eq(
            "id", contact_id
        ).eq("user_id", user_id).limit(1).execute()

        if not result.data:
            raise ContactNotFoundError(contact_id)
        return result.data[0]

    def update_contact(self, user_id: str, contact_id: str, fields: dict) -> dict:
        updates = clean_contact_update(fields)
        if not updates:
            return self.get_contact(user_id, contact_id)

        result = self.supabase.table("contacts").update(updates).eq(
            "id", contact_id
        ).eq("user_id", user_id).execute()

        if not result.data:
            raise ContactNotFoundError(contact_id)

        logger.info(f"[CONTACTS] Updated {contact_id}: {sorted(updates)}")
        return result.data[0]

    def delete_contact(self, user_id: str, contact_id: str) -> None:
        result = self.supabase.table("contacts").delete().eq(
            "id", contact_id
        ).eq("user_id", user_id).execute()

        if not result.data:
            raise ContactNotFoundError(contact_id)
        logger.info(f"[CONTACTS] Deleted {contact_id}")

    def list_interactions(self, user_id: str, contact_id: str, limit: int = 20) -> list[dict]:
        """Notes that mention the contact, newest first."""
        result = self.supabase.table("interactions").select(INTERACTION_COLUMNS).eq(
            "user_id", user_id
        ).contains("contact_ids", [contact_id]).order(
            "created_at", desc=True
        ).limit(limit).execute()
        return result.data or []


def get_contact_service() -> ContactService:
    return ContactService()
