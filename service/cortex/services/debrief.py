"""
Debrief queue: incomplete contacts created by the note pipeline, waiting for
the user to confirm, fix or delete them.
"""

from cortex.logging_config import get_logger
from cortex.services.contacts import ContactService, CONTACT_COLUMNS
from cortex.services.identity import STATUS_ACTIVE, STATUS_INCOMPLETE

logger = get_logger("debrief")


def get_debrief_queue(supabase, user_id: str, limit: int = 50) -> list[dict]:
    """
    Incomplete contacts, newest first, each with one note that mentions them.

    Returns items shaped {"contact": {...}, "context": "raw note text" | None}.
    """
    contacts_result = supabase.table("contacts").select(CONTACT_COLUMNS).eq(
        "user_id", user_id
    ).eq("status", STATUS_INCOMPLETE).order("created_at", desc=True).limit(limit).execute()

    queue = []
    for contact in contacts_result.data or []:
        context_result = supabase.table("interactions").select("raw_text").eq(
            "user_id", user_id
        ).contains("contact_ids", [contact["id"]]).order(
            "created_at", desc=True
        ).limit(1).execute()

        context = context_result.data[0]["raw_text"] if context_result.data else None
        queue.append({"contact": contact, "context": context})

    return queue


def confirm_contact(supabase, user_id: str, contact_id: str, edits: dict) -> dict:
    """Apply the reviewed fields and mark the contact complete."""
    fields = {k: v for k, v in edits.items() if k != "status"}
    fields["status"] = STATUS_ACTIVE

    contact = ContactService(supabase).update_contact(user_id, contact_id, fields)
    logger.info(f"[DEBRIEF] Confirmed {contact_id}")
    return contact


def discard_contact(supabase, user_id: str, contact_id: str) -> None:
    ContactService(supabase).delete_contact(user_id, contact_id)
    logger.info(f"[DEBRIEF] Discarded {contact_id}")
