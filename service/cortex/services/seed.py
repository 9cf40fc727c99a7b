"""
Demo data for a fresh account.

Spreads ten contacts across the dashboard windows: recent (< 30 days),
mid-range (30-90 days) and stale (> 90 days, shows up in the reconnect queue).
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

from postgrest.exceptions import APIError

from cortex.errors import EmbeddingError
from cortex.logging_config import get_logger
from cortex.services.embedding import generate_embeddings_batch

logger = get_logger("seed")

SEED_TAGS = ["seed-data", "test"]
SEED_PHONE = "555-0123"

# (first, last, role, company, days since last interaction)
DEMO_CONTACTS = [
    # Recent
    ("Sarah", "Connor", "Security Chief", "TechCorp", 2),
    ("John", "Doe", "CEO", "StartupInc", 10),
    ("Emily", "Blunt", "Actress", "Hollywood", 25),
    # Mid-range
    ("Michael", "Scott", "Regional Manager", "Dunder Mifflin", 45),
    ("Dwight", "Schrute", "Assistant Regional Manager", "Dunder Mifflin", 60),
    ("Jim", "Halpert", "Sales", "Athlead", 85),
    # Reconnect
    ("Walter", "White", "Chemist", "Self-Employed", 100),
    ("Jesse", "Pinkman", "Distributor", "Self-Employed", 120),
    ("Saul", "Goodman", "Lawyer", "Hamlin Hamlin McGill", 200),
    ("Gus", "Fring", "Owner", "Los Pollos Hermanos", 300),
]


@dataclass
class SeedResult:
    contacts_created: int = 0
    interactions_created: int = 0
    log: list[str] = field(default_factory=list)

    def add(self, message: str):
        self.log.append(message)
        logger.info(f"[SEED] {message}")


def demo_note(first_name: str, company: str, days_ago: int) -> str:
    return f"Met with {first_name} about {days_ago} days ago. Discussed {company} business."


def seed_demo_network(
    supabase,
    user_id: str,
    now: Optional[datetime] = None,
    with_embeddings: bool = True
) -> SeedResult:
    """
    Insert the demo roster and one note per contact.

    A failing contact is logged and skipped. Embedding failure only disables
    search over the seeded notes.
    """
    now = now or datetime.now(timezone.utc)
    result = SeedResult()
    result.add(f"Seeding data for user: {user_id}")

    notes = [demo_note(first, company, days) for first, _, _, company, days in DEMO_CONTACTS]

    embeddings: list[Optional[list[float]]] = [None] * len(notes)
    if with_embeddings:
        try:
            embeddings = generate_embeddings_batch(notes)
        except EmbeddingError as e:
            result.add(f"Embeddings unavailable, notes will not be searchable: {e}")

    for (first, last, role, company, days_ago), note, embedding in zip(DEMO_CONTACTS, notes, embeddings):
        result.add(f"Creating {first} {last}...")
        interaction_date = (now - timedelta(days=days_ago)).isoformat()

        try:
            contact = supabase.table("contacts").insert({
                "user_id": user_id,
                "first_name": first,
                "last_name": last,
                "role": role,
                "company": company,
                "status": "active",
                "tags": SEED_TAGS,
                "last_interaction_at": interaction_date,
                "phone": SEED_PHONE
            }).execute()
        except APIError as e:
            result.add(f"Failed to create contact: {e.message}")
            continue

        if not contact.data:
            continue
        result.contacts_created += 1

        try:
            supabase.table("interactions").insert({
                "user_id": user_id,
                "contact_ids": [contact.data[0]["id"]],
                "raw_text": note,
                "source": "seed",
                "embedding": embedding,
                "created_at": interaction_date
            }).execute()
            result.interactions_created += 1
        except APIError as e:
            result.add(f"Failed to create note for {first}: {e.message}")

    result.add("Seed complete! Go to Dashboard to see results.")
    return result
