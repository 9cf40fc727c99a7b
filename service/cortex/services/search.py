"""
Conversational network search.

Vector match over the user's interactions (platform RPC), then a single chat
completion that answers strictly from the matched notes and linked contacts.
"""

import asyncio
from dataclasses import dataclass, field

from cortex.config import get_settings
from cortex.logging_config import get_logger
from cortex.openai_client import get_openai_client
from cortex.services.embedding import generate_embedding
from cortex.agents.prompts import ANSWER_SYSTEM_PROMPT, ANSWER_USER_TEMPLATE

logger = get_logger("search")

NO_MATCH_ANSWER = "I don't recall anyone matching that description in your network."

CONTACT_CARD_COLUMNS = "id, first_name, last_name, company, role, tags"


@dataclass
class SearchResult:
    answer: str
    contacts: list[dict] = field(default_factory=list)


def describe_contact(contact: dict) -> str:
    """One line per contact: "Contact: Sarah Connor (Security Chief at TechCorp)"."""
    name = " ".join(p for p in (contact.get("first_name"), contact.get("last_name")) if p)
    role = contact.get("role")
    company = contact.get("company")

    if role and company:
        details = f"{role} at {company}"
    else:
        details = role or company or ""

    line = f"Contact: {name}"
    if details:
        line += f" ({details})"
    return line


def build_context(notes: list[str], contacts: list[dict]) -> str:
    notes_text = "".join(f'Note: "{note}"\n' for note in notes)
    if not contacts:
        return notes_text

    contact_context = "\n".join(describe_contact(c) for c in contacts)
    return f"Known Contacts Context:\n{contact_context}\n\nRelated Notes:\n{notes_text}"


def answer_from_context(query: str, context: str) -> str:
    """Ask the chat model; empty output falls back to NO_MATCH_ANSWER."""
    settings = get_settings()
    client = get_openai_client()

    response = client.chat.completions.create(
        model=settings.chat_model,
        messages=[
            {"role": "system", "content": ANSWER_SYSTEM_PROMPT},
            {"role": "user", "content": ANSWER_USER_TEMPLATE.format(context=context, query=query)}
        ],
        temperature=0.3
    )

    answer = response.choices[0].message.content
    return answer.strip() if answer and answer.strip() else NO_MATCH_ANSWER


async def search_network(supabase, user_id: str, query: str) -> SearchResult:
    """
    Answer a question about the user's network.

    1. Embed the query
    2. match_interactions RPC (scoped to the user)
    3. Load matched notes and the contacts linked to them
    4. One chat completion over that context
    """
    if not query or not query.strip():
        raise ValueError("Missing query")

    settings = get_settings()
    query = query.strip()

    query_embedding = await asyncio.to_thread(generate_embedding, query)

    match_result = supabase.rpc(
        'match_interactions',
        {
            'query_embedding': query_embedding,
            'match_threshold': settings.search_match_threshold,
            'match_count': settings.search_match_count,
            'p_user_id': user_id
        }
    ).execute()

    matches = match_result.data or []
    logger.info(f"[SEARCH] {len(matches)} interactions matched '{query[:50]}'")

    if not matches:
        return SearchResult(answer=NO_MATCH_ANSWER, contacts=[])

    interaction_ids = [m['id'] for m in matches]

    interactions_result = supabase.table('interactions').select(
        'id, raw_text, contact_ids'
    ).eq('user_id', user_id).in_('id', interaction_ids).execute()

    # Keep similarity order from the RPC
    rows_by_id = {row['id']: row for row in interactions_result.data or []}
    ordered_rows = [rows_by_id[i] for i in interaction_ids if i in rows_by_id]

    if not ordered_rows:
        return SearchResult(answer=NO_MATCH_ANSWER, contacts=[])

    notes: list[str] = []
    contact_ids: list[str] = []
    for row in ordered_rows:
        notes.append(row['raw_text'])
        for contact_id in row.get('contact_ids') or []:
            if contact_id not in contact_ids:
                contact_ids.append(contact_id)

    contacts: list[dict] = []
    if contact_ids:
        contacts_result = supabase.table('contacts').select(
            CONTACT_CARD_COLUMNS
        ).eq('user_id', user_id).in_('id', contact_ids).execute()

        by_id = {c['id']: c for c in contacts_result.data or []}
        contacts = [by_id[c] for c in contact_ids if c in by_id]

    context = build_context(notes, contacts)
    answer = await asyncio.to_thread(answer_from_context, query, context)

    return SearchResult(answer=answer, contacts=contacts)
