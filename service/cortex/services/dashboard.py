"""
Network dashboard: health score and reconnect queue.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

from cortex.config import get_settings

PING_TEMPLATE = "Hey {first_name}, thinking of you! How have you been?"


@dataclass
class NetworkStats:
    total_active: int
    engaged_recently: int
    health_score: int  # % of active contacts engaged within the window


@dataclass
class Dashboard:
    stats: NetworkStats
    reconnect: list[dict] = field(default_factory=list)


def parse_timestamp(value) -> Optional[datetime]:
    """Parse a Postgres timestamptz string; naive values are taken as UTC."""
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def compute_network_stats(contacts: list[dict], now: datetime, window_days: int = 30) -> NetworkStats:
    """
    Health of the network.

    engaged = last interaction strictly after now - window_days.
    health_score = round(engaged / total * 100), 0 for an empty network.
    """
    cutoff = now - timedelta(days=window_days)
    total_active = len(contacts)

    engaged = 0
    for contact in contacts:
        last_seen = parse_timestamp(contact.get("last_interaction_at"))
        if last_seen and last_seen > cutoff:
            engaged += 1

    health_score = round(engaged / total_active * 100) if total_active > 0 else 0
    return NetworkStats(total_active=total_active, engaged_recently=engaged, health_score=health_score)


def build_ping_message(contact: dict) -> str:
    return PING_TEMPLATE.format(first_name=contact.get("first_name") or "there")


def get_dashboard(supabase, user_id: str, now: Optional[datetime] = None) -> Dashboard:
    settings = get_settings()
    now = now or datetime.now(timezone.utc)

    # 1. Stats over active contacts
    contacts_result = supabase.table("contacts").select(
        "id, last_interaction_at"
    ).eq("user_id", user_id).eq("status", "active").execute()

    stats = compute_network_stats(
        contacts_result.data or [], now, settings.engaged_window_days
    )

    # 2. Reconnect queue: not seen for reconnect_after_days, oldest first
    reconnect_cutoff = now - timedelta(days=settings.reconnect_after_days)
    reconnect_result = supabase.table("contacts").select(
        "id, first_name, last_name, role, company, phone, last_interaction_at"
    ).eq("user_id", user_id).eq("status", "active").lt(
        "last_interaction_at", reconnect_cutoff.isoformat()
    ).order("last_interaction_at", desc=False).limit(settings.reconnect_limit).execute()

    reconnect = []
    for contact in reconnect_result.data or []:
        reconnect.append({**contact, "ping_message": build_ping_message(contact)})

    return Dashboard(stats=stats, reconnect=reconnect)
