"""
Tests for network health and the reconnect queue.
"""

from datetime import datetime, timedelta, timezone

from cortex.services.dashboard import (
    compute_network_stats,
    build_ping_message,
    get_dashboard,
    parse_timestamp,
)
from conftest import OTHER_USER_ID

NOW = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


def days_ago(days: int) -> str:
    return (NOW - timedelta(days=days)).isoformat()


class TestParseTimestamp:

    def test_offset(self):
        assert parse_timestamp("2026-10-01T12:00:00+00:00") == NOW

    def test_z_suffix(self):
        assert parse_timestamp("2026-10-01T12:00:00Z") == NOW

    def test_naive_is_utc(self):
        assert parse_timestamp("2026-10-01T12:00:00") == NOW

    def test_empty_or_garbage(self):
        assert parse_timestamp(None) is None
        assert parse_timestamp("yesterday") is None


class TestComputeNetworkStats:

    def test_empty_network(self):
        stats = compute_network_stats([], NOW)
        assert (stats.total_active, stats.engaged_recently, stats.health_score) == (0, 0, 0)

    def test_health_score_rounds(self):
        contacts = [
            {"last_interaction_at": days_ago(2)},
            {"last_interaction_at": days_ago(45)},
            {"last_interaction_at": days_ago(100)},
        ]
        stats = compute_network_stats(contacts, NOW, window_days=30)
        assert stats.total_active == 3
        assert stats.engaged_recently == 1
        assert stats.health_score == 33

    def test_window_boundary_is_exclusive(self):
        stats = compute_network_stats([{"last_interaction_at": days_ago(30)}], NOW, window_days=30)
        assert stats.engaged_recently == 0

    def test_never_seen_counts_as_not_engaged(self):
        stats = compute_network_stats([{"last_interaction_at": None}, {"last_interaction_at": days_ago(1)}], NOW)
        assert stats.health_score == 50


def test_ping_message():
    assert build_ping_message({"first_name": "Walter"}) == "Hey Walter, thinking of you! How have you been?"


def test_get_dashboard(supabase, user_id):
    for first, days in [("Sarah", 2), ("Jim", 85), ("Gus", 300), ("Walter", 100)]:
        supabase.add("contacts", user_id=user_id, first_name=first, last_name="X",
                     status="active", last_interaction_at=days_ago(days))
    supabase.add("contacts", user_id=user_id, first_name="Pending", last_name="",
                 status="incomplete", last_interaction_at=days_ago(200))
    supabase.add("contacts", user_id=OTHER_USER_ID, first_name="Stranger", last_name="",
                 status="active", last_interaction_at=days_ago(200))

    dashboard = get_dashboard(supabase, user_id, now=NOW)

    assert dashboard.stats.total_active == 4
    assert dashboard.stats.engaged_recently == 1
    assert dashboard.stats.health_score == 25
    assert [c["first_name"] for c in dashboard.reconnect] == ["Gus", "Walter"]
    assert dashboard.reconnect[0]["ping_message"].startswith("Hey Gus")
