"""
Tests for conversational network search.
"""

from types import SimpleNamespace

import pytest

from cortex.services import search
from cortex.services.search import (
    NO_MATCH_ANSWER,
    answer_from_context,
    build_context,
    describe_contact,
    search_network,
)
from conftest import OTHER_USER_ID

QUERY_EMBEDDING = [0.5, 0.5]


@pytest.fixture
def fake_ai(monkeypatch):
    state = {"answers": [], "contexts": []}

    def fake_answer(query, context):
        state["contexts"].append(context)
        return "Sarah Connor runs security at TechCorp."

    monkeypatch.setattr(search, "generate_embedding", lambda text: QUERY_EMBEDDING)
    monkeypatch.setattr(search, "answer_from_context", fake_answer)
    return state


class TestDescribeContact:

    def test_role_and_company(self):
        line = describe_contact({"first_name": "Sarah", "last_name": "Connor",
                                 "role": "Security Chief", "company": "TechCorp"})
        assert line == "Contact: Sarah Connor (Security Chief at TechCorp)"

    def test_company_only(self):
        assert describe_contact({"first_name": "Gus", "last_name": "", "company": "Los Pollos"}) == \
            "Contact: Gus (Los Pollos)"

    def test_name_only(self):
        assert describe_contact({"first_name": "Leo"}) == "Contact: Leo"


class TestBuildContext:

    def test_notes_only(self):
        assert build_context(["Met Leo"], []) == 'Note: "Met Leo"\n'

    def test_contacts_first_then_notes(self):
        context = build_context(["Met Sarah"], [{"first_name": "Sarah", "last_name": "Connor"}])
        assert context.startswith("Known Contacts Context:\nContact: Sarah Connor")
        assert context.endswith('Related Notes:\nNote: "Met Sarah"\n')


@pytest.mark.asyncio
async def test_no_matches_returns_fixed_answer(supabase, user_id, fake_ai):
    result = await search_network(supabase, user_id, "who knows a lawyer?")

    assert result.answer == NO_MATCH_ANSWER
    assert result.contacts == []
    assert fake_ai["contexts"] == []


@pytest.mark.asyncio
async def test_rpc_is_scoped_and_tuned(supabase, user_id, fake_ai):
    await search_network(supabase, user_id, "  security people  ")

    [(name, params)] = supabase.rpc_calls
    assert name == "match_interactions"
    assert params == {
        "query_embedding": QUERY_EMBEDDING,
        "match_threshold": 0.5,
        "match_count": 5,
        "p_user_id": user_id,
    }


@pytest.mark.asyncio
async def test_matches_build_context_and_contacts(supabase, user_id, fake_ai):
    sarah = supabase.add("contacts", user_id=user_id, first_name="Sarah", last_name="Connor",
                         role="Security Chief", company="TechCorp", tags=["security"])
    john = supabase.add("contacts", user_id=user_id, first_name="John", last_name="Doe",
                        role="CEO", company="StartupInc", tags=[])
    first = supabase.add("interactions", user_id=user_id, raw_text="John intro'd me to Sarah",
                         contact_ids=[john["id"], sarah["id"]])
    second = supabase.add("interactions", user_id=user_id, raw_text="Sarah on zero trust",
                          contact_ids=[sarah["id"]])
    supabase.rpc_results["match_interactions"] = [
        {"id": second["id"], "similarity": 0.9},
        {"id": first["id"], "similarity": 0.7},
    ]

    result = await search_network(supabase, user_id, "who knows security?")

    assert result.answer == "Sarah Connor runs security at TechCorp."
    assert [c["id"] for c in result.contacts] == [sarah["id"], john["id"]]
    [context] = fake_ai["contexts"]
    assert "Contact: Sarah Connor (Security Chief at TechCorp)" in context
    assert context.index("Sarah on zero trust") < context.index("John intro'd me to Sarah")


@pytest.mark.asyncio
async def test_other_users_rows_are_ignored(supabase, user_id, fake_ai):
    foreign = supabase.add("interactions", user_id=OTHER_USER_ID, raw_text="secret", contact_ids=[])
    supabase.rpc_results["match_interactions"] = [{"id": foreign["id"], "similarity": 0.99}]

    result = await search_network(supabase, user_id, "secret")

    assert result.answer == NO_MATCH_ANSWER
    assert fake_ai["contexts"] == []


@pytest.mark.asyncio
async def test_notes_without_contacts_still_answer(supabase, user_id, fake_ai):
    note = supabase.add("interactions", user_id=user_id, raw_text="Conference in Lisbon", contact_ids=[])
    supabase.rpc_results["match_interactions"] = [{"id": note["id"], "similarity": 0.8}]

    result = await search_network(supabase, user_id, "Lisbon?")

    assert result.contacts == []
    assert fake_ai["contexts"] == ['Note: "Conference in Lisbon"\n']


@pytest.mark.asyncio
async def test_blank_query_rejected(supabase, user_id, fake_ai):
    with pytest.raises(ValueError):
        await search_network(supabase, user_id, " ")


class TestAnswerFromContext:

    def fake_chat(self, monkeypatch, content):
        calls = []

        def create(**kwargs):
            calls.append(kwargs)
            message = SimpleNamespace(content=content)
            return SimpleNamespace(choices=[SimpleNamespace(message=message)])

        client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
        monkeypatch.setattr(search, "get_openai_client", lambda: client)
        return calls

    def test_answer_uses_context_and_query(self, monkeypatch):
        calls = self.fake_chat(monkeypatch, "  Sarah Connor.  ")

        assert answer_from_context("who does security?", "Contact: Sarah Connor") == "Sarah Connor."
        prompt = calls[0]["messages"][1]["content"]
        assert "who does security?" in prompt
        assert "Contact: Sarah Connor" in prompt

    @pytest.mark.parametrize("content", ["", "   ", None])
    def test_empty_model_output_falls_back(self, monkeypatch, content):
        self.fake_chat(monkeypatch, content)

        assert answer_from_context("anyone?", "Note: x") == NO_MATCH_ANSWER
