"""Tests for the in-memory conversation store."""

import pytest

from agent_orchestrator.core import InMemoryConversationStore
from agent_orchestrator.exceptions import SessionNotFoundError
from agent_orchestrator.types import MessageRole, TextBlock, Turn


class TestCreate:
    """Tests for session creation."""

    def test_create_new_session(self, store):
        session = store.create("s1", {"user": "alice"})
        assert session.key == "s1"
        assert session.turns == []
        assert session.metadata == {"user": "alice"}
        assert session.created_at <= session.updated_at

    def test_create_is_idempotent(self, store):
        first = store.create("s1", {"user": "alice"})
        store.append_turn("s1", Turn(role=MessageRole.USER, content="hi"))

        second = store.create("s1", {"user": "bob"})

        assert second is first
        assert second.metadata == {"user": "alice"}
        assert len(second.turns) == 1

    def test_metadata_is_copied(self, store):
        metadata = {"k": "v"}
        session = store.create("s1", metadata)
        metadata["k"] = "changed"
        assert session.metadata == {"k": "v"}

    def test_get_or_create(self, store):
        assert store.get("s1") is None
        session = store.get_or_create("s1")
        assert store.get_or_create("s1") is session


class TestAppendTurn:
    """Tests for appending turns."""

    def test_append_to_unknown_session(self, store):
        with pytest.raises(SessionNotFoundError) as exc_info:
            store.append_turn("missing", Turn(role=MessageRole.USER, content="hi"))
        assert exc_info.value.session_key == "missing"

    def test_append_none_rejected(self, store):
        store.create("s1")
        with pytest.raises(ValueError):
            store.append_turn("s1", None)

    def test_append_orders_turns_and_bumps_timestamp(self, store):
        session = store.create("s1")
        previous = session.updated_at

        user = Turn(role=MessageRole.USER, content="hi")
        store.append_turn("s1", user)
        assert session.turns[-1] is user
        assert session.updated_at >= previous

        previous = session.updated_at
        reply = Turn(role=MessageRole.ASSISTANT, content=[TextBlock(text="hello")])
        store.append_turn("s1", reply)
        assert session.turns == [user, reply]
        assert session.updated_at >= previous


class TestClearAndList:
    """Tests for clearing and listing sessions."""

    def test_clear_removes_session(self, store):
        store.create("s1")
        store.clear("s1")
        assert store.get("s1") is None

    def test_clear_unknown_is_noop(self, store):
        store.clear("missing")
        assert store.active_count == 0

    def test_list_sessions_is_snapshot(self):
        store = InMemoryConversationStore()
        store.create("a")
        snapshot = store.list_sessions()
        store.create("b")

        assert [s.key for s in snapshot] == ["a"]
        assert store.active_count == 2

    def test_history_export(self, store):
        store.create("s1")
        store.append_turn("s1", Turn(role=MessageRole.USER, content="hi"))
        assert store.get("s1").get_history() == [{"role": "user", "content": "hi"}]
