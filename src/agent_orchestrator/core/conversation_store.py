"""Conversation state management.

This module owns the per-session turn history. The store is an explicit
abstraction so a durable backend can replace the in-memory one without
touching the agent loop.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from ..exceptions import SessionNotFoundError
from ..types import Turn


@dataclass
class Session:
    """A conversation identified by an opaque session key.

    Attributes:
        key: Session key
        turns: Ordered, append-only turn history
        created_at: Creation time (epoch seconds)
        updated_at: Time of the last append (epoch seconds)
        metadata: Arbitrary caller-supplied values
    """

    key: str
    turns: list[Turn] = field(default_factory=list)
    created_at: float = field(default_factory=time.time)
    updated_at: float = field(default_factory=time.time)
    metadata: dict[str, Any] = field(default_factory=dict)

    def touch(self) -> None:
        """Update the last-modified time, never moving it backwards."""
        self.updated_at = max(self.updated_at, time.time())

    def get_history(self) -> list[dict]:
        """Export turns as list of dicts."""
        return [turn.to_dict() for turn in self.turns]


class ConversationStore(ABC):
    """Interface for session storage."""

    @abstractmethod
    def create(self, session_key: str, metadata: dict[str, Any] | None = None) -> Session:
        """Create a session, or return the existing one unchanged."""

    @abstractmethod
    def get(self, session_key: str) -> Session | None:
        """Get a session by key, or None if unknown."""

    @abstractmethod
    def append_turn(self, session_key: str, turn: Turn) -> None:
        """Append a turn to a session.

        Raises:
            SessionNotFoundError: If the key is unknown
        """

    @abstractmethod
    def clear(self, session_key: str) -> None:
        """Remove a session. No error if it does not exist."""

    @abstractmethod
    def list_sessions(self) -> list[Session]:
        """Snapshot of all sessions."""

    def get_or_create(self, session_key: str, metadata: dict[str, Any] | None = None) -> Session:
        """Get a session, creating it on first reference."""
        session = self.get(session_key)
        if session is None:
            session = self.create(session_key, metadata)
        return session

    @property
    def active_count(self) -> int:
        """Get number of stored sessions."""
        return len(self.list_sessions())


class InMemoryConversationStore(ConversationStore):
    """Dict-backed store; sessions live until cleared or the process exits."""

    def __init__(self):
        self._sessions: dict[str, Session] = {}

    def create(self, session_key: str, metadata: dict[str, Any] | None = None) -> Session:
        existing = self._sessions.get(session_key)
        if existing is not None:
            return existing

        session = Session(key=session_key, metadata=dict(metadata or {}))
        self._sessions[session_key] = session
        return session

    def get(self, session_key: str) -> Session | None:
        return self._sessions.get(session_key)

    def append_turn(self, session_key: str, turn: Turn) -> None:
        if turn is None:
            raise ValueError("turn must not be None")

        session = self._sessions.get(session_key)
        if session is None:
            raise SessionNotFoundError(session_key)

        session.turns.append(turn)
        session.touch()

    def clear(self, session_key: str) -> None:
        self._sessions.pop(session_key, None)

    def list_sessions(self) -> list[Session]:
        return list(self._sessions.values())

    @property
    def active_count(self) -> int:
        return len(self._sessions)
