"""Session memory — ABC + bounded in-memory implementation."""

from __future__ import annotations

import asyncio
import time
from abc import ABC, abstractmethod
from typing import Iterable

from context_agent.engine.models import ChatMessage, Role, Session, Turn

MAX_TURNS = 20


class SessionMemory(ABC):
    """Async per-session turn history.

    Swap to Redis/Postgres by implementing this ABC.
    """

    @abstractmethod
    async def append(self, session_id: str, role: Role, content: str) -> None: ...

    @abstractmethod
    async def append_many(self, session_id: str, turns: Iterable[tuple[Role, str]]) -> None: ...

    @abstractmethod
    async def recent(self, session_id: str, count: int = 4) -> list[ChatMessage]: ...

    @abstractmethod
    async def get(self, session_id: str) -> Session | None: ...


class InMemorySessionMemory(SessionMemory):
    """Dict-backed ring of the last ``max_turns`` turns per session.

    Mutations of one session are serialised by a per-session lock so that
    concurrent requests on the same session cannot interleave their
    append-then-truncate steps. Different sessions never share a lock.
    Sessions and their locks live for the lifetime of the process; neither
    is ever evicted.
    """

    def __init__(self, max_turns: int = MAX_TURNS) -> None:
        if max_turns < 1:
            raise ValueError("max_turns must be >= 1")
        self._max_turns = max_turns
        self._sessions: dict[str, Session] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    @property
    def max_turns(self) -> int:
        return self._max_turns

    def _lock_for(self, session_id: str) -> asyncio.Lock:
        return self._locks.setdefault(session_id, asyncio.Lock())

    async def append(self, session_id: str, role: Role, content: str) -> None:
        await self.append_many(session_id, [(role, content)])

    async def append_many(self, session_id: str, turns: Iterable[tuple[Role, str]]) -> None:
        new_turns = [Turn(role=role, content=content) for role, content in turns]
        async with self._lock_for(session_id):
            session = self._sessions.get(session_id)
            if session is None:
                session = Session(session_id=session_id)
                self._sessions[session_id] = session
            session.messages.extend(new_turns)
            if len(session.messages) > self._max_turns:
                session.messages = session.messages[-self._max_turns:]
            session.updated_at = time.time()

    async def recent(self, session_id: str, count: int = 4) -> list[ChatMessage]:
        session = self._sessions.get(session_id)
        if session is None or count <= 0:
            return []
        return [
            ChatMessage(role=turn.role, content=turn.content)
            for turn in session.messages[-count:]
        ]

    async def get(self, session_id: str) -> Session | None:
        session = self._sessions.get(session_id)
        if session is None:
            return None
        return session.model_copy(deep=True)
