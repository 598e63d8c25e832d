"""Tests for InMemorySessionMemory."""

from __future__ import annotations

import asyncio

import pytest

from context_agent.engine.models import ChatMessage
from context_agent.engine.session import MAX_TURNS, InMemorySessionMemory


class TestSessionBounds:
    async def test_never_exceeds_twenty_turns(self, session_memory):
        for i in range(55):
            await session_memory.append("s1", "user" if i % 2 == 0 else "assistant", f"m{i}")

        session = await session_memory.get("s1")
        assert len(session.messages) == MAX_TURNS == 20
        # retained suffix is the most recent turns, in original order
        assert [t.content for t in session.messages] == [f"m{i}" for i in range(35, 55)]

    async def test_custom_bound(self):
        memory = InMemorySessionMemory(max_turns=3)
        await memory.append_many("s", [("user", "a"), ("assistant", "b"), ("user", "c"), ("assistant", "d")])
        recent = await memory.recent("s", 10)
        assert [m.content for m in recent] == ["b", "c", "d"]

    def test_invalid_bound(self):
        with pytest.raises(ValueError):
            InMemorySessionMemory(max_turns=0)


class TestRecent:
    async def test_unknown_session_is_empty(self, session_memory):
        assert await session_memory.recent("missing", 4) == []
        assert await session_memory.get("missing") is None

    async def test_returns_oldest_first_projection(self, session_memory):
        for i in range(6):
            await session_memory.append("s1", "user", f"m{i}")

        recent = await session_memory.recent("s1", 4)
        assert recent == [ChatMessage(role="user", content=f"m{i}") for i in range(2, 6)]
        assert not hasattr(recent[0], "timestamp")

    async def test_count_larger_than_history(self, session_memory):
        await session_memory.append("s1", "user", "only")
        assert [m.content for m in await session_memory.recent("s1", 4)] == ["only"]

    async def test_zero_count(self, session_memory):
        await session_memory.append("s1", "user", "hi")
        assert await session_memory.recent("s1", 0) == []

    async def test_get_returns_copy(self, session_memory):
        await session_memory.append("s1", "user", "hi")
        snapshot = await session_memory.get("s1")
        snapshot.messages.clear()
        assert len((await session_memory.get("s1")).messages) == 1


class TestConcurrency:
    async def test_sessions_are_isolated(self, session_memory):
        await session_memory.append("a", "user", "for a")
        await session_memory.append("b", "user", "for b")
        assert [m.content for m in await session_memory.recent("a")] == ["for a"]
        assert [m.content for m in await session_memory.recent("b")] == ["for b"]

    async def test_concurrent_pairs_stay_adjacent(self, session_memory):
        async def exchange(i: int) -> None:
            await session_memory.append_many(
                "shared", [("user", f"q{i}"), ("assistant", f"a{i}")],
            )

        await asyncio.gather(*(exchange(i) for i in range(8)))

        session = await session_memory.get("shared")
        contents = [t.content for t in session.messages]
        assert len(contents) == 16
        for j in range(0, 16, 2):
            assert contents[j].startswith("q")
            assert contents[j + 1] == "a" + contents[j][1:]

    async def test_one_lock_per_session(self, session_memory):
        for _ in range(3):
            await session_memory.append("a", "user", "hi")
        await session_memory.append("b", "user", "hi")
        assert session_memory._lock_for("a") is session_memory._lock_for("a")
        assert session_memory._lock_for("a") is not session_memory._lock_for("b")
