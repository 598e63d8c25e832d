"""Tests for PluginDispatcher detection and ordering."""

from __future__ import annotations

import asyncio
import re

import pytest

from context_agent.engine.models import GenericResult
from context_agent.tools.base import Plugin
from context_agent.tools.registry import PluginDispatcher


# -- helpers ----------------------------------------------------------------

class EchoPlugin(Plugin):
    def __init__(self, name: str, pattern: str, delay: float = 0.0, fail: bool = False) -> None:
        self._name = name
        self._patterns = (re.compile(pattern, re.IGNORECASE),)
        self._delay = delay
        self._fail = fail

    @property
    def name(self) -> str:
        return self._name

    @property
    def intent_patterns(self) -> tuple[re.Pattern[str], ...]:
        return self._patterns

    async def run(self, message: str) -> GenericResult:
        await asyncio.sleep(self._delay)
        if self._fail:
            raise RuntimeError("kaboom")
        return GenericResult(data={"echo": message})


# -- tests ------------------------------------------------------------------

class TestDefaultDispatch:
    async def test_weather_and_math_both_trigger_in_order(self, dispatcher):
        results = await dispatcher.dispatch("What's the weather in Paris and what is 5*6?")
        assert [r.plugin_name for r in results] == ["weather", "math"]

        weather, math = results
        assert weather.ok and weather.result.city == "Paris"
        assert weather.result.source == "mock"
        assert math.ok and math.result.answer == 30

    async def test_no_intent_no_results(self, dispatcher):
        assert await dispatcher.dispatch("Tell me about the Eiffel Tower") == []

    async def test_only_math(self, dispatcher):
        results = await dispatcher.dispatch("compute (2+3)*4")
        assert [r.plugin_name for r in results] == ["math"]
        assert results[0].result.answer == 20

    def test_registration_order(self, dispatcher):
        assert dispatcher.plugin_names == ["weather", "math"]


class TestDispatcherBehaviour:
    async def test_results_follow_declaration_order_not_completion(self):
        dispatcher = PluginDispatcher()
        dispatcher.register(EchoPlugin("slow", "hello", delay=0.05))
        dispatcher.register(EchoPlugin("fast", "hello"))

        results = await dispatcher.dispatch("hello")
        assert [r.plugin_name for r in results] == ["slow", "fast"]

    async def test_failing_plugin_is_captured(self):
        dispatcher = PluginDispatcher()
        dispatcher.register(EchoPlugin("bad", "x", fail=True))
        dispatcher.register(EchoPlugin("good", "x"))

        bad, good = await dispatcher.dispatch("x")
        assert bad.result is None
        assert bad.error == "bad plugin failed: kaboom"
        assert good.ok

    async def test_timeout_becomes_error(self):
        dispatcher = PluginDispatcher(timeout=0.05)
        dispatcher.register(EchoPlugin("sleepy", "zzz", delay=1.0))

        (result,) = await dispatcher.dispatch("zzz")
        assert result.result is None
        assert "timed out" in result.error

    def test_duplicate_registration_rejected(self):
        dispatcher = PluginDispatcher()
        dispatcher.register(EchoPlugin("one", "a"))
        with pytest.raises(ValueError, match="already registered"):
            dispatcher.register(EchoPlugin("one", "b"))

    def test_detect(self):
        dispatcher = PluginDispatcher()
        dispatcher.register(EchoPlugin("a", "apple"))
        dispatcher.register(EchoPlugin("b", "banana"))
        assert [p.name for p in dispatcher.detect("apple and banana")] == ["a", "b"]
        assert dispatcher.get("a") is not None
        assert dispatcher.get("missing") is None
