"""LLM client — ABC, OpenAI-compatible implementation, and mocks."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Sequence

from context_agent.engine.models import ChatMessage

logger = logging.getLogger(__name__)


class LLMClient(ABC):
    """Abstract chat-completion interface. Returns the reply text.

    An empty string means the provider produced no content; the
    orchestrator substitutes its fallback reply in that case.
    """

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        history: Sequence[ChatMessage],
        user_message: str,
    ) -> str: ...


def build_messages(
    system_prompt: str,
    history: Sequence[ChatMessage],
    user_message: str,
) -> list[dict[str, Any]]:
    return [
        {"role": "system", "content": system_prompt},
        *({"role": m.role, "content": m.content} for m in history),
        {"role": "user", "content": user_message},
    ]


# ---------------------------------------------------------------------------
# OpenAI implementation (also works against OpenAI-compatible endpoints)
# ---------------------------------------------------------------------------

class OpenAILLMClient(LLMClient):
    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> None:
        # Late import so the rest of the package works without openai installed
        from openai import AsyncOpenAI

        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def complete(
        self,
        system_prompt: str,
        history: Sequence[ChatMessage],
        user_message: str,
    ) -> str:
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=build_messages(system_prompt, history, user_message),
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


# ---------------------------------------------------------------------------
# Test mock: deterministic, pre-loaded responses
# ---------------------------------------------------------------------------

class MockLLMClient(LLMClient):
    """Returns pre-configured replies in order; an Exception entry is raised.

    Every call is recorded in :attr:`calls` for assertions.
    """

    def __init__(self, responses: Sequence[str | Exception]) -> None:
        self._responses = list(responses)
        self._call_index = 0
        self.calls: list[dict[str, Any]] = []

    async def complete(
        self,
        system_prompt: str,
        history: Sequence[ChatMessage],
        user_message: str,
    ) -> str:
        self.calls.append({
            "system_prompt": system_prompt,
            "history": list(history),
            "user_message": user_message,
        })
        if self._call_index >= len(self._responses):
            return "[mock responses exhausted]"
        response = self._responses[self._call_index]
        self._call_index += 1
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def call_count(self) -> int:
        return len(self.calls)


# ---------------------------------------------------------------------------
# Demo mock: context-aware, for running without an API key
# ---------------------------------------------------------------------------

class DemoMockLLMClient(LLMClient):
    """Echoes what the pipeline gathered so the flow is visible offline."""

    async def complete(
        self,
        system_prompt: str,
        history: Sequence[ChatMessage],
        user_message: str,
    ) -> str:
        lines = system_prompt.splitlines()
        contexts = [ln for ln in lines if ln.startswith("Context ")]
        tools = [ln for ln in lines if ln.startswith("Tool ")]

        parts = [f"(demo) You asked: {user_message}"]
        if contexts:
            parts.append(f"I found {len(contexts)} relevant passage(s): " + "; ".join(contexts))
        if tools:
            parts.append("Tool output: " + " | ".join(tools))
        if history:
            parts.append(f"We have exchanged {len(history)} recent message(s).")
        parts.append("Set OPENAI_API_KEY for real LLM output.")
        return "\n".join(parts)
