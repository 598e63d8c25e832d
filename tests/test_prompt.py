"""Tests for prompt assembly and LLM message building."""

from __future__ import annotations

from context_agent.engine.llm import DemoMockLLMClient, build_messages
from context_agent.engine.models import ChatMessage, MathResult, PluginResult, RetrievedChunk
from context_agent.engine.prompt import PREAMBLE, build_prompt, build_system_prompt


def _chunk(source: str, content: str) -> RetrievedChunk:
    return RetrievedChunk(id=f"{source}_chunk_0", content=content, source=source, chunk_index=0, score=0.9)


class TestSystemPrompt:
    def test_preamble_only(self):
        assert build_system_prompt([], []) == PREAMBLE

    def test_sections_are_enumerated_and_tagged(self):
        prompt = build_system_prompt(
            [_chunk("a.md", "alpha text"), _chunk("b.md", "beta text")],
            [
                PluginResult(plugin_name="math", result=MathResult(expression="2+2", answer=4)),
                PluginResult(plugin_name="weather", error="Failed to get weather data: boom"),
            ],
        )
        assert prompt.startswith(PREAMBLE)
        assert "Context 1 (from a.md):\nalpha text" in prompt
        assert "Context 2 (from b.md):\nbeta text" in prompt
        assert '"answer": 4' in prompt
        assert "Tool 1 (math) [ok]:" in prompt
        assert "Tool 2 (weather) [error]: Failed to get weather data: boom" in prompt
        assert prompt.index("KNOWLEDGE BASE CONTEXT:") < prompt.index("TOOL RESULTS:")


class TestPromptContext:
    def test_render_has_role_tagged_history(self):
        ctx = build_prompt(
            "and now?",
            [ChatMessage(role="user", content="hi"), ChatMessage(role="assistant", content="hello")],
            [],
            [],
        )
        rendered = ctx.render()
        assert "CONVERSATION HISTORY:\nuser: hi\nassistant: hello" in rendered
        assert rendered.endswith("user: and now?")

    def test_build_messages_order(self):
        messages = build_messages(
            "sys",
            [ChatMessage(role="user", content="q"), ChatMessage(role="assistant", content="a")],
            "next",
        )
        assert messages == [
            {"role": "system", "content": "sys"},
            {"role": "user", "content": "q"},
            {"role": "assistant", "content": "a"},
            {"role": "user", "content": "next"},
        ]


class TestDemoMockLLM:
    async def test_summarises_context_and_tools(self):
        prompt = build_system_prompt(
            [_chunk("a.md", "alpha")],
            [PluginResult(plugin_name="weather", error="nope")],
        )
        reply = await DemoMockLLMClient().complete(prompt, [], "question?")
        assert "You asked: question?" in reply
        assert "1 relevant passage(s)" in reply
        assert "Tool 1 (weather) [error]: nope" in reply
