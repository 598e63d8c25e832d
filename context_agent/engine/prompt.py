"""Prompt assembly for the completion call."""

from __future__ import annotations

import json

from pydantic import BaseModel, Field

from context_agent.engine.models import ChatMessage, PluginResult, RetrievedChunk

PREAMBLE = """You are an intelligent AI assistant with access to a knowledge base and various tools. Your role is to provide helpful, accurate, and contextual responses to user queries.

INSTRUCTIONS:
1. Use the provided context from the knowledge base to inform your responses
2. If plugin results are available, incorporate them naturally into your response
3. Be conversational but informative
4. If you don't know something or if information isn't in the provided context, say so
5. Keep responses concise but thorough
"""


class PromptContext(BaseModel):
    """Everything sent to the LLM for one request. Discarded afterwards."""
    system_prompt: str
    history: list[ChatMessage] = Field(default_factory=list)
    user_message: str

    def render(self) -> str:
        """Flatten to a single text block with role-tagged history lines."""
        lines = [self.system_prompt.rstrip(), ""]
        if self.history:
            lines.append("CONVERSATION HISTORY:")
            lines.extend(f"{m.role}: {m.content}" for m in self.history)
            lines.append("")
        lines.append(f"user: {self.user_message}")
        return "\n".join(lines)


def format_plugin_result(index: int, result: PluginResult) -> str:
    if result.error is not None:
        return f"Tool {index} ({result.plugin_name}) [error]: {result.error}"
    payload = result.result.model_dump() if result.result is not None else None
    return f"Tool {index} ({result.plugin_name}) [ok]: {json.dumps(payload, indent=2)}"


def build_system_prompt(
    chunks: list[RetrievedChunk],
    plugin_results: list[PluginResult],
) -> str:
    parts = [PREAMBLE]

    if chunks:
        parts.append("KNOWLEDGE BASE CONTEXT:")
        for i, chunk in enumerate(chunks, start=1):
            parts.append(f"Context {i} (from {chunk.source}):\n{chunk.content}\n")

    if plugin_results:
        parts.append("TOOL RESULTS:")
        for i, result in enumerate(plugin_results, start=1):
            parts.append(format_plugin_result(i, result))

    return "\n".join(parts)


def build_prompt(
    user_message: str,
    history: list[ChatMessage],
    chunks: list[RetrievedChunk],
    plugin_results: list[PluginResult],
) -> PromptContext:
    return PromptContext(
        system_prompt=build_system_prompt(chunks, plugin_results),
        history=list(history),
        user_message=user_message,
    )
