from context_agent.engine.models import (
    AgentRequest,
    AgentResponse,
    ChatMessage,
    Chunk,
    PluginResult,
    RetrievedChunk,
    Session,
    Turn,
)
from context_agent.engine.session import InMemorySessionMemory, SessionMemory
from context_agent.engine.llm import DemoMockLLMClient, LLMClient, MockLLMClient, OpenAILLMClient
from context_agent.engine.agent import AgentOrchestrator

__all__ = [
    "AgentOrchestrator",
    "AgentRequest",
    "AgentResponse",
    "ChatMessage",
    "Chunk",
    "DemoMockLLMClient",
    "InMemorySessionMemory",
    "LLMClient",
    "MockLLMClient",
    "OpenAILLMClient",
    "PluginResult",
    "RetrievedChunk",
    "Session",
    "SessionMemory",
    "Turn",
]
