"""context_agent — retrieval-augmented chat agent with session memory and plugins.

Usage::

    from context_agent import create_agent
    from context_agent.engine.models import AgentRequest

    agent = create_agent()
    reply = await agent.process_message(AgentRequest(message="hi", session_id="s1"))
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()  # reads .env into os.environ (no-op if file missing)

from context_agent.engine.agent import AgentOrchestrator
from context_agent.engine.llm import DemoMockLLMClient, LLMClient, OpenAILLMClient
from context_agent.engine.models import AgentRequest, AgentResponse, PluginResult
from context_agent.engine.session import InMemorySessionMemory
from context_agent.errors import ConfigurationError
from context_agent.memory.embeddings import (
    EmbeddingProvider,
    HashingEmbeddingProvider,
    OpenAIEmbeddingProvider,
)
from context_agent.memory.ingest import DocumentIngestor
from context_agent.memory.vector_index import SimilarityIndex
from context_agent.tools.math_plugin import MathPlugin
from context_agent.tools.registry import PluginDispatcher
from context_agent.tools.weather import (
    MockWeatherProvider,
    OpenWeatherMapProvider,
    WeatherPlugin,
    WeatherProvider,
)

__all__ = [
    "AgentOrchestrator",
    "AgentRequest",
    "AgentResponse",
    "PluginResult",
    "create_agent",
    "create_dispatcher",
]


def create_dispatcher(weather_provider: WeatherProvider) -> PluginDispatcher:
    """Default plugin set, in detection order: weather, then math."""
    dispatcher = PluginDispatcher()
    dispatcher.register(WeatherPlugin(weather_provider))
    dispatcher.register(MathPlugin())
    return dispatcher


def create_agent(
    *,
    openai_api_key: str | None = None,
    openai_base_url: str | None = None,
    openai_model: str | None = None,
    embedding_model: str | None = None,
    documents_dir: str | Path | None = None,
    weather_api_key: str | None = None,
    use_mock_llm: bool | None = None,
    embed_delay: float | None = None,
) -> AgentOrchestrator:
    """Wire all components and return a ready-to-use AgentOrchestrator.

    Environment variables (keyword arguments take precedence):
      OPENAI_API_KEY          — required unless USE_MOCK_LLM=1
      OPENAI_BASE_URL         — optional OpenAI-compatible endpoint
      OPENAI_MODEL            — default ``gpt-4o-mini``
      OPENAI_EMBEDDING_MODEL  — default ``text-embedding-3-small``
      DOCUMENTS_DIR           — corpus directory, default ``./documents``
      WEATHER_API_KEY         — OpenWeatherMap key; mock readings if unset
      USE_MOCK_LLM            — ``1`` for offline demo LLM + hashing embeddings
      EMBED_DELAY             — seconds between corpus embeddings, default 0.1 (0 in mock mode)
    """
    api_key = openai_api_key or os.environ.get("OPENAI_API_KEY")
    base_url = openai_base_url or os.environ.get("OPENAI_BASE_URL") or None
    model = openai_model or os.environ.get("OPENAI_MODEL", "gpt-4o-mini")
    emb_model = embedding_model or os.environ.get("OPENAI_EMBEDDING_MODEL", "text-embedding-3-small")
    docs = documents_dir or os.environ.get("DOCUMENTS_DIR", "./documents")
    weather_key = weather_api_key or os.environ.get("WEATHER_API_KEY")
    mock = use_mock_llm if use_mock_llm is not None else os.environ.get("USE_MOCK_LLM") == "1"
    if embed_delay is None:
        embed_delay = float(os.environ.get("EMBED_DELAY", "0" if mock else "0.1"))

    # -- providers --
    llm_client: LLMClient
    embedder: EmbeddingProvider
    if mock:
        llm_client = DemoMockLLMClient()
        embedder = HashingEmbeddingProvider()
    elif not api_key:
        raise ConfigurationError("OPENAI_API_KEY is not set (or set USE_MOCK_LLM=1)")
    else:
        llm_client = OpenAILLMClient(api_key=api_key, model=model, base_url=base_url)
        embedder = OpenAIEmbeddingProvider(api_key=api_key, model=emb_model, base_url=base_url)

    weather_provider: WeatherProvider
    if weather_key:
        weather_provider = OpenWeatherMapProvider(api_key=weather_key)
    else:
        weather_provider = MockWeatherProvider()

    # -- components --
    index = SimilarityIndex(embedder, DocumentIngestor(docs), embed_delay=embed_delay)
    session_memory = InMemorySessionMemory()

    return AgentOrchestrator(
        retriever=index,
        session_memory=session_memory,
        dispatcher=create_dispatcher(weather_provider),
        llm_client=llm_client,
    )
