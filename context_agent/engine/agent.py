"""Per-message orchestration: retrieve, recall, run plugins, complete."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from context_agent.engine.models import AgentRequest, AgentResponse, IndexStats, RetrievedChunk
from context_agent.engine.prompt import build_prompt
from context_agent.errors import AgentProcessingError, EmbeddingError

if TYPE_CHECKING:
    from context_agent.engine.llm import LLMClient
    from context_agent.engine.session import SessionMemory
    from context_agent.memory.interface import Retriever
    from context_agent.tools.registry import PluginDispatcher

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "I apologize, but I couldn't generate a response."


class AgentOrchestrator:
    """Public API: ``response = await agent.process_message(request)``

    Owns no state of its own; the retriever and session memory are passed in.
    """

    TOP_K: int = 3
    HISTORY_TURNS: int = 4

    def __init__(
        self,
        retriever: Retriever,
        session_memory: SessionMemory,
        dispatcher: PluginDispatcher,
        llm_client: LLMClient,
    ) -> None:
        self._retriever = retriever
        self._sessions = session_memory
        self._dispatcher = dispatcher
        self._llm = llm_client

    async def initialize(self) -> None:
        """Load the corpus eagerly (startup). Errors here are fatal."""
        await self._retriever.ensure_initialized()
        logger.info("Agent initialized")

    @property
    def retriever(self) -> Retriever:
        return self._retriever

    def stats(self) -> IndexStats:
        return self._retriever.stats()

    async def process_message(self, request: AgentRequest) -> AgentResponse:
        message, session_id = request.message, request.session_id
        t_start = time.time()

        try:
            # 1. Retrieve ------------------------------------------------
            chunks = await self._retrieve(message)

            # 2. Recent history ------------------------------------------
            history = await self._sessions.recent(session_id, self.HISTORY_TURNS)

            # 3. Plugins -------------------------------------------------
            plugin_results = await self._dispatcher.dispatch(message)

            # 4. Prompt --------------------------------------------------
            prompt = build_prompt(message, history, chunks, plugin_results)

            # 5. LLM -----------------------------------------------------
            t_llm = time.time()
            reply = await self._llm.complete(
                prompt.system_prompt, prompt.history, prompt.user_message,
            )
            logger.info("session=%s llm latency=%.3fs", session_id, time.time() - t_llm)
        except Exception as exc:
            logger.exception("Error processing message for session %s", session_id)
            raise AgentProcessingError("Failed to process message") from exc

        reply = reply or FALLBACK_REPLY

        # 6. Persist turn ------------------------------------------------
        await self._sessions.append_many(
            session_id, [("user", message), ("assistant", reply)],
        )

        logger.info(
            "session=%s chunks=%d plugins=%s total latency=%.3fs",
            session_id, len(chunks), [r.plugin_name for r in plugin_results],
            time.time() - t_start,
        )
        return AgentResponse(
            response=reply,
            session_id=session_id,
            plugins_used=[r.plugin_name for r in plugin_results],
            retrieved_chunks=len(chunks),
        )

    async def _retrieve(self, message: str) -> list[RetrievedChunk]:
        """Top-K chunks, or ``[]`` when the embedding provider fails mid-query."""
        try:
            return await self._retriever.query(message, k=self.TOP_K)
        except EmbeddingError as exc:
            logger.warning("Retrieval degraded to empty: %s", exc)
            return []
