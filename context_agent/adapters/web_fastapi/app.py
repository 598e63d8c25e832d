"""FastAPI adapter — thin translation layer, no business logic."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from context_agent import create_agent
from context_agent.engine.agent import AgentOrchestrator
from context_agent.engine.models import AgentRequest
from context_agent.errors import AgentProcessingError

logger = logging.getLogger(__name__)

MISSING_FIELDS = {"error": "Missing required fields: message and session_id"}


def _parse_request(body: Any) -> AgentRequest | None:
    if not isinstance(body, dict):
        return None
    message = body.get("message")
    session_id = body.get("session_id")
    if not isinstance(message, str) or not isinstance(session_id, str):
        return None
    if not message.strip() or not session_id.strip():
        return None
    return AgentRequest(message=message, session_id=session_id)


def create_app(agent: AgentOrchestrator | None = None) -> FastAPI:
    agent = agent if agent is not None else create_agent()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # corpus problems abort startup
        await agent.initialize()
        yield

    app = FastAPI(title="Context Agent API", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.post("/agent/message")
    async def agent_message(request: Request) -> JSONResponse:
        try:
            body = await request.json()
        except ValueError:
            # malformed JSON or a body that is not valid UTF-8
            return JSONResponse(MISSING_FIELDS, status_code=400)

        agent_request = _parse_request(body)
        if agent_request is None:
            return JSONResponse(MISSING_FIELDS, status_code=400)

        try:
            response = await agent.process_message(agent_request)
        except AgentProcessingError as exc:
            logger.error("Agent endpoint error: %s", exc)
            return JSONResponse(
                {"error": "Internal server error", "message": str(exc)},
                status_code=500,
            )
        return JSONResponse(response.model_dump())

    @app.get("/agent/stats")
    async def agent_stats() -> JSONResponse:
        return JSONResponse(agent.stats().model_dump())

    @app.get("/health")
    async def health() -> JSONResponse:
        return JSONResponse({
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    return app


def serve() -> None:
    """Entry-point for ``context-agent-web`` console script."""
    import uvicorn

    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
    uvicorn.run(
        "context_agent.adapters.web_fastapi.app:create_app",
        factory=True,
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8000")),
        log_level="info",
    )
