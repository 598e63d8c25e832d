"""Core data models — no internal dependencies, only Pydantic + stdlib."""

from __future__ import annotations

import time
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["user", "assistant"]


# ---------------------------------------------------------------------------
# Inbound request / outbound response (adapter <-> orchestrator)
# ---------------------------------------------------------------------------

class AgentRequest(BaseModel):
    """Adapter-agnostic incoming message."""
    message: str
    session_id: str


class AgentResponse(BaseModel):
    response: str
    session_id: str
    plugins_used: list[str] = Field(default_factory=list)
    retrieved_chunks: int = 0


# ---------------------------------------------------------------------------
# Session memory
# ---------------------------------------------------------------------------

class Turn(BaseModel):
    role: Role
    content: str
    timestamp: float = Field(default_factory=time.time)


class ChatMessage(BaseModel):
    """Read-only projection of a Turn (timestamp dropped)."""
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


class Session(BaseModel):
    session_id: str
    messages: list[Turn] = Field(default_factory=list)
    created_at: float = Field(default_factory=time.time)
    updated_at: float = Field(default_factory=time.time)


# ---------------------------------------------------------------------------
# Similarity index
# ---------------------------------------------------------------------------

class Chunk(BaseModel):
    """An embedded slice of a source document. Immutable once created."""
    model_config = ConfigDict(frozen=True)

    id: str
    content: str
    embedding: list[float]
    source: str
    chunk_index: int


class RetrievedChunk(BaseModel):
    id: str
    content: str
    source: str
    chunk_index: int
    score: float


class IndexStats(BaseModel):
    total_chunks: int
    sources: list[str]
    initialized: bool


# ---------------------------------------------------------------------------
# Plugin results: tagged union over the known payload shapes
# ---------------------------------------------------------------------------

class MathResult(BaseModel):
    kind: Literal["math"] = "math"
    expression: str
    answer: float | int


class WeatherResult(BaseModel):
    kind: Literal["weather"] = "weather"
    city: str
    temperature: float
    description: str
    humidity: float
    wind_speed: float
    source: Literal["live", "mock"]


class GenericResult(BaseModel):
    kind: Literal["generic"] = "generic"
    data: dict[str, Any] = Field(default_factory=dict)


PluginPayload = Annotated[
    Union[MathResult, WeatherResult, GenericResult],
    Field(discriminator="kind"),
]


class PluginResult(BaseModel):
    plugin_name: str
    result: PluginPayload | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
