"""Exception hierarchy shared by every layer of the agent."""

from __future__ import annotations


class ContextAgentError(Exception):
    """Base class for all agent errors."""


class ConfigurationError(ContextAgentError):
    """Fatal startup problem: missing credential, bad path, etc."""


class CorpusNotFoundError(ConfigurationError):
    """The document corpus directory does not exist."""


class EmbeddingError(ContextAgentError):
    """Raised when the embedding provider fails or returns garbage."""


class MathEvaluationError(ContextAgentError):
    """Malformed arithmetic expression or division by zero."""


class AgentProcessingError(ContextAgentError):
    """Generic, caller-safe failure of a single request."""


class WeatherLookupError(ContextAgentError):
    """The live weather provider failed or returned an unexpected payload."""
