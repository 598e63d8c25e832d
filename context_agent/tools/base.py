"""Plugin base class."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod

from context_agent.engine.models import PluginPayload, PluginResult

logger = logging.getLogger(__name__)


class Plugin(ABC):
    """A self-contained tool triggered when one of its intent patterns matches."""

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def intent_patterns(self) -> tuple[re.Pattern[str], ...]: ...

    @abstractmethod
    async def run(self, message: str) -> PluginPayload:
        """Do the work. May raise; :meth:`execute` turns errors into results."""

    def matches(self, message: str) -> bool:
        return any(p.search(message) for p in self.intent_patterns)

    async def execute(self, message: str) -> PluginResult:
        try:
            payload = await self.run(message)
        except Exception as exc:
            logger.warning("plugin=%s error=%s", self.name, exc)
            return PluginResult(plugin_name=self.name, error=self.describe_error(exc))
        return PluginResult(plugin_name=self.name, result=payload)

    def describe_error(self, exc: Exception) -> str:
        return f"{self.name} plugin failed: {exc}"
