"""Dispatches a message to every plugin whose intent matches."""

from __future__ import annotations

import asyncio
import logging
import time

from context_agent.engine.models import PluginResult
from context_agent.tools.base import Plugin

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class PluginDispatcher:
    """Runs every plugin whose intent matches a message.

    Plugins are not mutually exclusive: one message may trigger several.
    Results always come back in registration order.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._plugins: dict[str, Plugin] = {}
        self._timeout = timeout

    # -- registration -------------------------------------------------------

    def register(self, plugin: Plugin) -> None:
        if plugin.name in self._plugins:
            raise ValueError(f"Plugin '{plugin.name}' is already registered")
        self._plugins[plugin.name] = plugin
        logger.info("Registered plugin %s", plugin.name)

    def get(self, name: str) -> Plugin | None:
        return self._plugins.get(name)

    @property
    def plugin_names(self) -> list[str]:
        return list(self._plugins)

    # -- dispatch -----------------------------------------------------------

    def detect(self, message: str) -> list[Plugin]:
        return [p for p in self._plugins.values() if p.matches(message)]

    async def dispatch(self, message: str) -> list[PluginResult]:
        matched = self.detect(message)
        if not matched:
            return []
        # gather() preserves argument order
        return list(await asyncio.gather(*(self._run_one(p, message) for p in matched)))

    async def _run_one(self, plugin: Plugin, message: str) -> PluginResult:
        t0 = time.time()
        try:
            result = await asyncio.wait_for(plugin.execute(message), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.warning("plugin=%s timed out after %.1fs", plugin.name, self._timeout)
            return PluginResult(
                plugin_name=plugin.name,
                error=f"{plugin.name} plugin timed out after {self._timeout:g}s",
            )
        logger.info(
            "plugin=%s latency=%.3fs %s",
            plugin.name, time.time() - t0, "OK" if result.ok else "ERROR",
        )
        return result
