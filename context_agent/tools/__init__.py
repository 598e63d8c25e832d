from context_agent.tools.base import Plugin
from context_agent.tools.math_plugin import MathPlugin
from context_agent.tools.registry import PluginDispatcher
from context_agent.tools.weather import (
    MockWeatherProvider,
    OpenWeatherMapProvider,
    WeatherPlugin,
    WeatherProvider,
)

__all__ = [
    "MathPlugin",
    "MockWeatherProvider",
    "OpenWeatherMapProvider",
    "Plugin",
    "PluginDispatcher",
    "WeatherPlugin",
    "WeatherProvider",
]
