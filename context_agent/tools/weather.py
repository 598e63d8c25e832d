"""weather plugin — live OpenWeatherMap lookup or a mock reading."""

from __future__ import annotations

import logging
import random
import re
from abc import ABC, abstractmethod

import httpx

from context_agent.engine.models import WeatherResult
from context_agent.errors import WeatherLookupError
from context_agent.tools.base import Plugin

logger = logging.getLogger(__name__)

DEFAULT_CITY = "Bangalore"
OPENWEATHERMAP_URL = "https://api.openweathermap.org/data/2.5/weather"

_CITY = re.compile(
    r"weather.*?\bin\s+([^\W\d_](?:[^\W\d_]|\s)*?)"
    r"(?=\s+(?:and|or|today|tomorrow|now)\b|\s+\d|\s*[?!.,;:]|\s*$)",
    re.IGNORECASE,
)


def extract_city(message: str, default: str = DEFAULT_CITY) -> str:
    match = _CITY.search(message)
    if match is None:
        return default
    return " ".join(match.group(1).split())


# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------

class WeatherProvider(ABC):
    @abstractmethod
    async def current(self, city: str) -> WeatherResult: ...


class OpenWeatherMapProvider(WeatherProvider):
    """Current conditions from OpenWeatherMap, metric units."""

    def __init__(
        self,
        api_key: str,
        base_url: str = OPENWEATHERMAP_URL,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    async def current(self, city: str) -> WeatherResult:
        params = {"q": city, "appid": self._api_key, "units": "metric"}
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.get(self._base_url, params=params)
                response.raise_for_status()
            except httpx.HTTPError as exc:
                # str(exc) may embed the request URL, which carries the api key
                logger.error("Weather request failed for %r (%s)", city, type(exc).__name__)
                raise WeatherLookupError(
                    f"weather provider request failed ({type(exc).__name__})"
                ) from exc

        try:
            data = response.json()
            return WeatherResult(
                city=data["name"],
                temperature=data["main"]["temp"],
                description=data["weather"][0]["description"],
                humidity=data["main"]["humidity"],
                wind_speed=data["wind"]["speed"],
                source="live",
            )
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise WeatherLookupError("Malformed weather provider response") from exc


class MockWeatherProvider(WeatherProvider):
    """Randomised stand-in used when no weather credential is configured.

    Results are tagged ``source="mock"`` so they are never mistaken for
    real observations.
    """

    DESCRIPTIONS = ("sunny", "cloudy", "rainy", "partly cloudy")

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    async def current(self, city: str) -> WeatherResult:
        return WeatherResult(
            city=city,
            temperature=round(self._rng.random() * 20 + 15),
            description=self._rng.choice(self.DESCRIPTIONS),
            humidity=round(self._rng.random() * 40 + 40),
            wind_speed=round(self._rng.random() * 10 + 5),
            source="mock",
        )


# ---------------------------------------------------------------------------
# Plugin
# ---------------------------------------------------------------------------

class WeatherPlugin(Plugin):
    _PATTERNS = (
        re.compile(r"weather.*in\s+\w+", re.IGNORECASE),
        re.compile(r"what.*weather", re.IGNORECASE),
    )

    def __init__(self, provider: WeatherProvider, default_city: str = DEFAULT_CITY) -> None:
        self._provider = provider
        self._default_city = default_city

    @property
    def name(self) -> str:
        return "weather"

    @property
    def intent_patterns(self) -> tuple[re.Pattern[str], ...]:
        return self._PATTERNS

    async def run(self, message: str) -> WeatherResult:
        city = extract_city(message, self._default_city)
        return await self._provider.current(city)

    def describe_error(self, exc: Exception) -> str:
        return f"Failed to get weather data: {exc}"
