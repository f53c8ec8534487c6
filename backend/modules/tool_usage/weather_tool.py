"""
modules/tool_usage/weather_tool.py
-------------------------------------
Live weather fetcher backed by the OpenWeatherMap Current Weather API.

Endpoint:
    GET https://api.openweathermap.org/data/2.5/weather
        ?lat={lat}&lon={lon}&appid={key}&units=imperial

No OAuth — plain API key in `appid` query param.

Failure modes (never raised, returned as WeatherResult.error):
    missing_key     OPENWEATHER_API_KEY not configured
    timeout         no answer within WEATHER_TIMEOUT_SECONDS
    invalid_coords  OWM answered 400 / 404 for the coordinates
    api_error       any other HTTP status, transport error or bad payload

OPENWEATHER_API_KEY=fake_key returns a fixed "partly cloudy" reading
without any network call (demo / offline use).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Union

import requests

import config

logger = logging.getLogger(__name__)

DEMO_API_KEY = "fake_key"
NOT_AVAILABLE = "N/A"


# ─────────────────────────────────────────────────────────────────────────────
# Result dataclasses
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class WeatherReading:
    """Current conditions, temperatures rounded to whole °F."""
    temp: int
    temp_min: int
    temp_max: int
    humidity: int            # percent
    description: str         # e.g. "partly cloudy"
    icon: str                # OWM icon code, e.g. "02d"
    is_stub: bool = False    # True when returned by the demo path
    raw: dict = field(default_factory=dict, repr=False)


@dataclass
class WeatherResult:
    success: bool
    reading: Optional[WeatherReading] = None
    error: Optional[str] = None      # missing_key | timeout | invalid_coords | api_error
    message: str = ""

    @classmethod
    def ok(cls, reading: WeatherReading) -> "WeatherResult":
        return cls(success=True, reading=reading)

    @classmethod
    def failed(cls, error: str, message: str) -> "WeatherResult":
        return cls(success=False, error=error, message=message)


# ─────────────────────────────────────────────────────────────────────────────
# WeatherTool
# ─────────────────────────────────────────────────────────────────────────────

class WeatherTool:
    """Fetches current weather for a coordinate pair."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[int] = None,
    ) -> None:
        self._api_key = config.OPENWEATHER_API_KEY if api_key is None else api_key
        self._base_url = base_url or config.OPENWEATHER_BASE_URL
        self._timeout = timeout_seconds or config.WEATHER_TIMEOUT_SECONDS

    def fetch(self, lat: Union[str, float], lon: Union[str, float]) -> WeatherResult:
        if not self._api_key:
            logger.info("OpenWeather API key not configured")
            return WeatherResult.failed("missing_key", "Weather API key not configured")

        if self._api_key == DEMO_API_KEY:
            logger.debug("Using demo weather data for (%s, %s)", lat, lon)
            return WeatherResult.ok(self._demo_reading())

        params = {"lat": lat, "lon": lon, "appid": self._api_key, "units": "imperial"}
        try:
            res = requests.get(self._base_url, params=params, timeout=self._timeout)
        except requests.Timeout:
            logger.warning("OpenWeather request for (%s, %s) timed out", lat, lon)
            return WeatherResult.failed("timeout", "Weather API request timed out")
        except requests.RequestException as exc:
            logger.error("Error fetching weather data: %s", exc)
            return WeatherResult.failed("api_error", "Failed to fetch weather data")

        if res.status_code in (400, 404):
            logger.error("OpenWeather API error: %s for (%s, %s)", res.status_code, lat, lon)
            return WeatherResult.failed("invalid_coords", f"Invalid coordinates: {lat}, {lon}")
        if not res.ok:
            logger.error("OpenWeather API error: %s", res.status_code)
            return WeatherResult.failed("api_error", f"Weather API returned {res.status_code}")

        try:
            return WeatherResult.ok(self._parse(res.json()))
        except (ValueError, KeyError, TypeError) as exc:
            logger.error("Unexpected OpenWeather payload: %s", exc)
            return WeatherResult.failed("api_error", "Failed to fetch weather data")

    # ── internals ─────────────────────────────────────────────────────────────

    @staticmethod
    def _parse(data: dict) -> WeatherReading:
        main = data["main"]
        conditions = data.get("weather") or [{}]
        return WeatherReading(
            temp=round(main["temp"]),
            temp_min=round(main["temp_min"]),
            temp_max=round(main["temp_max"]),
            humidity=int(main["humidity"]),
            description=conditions[0].get("description") or "Clear",
            icon=conditions[0].get("icon") or "01d",
            raw=data,
        )

    @staticmethod
    def _demo_reading() -> WeatherReading:
        return WeatherReading(
            temp=72,
            temp_min=58,
            temp_max=78,
            humidity=65,
            description="partly cloudy",
            icon="02d",
            is_stub=True,
        )


def format_for_display(result: Optional[WeatherResult]) -> dict:
    """
    Shape a WeatherResult like the catalog's monthly weather:
        {"high": "78°F", "low": "58°F", "precipitation": "65%"}

    Humidity stands in for precipitation likelihood. Failures keep the
    N/A placeholders and add error / errorMessage for the client.
    """
    if result is None:
        return {"high": NOT_AVAILABLE, "low": NOT_AVAILABLE, "precipitation": NOT_AVAILABLE}

    if not result.success or result.reading is None:
        return {
            "high":          NOT_AVAILABLE,
            "low":           NOT_AVAILABLE,
            "precipitation": NOT_AVAILABLE,
            "error":         result.error,
            "errorMessage":  result.message,
        }

    reading = result.reading
    return {
        "high":          f"{reading.temp_max}°F",
        "low":           f"{reading.temp_min}°F",
        "precipitation": f"{reading.humidity}%",
    }
