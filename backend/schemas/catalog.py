"""
schemas/catalog.py
------------------
Read-only catalog records: parks and the activities offered inside them.

Loaded once at startup (db/catalog_data.py) and never mutated afterwards,
hence frozen dataclasses.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Optional


class Difficulty(str, Enum):
    easy = "easy"
    moderate = "moderate"
    difficult = "difficult"


@dataclass(frozen=True)
class MonthlyWeather:
    """Typical weather for one month, display-ready strings (e.g. "71°F")."""
    high: str = "N/A"
    low: str = "N/A"
    precipitation: str = "N/A"

    def describe(self) -> str:
        return f"High: {self.high}, Low: {self.low}, Precipitation: {self.precipitation}"


@dataclass(frozen=True)
class Park:
    """
    A national park in the catalog.

    weather / monthly_notes are keyed by lower-case month name
    ("may"), best_months holds canonical names ("May").
    """
    id: int
    name: str
    state: str
    description: str
    image_url: str = ""
    latitude: str = ""
    longitude: str = ""
    rating: str = ""
    review_count: int = 0
    activities: tuple[str, ...] = ()
    weather: dict[str, MonthlyWeather] = field(default_factory=dict)
    highlights: tuple[str, ...] = ()
    best_months: tuple[str, ...] = ()
    monthly_notes: dict[str, str] = field(default_factory=dict)

    def weather_for(self, month: str) -> MonthlyWeather:
        return self.weather.get(month.lower(), MonthlyWeather())

    def notes_for(self, month: str) -> str:
        return self.monthly_notes.get(month.lower(), "No specific notes for this month.")

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ParkActivity:
    """A concrete thing to do in one park (trail, drive, tour...)."""
    id: int
    park_id: int
    name: str
    description: str
    category: str
    duration_minutes: int
    difficulty: Difficulty = Difficulty.moderate
    latitude: str = ""
    longitude: str = ""
    best_time_of_day: Optional[str] = None       # "morning" | "afternoon" | "evening" | "sunset" ...
    best_months: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        data = asdict(self)
        data["difficulty"] = self.difficulty.value
        return data
