"""
schemas/trip.py
---------------
Mutable entities owned by the EntityStore.

Ownership:
  TripPlan ──owns──▶ TripDay ──owns──▶ TripActivity ──refers──▶ ParkActivity

Field names follow the JSON the client reads (snake_case, `order`).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional

from schemas.catalog import ParkActivity


@dataclass
class TripPlan:
    id: int
    park_id: int
    month: str
    days: int
    name: str
    created_at: str                      # ISO-8601 timestamp
    preferences: Optional[str] = None
    user_id: Optional[int] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class TripDay:
    id: int
    trip_id: int
    day_number: int                      # 1-based, unique within the trip
    title: str
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class TripActivity:
    id: int
    trip_day_id: int
    activity_id: int                     # ParkActivity.id (non-owning)
    order: int                           # 1-based, unique within the day
    start_time: Optional[str] = None     # "HH:MM"
    end_time: Optional[str] = None       # "HH:MM"
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class TripActivityDetail:
    """A TripActivity joined with the catalog activity it points at."""
    activity: TripActivity
    park_activity: ParkActivity

    def to_dict(self) -> dict:
        pa = self.park_activity
        return {
            **self.activity.to_dict(),
            "name":             pa.name,
            "description":      pa.description,
            "category":         pa.category,
            "latitude":         pa.latitude,
            "longitude":        pa.longitude,
            "duration_minutes": pa.duration_minutes,
            "difficulty":       pa.difficulty.value,
        }


@dataclass
class TripDayDetail:
    """A TripDay with its joined activities, sorted by order."""
    day: TripDay
    activities: list[TripActivityDetail]

    def to_dict(self) -> dict:
        return {
            **self.day.to_dict(),
            "activities": [a.to_dict() for a in self.activities],
        }


@dataclass
class AiRecommendation:
    """
    A generated recommendation, cached under its fingerprint
    (park_id, month, user_preferences). Never updated once stored.
    """
    id: int
    park_id: int
    month: str
    user_preferences: str                # exact trimmed preference text
    recommendation: str
    created_at: str

    @property
    def fingerprint(self) -> tuple[int, str, str]:
        return (self.park_id, self.month, self.user_preferences)

    def to_dict(self) -> dict:
        return asdict(self)
