"""
schemas/itinerary.py
--------------------
Dataclass definitions for a generated (not yet persisted) itinerary.

Produced by ItineraryGenerator, consumed by ItineraryWriter.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

SOURCE_LLM = "llm"
SOURCE_FALLBACK = "fallback"


@dataclass
class ActivityAssignment:
    """
    One scheduled catalog activity inside a day.

    activity_id must reference a ParkActivity of the trip's park.
    """
    activity_id: int
    order: int                           # 1-based position within the day
    start_time: Optional[str] = None     # "HH:MM"
    end_time: Optional[str] = None       # "HH:MM"
    notes: Optional[str] = None
    name: str = ""                       # echo of the catalog name, informational only

    def to_dict(self) -> dict:
        return {
            "activity_id": self.activity_id,
            "name":        self.name,
            "start_time":  self.start_time,
            "end_time":    self.end_time,
            "notes":       self.notes,
            "order":       self.order,
        }


@dataclass
class DayPlan:
    """One day's scheduled activities."""
    day_number: int
    title: str
    description: Optional[str] = None
    activities: list[ActivityAssignment] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "day_number":  self.day_number,
            "title":       self.title,
            "description": self.description,
            "activities":  [a.to_dict() for a in self.activities],
        }


@dataclass
class GeneratedItinerary:
    """
    Top-level output of the ItineraryGenerator.

    source is "llm" when the generation capability produced a valid plan,
    "fallback" when the deterministic algorithm was used instead;
    fallback_reason carries the swallowed failure for logging.
    """
    days: list[DayPlan] = field(default_factory=list)
    source: str = SOURCE_LLM
    fallback_reason: str = ""

    @property
    def used_fallback(self) -> bool:
        return self.source == SOURCE_FALLBACK

    @property
    def activity_count(self) -> int:
        return sum(len(d.activities) for d in self.days)

    def to_dict(self) -> dict:
        return {"itinerary": [d.to_dict() for d in self.days]}
