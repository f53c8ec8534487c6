"""
modules/planning/itinerary_generator.py
----------------------------------------
Turns a park's activity catalog, a month, a day count and free-text
preferences into a day-by-day plan (GeneratedItinerary).

Primary path:
    prompt (park facts, weather for the month, full catalog, preferences)
      → generation capability in JSON mode
      → structural validation (parse_itinerary_response)

Fallback path (any exception on the primary path):
    fallback_itinerary() — deterministic, pure function of catalog + day count.
    The failure is logged and recorded on the result (source="fallback",
    fallback_reason) but never raised to the caller.

Output guarantees (both paths):
    day_number values are exactly 1..day_count
    each day's orders are exactly 1..k, k >= 1
    every activity_id is an id of the supplied catalog
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

import config
from errors import GenerationError
from llm import GenerationCapability
from modules.observability.logger import StructuredLogger, get_event_logger
from modules.validation import is_valid_time
from schemas.catalog import Park, ParkActivity
from schemas.itinerary import (
    SOURCE_FALLBACK,
    SOURCE_LLM,
    ActivityAssignment,
    DayPlan,
    GeneratedItinerary,
)

logger = logging.getLogger(__name__)

FALLBACK_DAY_TITLE = "Day {day}: Exploring the Park"
FALLBACK_DAY_DESCRIPTION = "A relaxed day visiting a selection of the park's highlights."
FALLBACK_NOTE = "Enjoy this activity at your own pace."
FALLBACK_FIRST_START_HOUR = 9
FALLBACK_SLOT_HOURS = 2

_SYSTEM_INSTRUCTION = (
    "You are an expert national parks guide who builds realistic, well-paced "
    "day-by-day itineraries. You only schedule activities from the catalog you "
    "are given and you always answer with valid JSON."
)


# ─────────────────────────────────────────────────────────────────────────────
# Deterministic fallback
# ─────────────────────────────────────────────────────────────────────────────

def _clock(total_minutes: int) -> str:
    """Minutes since midnight → "HH:MM", clamped to the same day."""
    total_minutes = min(total_minutes, 23 * 60 + 59)
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def activities_per_day(activity_count: int, day_count: int, cap: Optional[int] = None) -> int:
    cap = config.FALLBACK_MAX_ACTIVITIES_PER_DAY if cap is None else cap
    return min(cap, math.ceil(activity_count / day_count))


def fallback_itinerary(activities: list[ParkActivity], day_count: int) -> list[DayPlan]:
    """
    Spread the catalog over the days without any model call.

      1. stable-sort activities by category name
      2. per_day = min(4, ceil(len(activities) / day_count))
      3. day d takes per_day consecutive activities starting at (d-1)*per_day,
         wrapping around the sorted list (small catalogs repeat across days)
      4. slot i starts at 09:00 + 2h*i and ends after the activity's duration

    Same input, same output.
    """
    if not activities:
        raise ValueError("fallback_itinerary needs at least one activity")
    if day_count < 1:
        raise ValueError(f"day_count={day_count} must be >= 1")

    ordered = sorted(activities, key=lambda a: a.category)
    per_day = activities_per_day(len(ordered), day_count)

    days: list[DayPlan] = []
    for day in range(1, day_count + 1):
        start_index = (day - 1) * per_day
        assignments: list[ActivityAssignment] = []
        for slot in range(per_day):
            activity = ordered[(start_index + slot) % len(ordered)]
            start = (FALLBACK_FIRST_START_HOUR + FALLBACK_SLOT_HOURS * slot) * 60
            assignments.append(ActivityAssignment(
                activity_id=activity.id,
                order=slot + 1,
                start_time=_clock(start),
                end_time=_clock(start + activity.duration_minutes),
                notes=FALLBACK_NOTE,
                name=activity.name,
            ))
        days.append(DayPlan(
            day_number=day,
            title=FALLBACK_DAY_TITLE.format(day=day),
            description=FALLBACK_DAY_DESCRIPTION,
            activities=assignments,
        ))
    return days


# ─────────────────────────────────────────────────────────────────────────────
# Prompt
# ─────────────────────────────────────────────────────────────────────────────

def _catalog_line(a: ParkActivity) -> str:
    hints = [a.category, f"{a.duration_minutes} min", a.difficulty.value]
    if a.best_time_of_day:
        hints.append(f"best: {a.best_time_of_day}")
    if a.best_months:
        hints.append(f"months: {', '.join(a.best_months)}")
    return f"- id {a.id}: {a.name} ({'; '.join(hints)}) — {a.description}"


def build_itinerary_prompt(
    park: Park,
    activities: list[ParkActivity],
    month: str,
    day_count: int,
    preferences: Optional[str],
) -> str:
    catalog = "\n".join(_catalog_line(a) for a in activities)
    return f"""
Create a {day_count}-day itinerary for a visit to {park.name} ({park.state}) in {month}.

PARK:
- Description: {park.description}
- Best months to visit: {", ".join(park.best_months) or "All year"}
- Highlights: {", ".join(park.highlights) or "Various highlights"}
- Weather in {month}: {park.weather_for(month).describe()}
- Notes for {month}: {park.notes_for(month)}

VISITOR PREFERENCES:
{preferences or "None given"}

ACTIVITY CATALOG (use ONLY these ids, do not invent activities):
{catalog}

RULES:
- Exactly {day_count} days, day_number 1 to {day_count}.
- 2 to 4 activities per day; order starts at 1 in each day with no gaps.
- start_time / end_time in 24h "HH:MM"; respect each activity's duration.
- Prefer activities whose best months include {month} and match the preferences.
- Avoid repeating an activity unless the catalog is too small.

OUTPUT:
Return ONLY valid JSON. No explanations. No markdown.

{{
  "itinerary": [
    {{
      "day_number": 1,
      "title": "",
      "description": "",
      "activities": [
        {{
          "activity_id": 0,
          "name": "",
          "start_time": "09:00",
          "end_time": "11:00",
          "notes": "",
          "order": 1
        }}
      ]
    }}
  ]
}}
"""


# ─────────────────────────────────────────────────────────────────────────────
# Response validation
# ─────────────────────────────────────────────────────────────────────────────

def _as_int(value: Any, label: str) -> int:
    if isinstance(value, bool):
        raise GenerationError(f"{label} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise GenerationError(f"{label} must be an integer, got {value!r}")


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise GenerationError(f"expected text, got {value!r}")
    return value.strip() or None


def _parse_activity(raw: Any, catalog: dict[int, ParkActivity], day_number: int) -> ActivityAssignment:
    if not isinstance(raw, dict):
        raise GenerationError(f"day {day_number}: activity entry is not an object")

    activity_id = _as_int(raw.get("activity_id"), f"day {day_number} activity_id")
    if activity_id not in catalog:
        raise GenerationError(f"day {day_number}: activity_id {activity_id} is not in the catalog")

    start_time = raw.get("start_time")
    end_time = raw.get("end_time")
    for label, value in (("start_time", start_time), ("end_time", end_time)):
        if not isinstance(value, str) or not is_valid_time(value):
            raise GenerationError(f"day {day_number}: {label}={value!r} is not HH:MM")

    return ActivityAssignment(
        activity_id=activity_id,
        order=_as_int(raw.get("order"), f"day {day_number} order"),
        start_time=start_time,
        end_time=end_time,
        notes=_optional_text(raw.get("notes")),
        name=catalog[activity_id].name,
    )


def parse_itinerary_response(
    raw: Any,
    activities: list[ParkActivity],
    day_count: int,
) -> list[DayPlan]:
    """
    Structurally validate a model response and convert it to DayPlans.

    Raises GenerationError on anything that does not satisfy the output
    guarantees listed in the module docstring.
    """
    if not isinstance(raw, dict) or not isinstance(raw.get("itinerary"), list):
        raise GenerationError("response has no 'itinerary' list")

    catalog = {a.id: a for a in activities}
    days: list[DayPlan] = []

    for raw_day in raw["itinerary"]:
        if not isinstance(raw_day, dict):
            raise GenerationError("itinerary entry is not an object")
        day_number = _as_int(raw_day.get("day_number"), "day_number")
        title = raw_day.get("title")
        if not isinstance(title, str) or not title.strip():
            raise GenerationError(f"day {day_number}: missing title")
        raw_activities = raw_day.get("activities")
        if not isinstance(raw_activities, list) or not raw_activities:
            raise GenerationError(f"day {day_number}: missing activities")

        assignments = sorted(
            (_parse_activity(a, catalog, day_number) for a in raw_activities),
            key=lambda a: a.order,
        )
        orders = [a.order for a in assignments]
        if orders != list(range(1, len(assignments) + 1)):
            raise GenerationError(f"day {day_number}: orders {orders} are not 1..{len(assignments)}")

        days.append(DayPlan(
            day_number=day_number,
            title=title.strip(),
            description=_optional_text(raw_day.get("description")),
            activities=assignments,
        ))

    days.sort(key=lambda d: d.day_number)
    numbers = [d.day_number for d in days]
    if numbers != list(range(1, day_count + 1)):
        raise GenerationError(f"day numbers {numbers} are not 1..{day_count}")
    return days


# ─────────────────────────────────────────────────────────────────────────────
# Generator
# ─────────────────────────────────────────────────────────────────────────────

class ItineraryGenerator:
    """
    Usage:
        generator = ItineraryGenerator(get_llm_client())
        itinerary = generator.generate(park, activities, "May", 3, "waterfalls")
        itinerary.used_fallback   # True when the deterministic plan was used
    """

    def __init__(
        self,
        llm: GenerationCapability,
        event_logger: StructuredLogger | None = None,
    ) -> None:
        self._llm = llm
        self._event_logger = event_logger

    def generate(
        self,
        park: Park,
        activities: list[ParkActivity],
        month: str,
        day_count: int,
        preferences: Optional[str] = None,
        session_id: str = "default",
    ) -> GeneratedItinerary:
        """
        activities must be the park's full, non-empty catalog; callers check
        emptiness first and raise NoActivitiesError themselves.
        """
        if not activities:
            raise ValueError(f"park {park.id} has no activities to plan with")

        try:
            prompt = build_itinerary_prompt(park, activities, month, day_count, preferences)
            raw = self._llm.generate(prompt, expect_json=True, system_instruction=_SYSTEM_INSTRUCTION)
            itinerary = GeneratedItinerary(
                days=parse_itinerary_response(raw, activities, day_count),
                source=SOURCE_LLM,
            )
        except Exception as exc:
            logger.warning(
                "Itinerary generation for park %s failed (%s); using fallback", park.id, exc,
            )
            itinerary = GeneratedItinerary(
                days=fallback_itinerary(activities, day_count),
                source=SOURCE_FALLBACK,
                fallback_reason=str(exc) or exc.__class__.__name__,
            )

        (self._event_logger or get_event_logger()).log(session_id, "ITINERARY_GENERATED", {
            "park_id":         park.id,
            "month":           month,
            "day_count":       day_count,
            "source":          itinerary.source,
            "fallback_reason": itinerary.fallback_reason,
            "activity_count":  itinerary.activity_count,
        })
        return itinerary
