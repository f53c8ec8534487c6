"""
modules/validation/request_validator.py
----------------------------------------
Data-quality guards applied before anything is written to the EntityStore
or sent to the generation capability.

  Trip request (POST /api/trips):
    ✓ parkId, month, days present
    ✓ parkId a positive integer
    ✓ month one of the twelve canonical names
    ✓ days an integer in [1, MAX_TRIP_DAYS]
    ✓ preferences a string of at most MAX_PREFERENCES_LENGTH characters
    ✓ name a string, userId a positive integer (both optional)

  Recommendation request (POST /api/recommendations):
    ✓ parkId, month, preferences present and non-empty
    ✓ parkId / month as above
    ✓ preferences non-blank after trimming and within the length limit

  Generated day / activity (before ItineraryWriter creates a row):
    ✓ day_number equals the expected next number
    ✓ title non-empty
    ✓ activity_id exists in the catalog and belongs to the trip's park
    ✓ order equals the expected next order
    ✓ start_time / end_time are "HH:MM" or absent

Usage:
    result = validate_trip_request(body)
    result.raise_if_invalid()          # -> errors.ValidationError(first error)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Optional

import config
from errors import ValidationError
from schemas.catalog import ParkActivity
from schemas.itinerary import ActivityAssignment, DayPlan

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

MSG_MISSING_FIELDS = "Missing required fields"
MSG_INVALID_PARK = "Invalid park ID"
MSG_INVALID_MONTH = "Invalid month"
MSG_EMPTY_PREFERENCES = "Preferences must not be empty"


def days_out_of_range_message() -> str:
    return f"Days must be between 1 and {config.MAX_TRIP_DAYS}"


def preferences_too_long_message() -> str:
    return f"Preferences must be {config.MAX_PREFERENCES_LENGTH} characters or fewer"


# ── Result dataclass ───────────────────────────────────────────────────────────

@dataclass
class ValidationResult:
    """
    Outcome of a single validation run.

    Attributes:
        valid:  True iff there are zero errors.
        errors: Human-readable list of failure reasons, most important first.
        record: The input record (for logging purposes).
    """
    valid: bool
    errors: list[str] = field(default_factory=list)
    record: Any = field(default=None, repr=False)

    def __bool__(self) -> bool:
        return self.valid

    def raise_if_invalid(self) -> None:
        if not self.valid:
            raise ValidationError(self.errors[0])


def _result(errors: list[str], record: Any) -> ValidationResult:
    return ValidationResult(valid=len(errors) == 0, errors=errors, record=record)


# ── Field checks ───────────────────────────────────────────────────────────────

def is_positive_int(value: Any) -> bool:
    # bool is an int subclass; JSON true must not pass as id 1
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def is_valid_month(value: Any) -> bool:
    return isinstance(value, str) and value in config.VALID_MONTHS


def is_valid_time(value: Optional[str]) -> bool:
    return value is None or (isinstance(value, str) and bool(_TIME_RE.match(value)))


def parse_id(raw: str, label: str) -> int:
    """Path-parameter id → int, or ValidationError("Invalid <label> ID")."""
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {label} ID") from None
    if value <= 0:
        raise ValidationError(f"Invalid {label} ID")
    return value


# ── Trip request ───────────────────────────────────────────────────────────────

def validate_trip_request(record: dict[str, Any]) -> ValidationResult:
    """Validate a POST /api/trips body (camelCase keys, already JSON-decoded)."""
    errors: list[str] = []

    if any(record.get(k) is None for k in ("parkId", "month", "days")):
        return _result([MSG_MISSING_FIELDS], record)

    if not is_positive_int(record["parkId"]):
        errors.append(MSG_INVALID_PARK)

    if not is_valid_month(record["month"]):
        errors.append(MSG_INVALID_MONTH)

    days = record["days"]
    if (
        not isinstance(days, int) or isinstance(days, bool)
        or not (1 <= days <= config.MAX_TRIP_DAYS)
    ):
        errors.append(days_out_of_range_message())

    prefs = record.get("preferences")
    if prefs is not None:
        if not isinstance(prefs, str):
            errors.append("Preferences must be text")
        elif len(prefs) > config.MAX_PREFERENCES_LENGTH:
            errors.append(preferences_too_long_message())

    name = record.get("name")
    if name is not None and not isinstance(name, str):
        errors.append("Name must be text")

    user_id = record.get("userId")
    if user_id is not None and not is_positive_int(user_id):
        errors.append("Invalid user ID")

    return _result(errors, record)


# ── Recommendation request ─────────────────────────────────────────────────────

def validate_recommendation_request(record: dict[str, Any]) -> ValidationResult:
    """Validate a POST /api/recommendations body."""
    if any(record.get(k) in (None, "") for k in ("parkId", "month", "preferences")):
        return _result([MSG_MISSING_FIELDS], record)

    errors: list[str] = []
    if not is_positive_int(record["parkId"]):
        errors.append(MSG_INVALID_PARK)

    if not is_valid_month(record["month"]):
        errors.append(MSG_INVALID_MONTH)

    prefs = record["preferences"]
    if not isinstance(prefs, str):
        errors.append("Preferences must be text")
    elif not prefs.strip():
        errors.append(MSG_EMPTY_PREFERENCES)
    elif len(prefs) > config.MAX_PREFERENCES_LENGTH:
        errors.append(preferences_too_long_message())

    return _result(errors, record)


# ── Generated itinerary rows ───────────────────────────────────────────────────

def validate_day_plan(day: DayPlan, expected_day_number: int) -> ValidationResult:
    errors: list[str] = []
    if day.day_number != expected_day_number:
        errors.append(
            f"day_number={day.day_number!r} out of sequence (expected {expected_day_number})"
        )
    if not isinstance(day.title, str) or not day.title.strip():
        errors.append(f"day {day.day_number!r}: title must not be empty")
    return _result(errors, day)


def validate_activity_assignment(
    assignment: ActivityAssignment,
    expected_order: int,
    park_id: int,
    park_activity: Optional[ParkActivity],
) -> ValidationResult:
    errors: list[str] = []

    if park_activity is None:
        errors.append(f"activity_id={assignment.activity_id!r} is not in the catalog")
    elif park_activity.park_id != park_id:
        errors.append(
            f"activity_id={assignment.activity_id} belongs to park "
            f"{park_activity.park_id}, not {park_id}"
        )

    if assignment.order != expected_order:
        errors.append(
            f"order={assignment.order!r} out of sequence (expected {expected_order})"
        )

    for label, value in (("start_time", assignment.start_time), ("end_time", assignment.end_time)):
        if not is_valid_time(value):
            errors.append(f"{label}={value!r} is not HH:MM")

    return _result(errors, assignment)
