"""
modules/planning/itinerary_writer.py
-------------------------------------
ItineraryWriter — persists a GeneratedItinerary for one trip as a single
logical unit on top of the (non-transactional) EntityStore.

State machine per write:

    Empty ──▶ Writing ──▶ Committed
                    │
                    └──(first failure)──▶ rollback ──▶ RolledBack
                                                 └──(rollback raises)──▶ Inconsistent

Writing:
    any days already stored for the trip are cleared (regeneration replaces),
    then for each day in day_number order: validate + create TripDay, then
    for each activity in order: validate + create TripActivity.
    The first failure stops the loop; nothing after it is written.

write() reports the outcome as a WriteResult and never raises for write
failures; raise_for_outcome() maps a non-committed result to the
caller-facing error (RollbackSucceededError / InconsistentStateError).

No isolation: a concurrent reader may see a partially written trip while
the write is in progress. Callers serialise writers per trip.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from db.entity_store import EntityStore
from errors import InconsistentStateError, PersistenceError, RollbackSucceededError
from modules.observability.logger import StructuredLogger, get_event_logger, trip_session
from modules.validation import validate_activity_assignment, validate_day_plan
from schemas.itinerary import GeneratedItinerary
from schemas.trip import TripPlan

logger = logging.getLogger(__name__)


class WriteOutcome(Enum):
    EMPTY        = "Empty"
    WRITING      = "Writing"
    COMMITTED    = "Committed"
    ROLLED_BACK  = "RolledBack"
    INCONSISTENT = "Inconsistent"


@dataclass
class WriteResult:
    """Outcome of one ItineraryWriter.write() call."""
    trip_id: int
    outcome: WriteOutcome
    days_written: int = 0
    activities_written: int = 0
    error: str = ""             # first write failure
    rollback_error: str = ""    # only set when outcome is INCONSISTENT

    @property
    def committed(self) -> bool:
        return self.outcome is WriteOutcome.COMMITTED

    def to_dict(self) -> dict:
        return {
            "trip_id":            self.trip_id,
            "outcome":            self.outcome.value,
            "days_written":       self.days_written,
            "activities_written": self.activities_written,
            "error":              self.error,
            "rollback_error":     self.rollback_error,
        }


def raise_for_outcome(result: WriteResult) -> None:
    """Raise the caller-facing error for a write that did not commit."""
    if result.outcome is WriteOutcome.ROLLED_BACK:
        raise RollbackSucceededError(result.trip_id, result.error)
    if result.outcome is WriteOutcome.INCONSISTENT:
        raise InconsistentStateError(result.trip_id, result.error, result.rollback_error)


class ItineraryWriter:
    """Writes TripDays + TripActivities for one trip, rolling back on failure."""

    def __init__(
        self,
        store: EntityStore,
        event_logger: StructuredLogger | None = None,
    ) -> None:
        self._store = store
        self._event_logger = event_logger

    # ── Public API ────────────────────────────────────────────────────────────

    def write(self, trip: TripPlan, itinerary: GeneratedItinerary) -> WriteResult:
        result = WriteResult(trip_id=trip.id, outcome=WriteOutcome.EMPTY)

        result.outcome = WriteOutcome.WRITING
        try:
            self._write_all(trip, itinerary, result)
        except Exception as exc:
            result.error = str(exc) or exc.__class__.__name__
            logger.warning(
                "Writing itinerary for trip %s failed after %d day(s) / %d activity(ies): %s",
                trip.id, result.days_written, result.activities_written, result.error,
            )
            self._rollback(trip.id, result)
        else:
            result.outcome = WriteOutcome.COMMITTED

        self._log(result)
        return result

    # ── Writing ───────────────────────────────────────────────────────────────

    def _write_all(self, trip: TripPlan, itinerary: GeneratedItinerary, result: WriteResult) -> None:
        if len(itinerary.days) != trip.days:
            raise PersistenceError(
                f"plan has {len(itinerary.days)} day(s), trip {trip.id} expects {trip.days}"
            )

        self._store.delete_trip_days_by_trip_id(trip.id)

        for expected_day, day in enumerate(itinerary.days, start=1):
            check = validate_day_plan(day, expected_day)
            if not check:
                raise PersistenceError("; ".join(check.errors))

            stored_day = self._store.create_trip_day({
                "trip_id":     trip.id,
                "day_number":  day.day_number,
                "title":       day.title,
                "description": day.description,
            })
            result.days_written += 1

            for expected_order, assignment in enumerate(day.activities, start=1):
                check = validate_activity_assignment(
                    assignment,
                    expected_order,
                    trip.park_id,
                    self._store.get_park_activity_by_id(assignment.activity_id),
                )
                if not check:
                    raise PersistenceError(f"day {day.day_number}: " + "; ".join(check.errors))

                self._store.create_trip_activity({
                    "trip_day_id": stored_day.id,
                    "activity_id": assignment.activity_id,
                    "order":       assignment.order,
                    "start_time":  assignment.start_time,
                    "end_time":    assignment.end_time,
                    "notes":       assignment.notes,
                })
                result.activities_written += 1

    # ── Rollback ──────────────────────────────────────────────────────────────

    def _rollback(self, trip_id: int, result: WriteResult) -> None:
        try:
            removed = self._store.delete_trip_days_by_trip_id(trip_id)
        except Exception as exc:
            result.outcome = WriteOutcome.INCONSISTENT
            result.rollback_error = str(exc) or exc.__class__.__name__
            logger.critical(
                "Rollback for trip %s failed (%s); store may hold orphaned records",
                trip_id, result.rollback_error,
            )
            return
        result.outcome = WriteOutcome.ROLLED_BACK
        logger.info("Rolled back trip %s (%d day(s) removed)", trip_id, removed)

    def _log(self, result: WriteResult) -> None:
        (self._event_logger or get_event_logger()).log(
            trip_session(result.trip_id), "ITINERARY_WRITE", result.to_dict(),
        )
