"""
modules/planning/trip_planner.py
---------------------------------
TripPlanner — the service the trip routes call.

    create_trip(body)           validate → EntityStore.create_trip_plan
    generate_itinerary(trip_id) lookups → ItineraryGenerator → ItineraryWriter
                                → re-read the joined itinerary

generate_itinerary() holds a per-trip lock for its whole run, so two
requests for the same trip never interleave their writes or have one
rollback delete the other's rows. Different trips run in parallel.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

from db.entity_store import EntityStore
from errors import NoActivitiesError, NotFoundError, ValidationError
from modules.observability.logger import trip_session
from modules.planning.itinerary_generator import ItineraryGenerator
from modules.planning.itinerary_writer import ItineraryWriter, raise_for_outcome
from modules.validation import validate_trip_request
from modules.validation.request_validator import MSG_INVALID_PARK
from schemas.itinerary import GeneratedItinerary
from schemas.trip import TripDayDetail, TripPlan

logger = logging.getLogger(__name__)


class TripPlanner:

    def __init__(
        self,
        store: EntityStore,
        generator: ItineraryGenerator,
        writer: ItineraryWriter,
    ) -> None:
        self._store = store
        self._generator = generator
        self._writer = writer
        self._trip_locks: dict[int, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # ── Trips ─────────────────────────────────────────────────────────────────

    def create_trip(self, body: dict[str, Any]) -> TripPlan:
        """
        body uses the request's camelCase keys:
            parkId, month, days        required
            preferences, name, userId  optional
        """
        validate_trip_request(body).raise_if_invalid()

        park_id = body["parkId"]
        if self._store.get_park_by_id(park_id) is None:
            raise ValidationError(MSG_INVALID_PARK)

        preferences = body.get("preferences")
        if preferences is not None:
            preferences = preferences.strip() or None

        trip = self._store.create_trip_plan({
            "park_id":     park_id,
            "month":       body["month"],
            "days":        body["days"],
            "name":        (body.get("name") or "").strip() or None,
            "preferences": preferences,
            "user_id":     body.get("userId"),
        })
        logger.info("Created trip %s (park=%s, %s, %d day(s))", trip.id, park_id, trip.month, trip.days)
        return trip

    def get_trip(self, trip_id: int) -> TripPlan:
        trip = self._store.get_trip_plan(trip_id)
        if trip is None:
            raise NotFoundError("Trip not found")
        return trip

    # ── Itinerary ─────────────────────────────────────────────────────────────

    def generate_itinerary(self, trip_id: int) -> tuple[list[TripDayDetail], GeneratedItinerary]:
        """
        Generate and persist the itinerary for an existing trip.

        Raises:
            NotFoundError           trip or park missing
            NoActivitiesError       park has an empty activity catalog
            RollbackSucceededError  write failed, nothing retained
            InconsistentStateError  write failed and rollback failed
        """
        trip = self.get_trip(trip_id)
        park = self._store.get_park_by_id(trip.park_id)
        if park is None:
            raise NotFoundError("Park not found")
        activities = self._store.get_park_activities(park.id)
        if not activities:
            raise NoActivitiesError(park.id)

        with self._lock_for(trip.id):
            itinerary = self._generator.generate(
                park,
                activities,
                trip.month,
                trip.days,
                trip.preferences,
                session_id=trip_session(trip.id),
            )
            result = self._writer.write(trip, itinerary)
            raise_for_outcome(result)
            days = self._store.get_trip_itinerary(trip.id)

        logger.info(
            "Trip %s itinerary committed: %d day(s), %d activity(ies), source=%s",
            trip.id, result.days_written, result.activities_written, itinerary.source,
        )
        return days, itinerary

    def get_days(self, trip_id: int) -> list[TripDayDetail]:
        return self._store.get_trip_itinerary(trip_id)

    def _lock_for(self, trip_id: int) -> threading.Lock:
        with self._locks_guard:
            lock = self._trip_locks.get(trip_id)
            if lock is None:
                lock = self._trip_locks[trip_id] = threading.Lock()
            return lock
