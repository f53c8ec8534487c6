"""
db/entity_store.py
-------------------
In-memory relational store for trips, trip days and trip activities,
plus read access to the immutable park catalog.

One EntityStore is constructed at process start (api/server.py) and
passed explicitly to the planner, generator and writer. Nothing here is
durable: restarting the process drops every trip.

Id generation:
    one monotonically increasing counter per entity kind, starting at 1,
    never reused (also not after a rollback delete).

Integrity rules:
    write time:   parent rows must exist (trip for a day, day for an
                  activity); day_number unique per trip; order unique per day.
                  Both uniqueness checks are lookups in the per-parent
                  indexes (_days_by_trip, _activities_by_day).
    read time:    the ParkActivity behind a TripActivity must exist in the
                  catalog, else ReferentialIntegrityError (writer bug, fatal).

Concurrency:
    one re-entrant lock guards every mutable collection and index. Reads
    copy rows out under the lock, so a concurrent write never changes a
    collection while it is being iterated.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Optional

import config
from errors import PersistenceError, ReferentialIntegrityError
from schemas.catalog import Park, ParkActivity
from schemas.trip import (
    TripActivity,
    TripActivityDetail,
    TripDay,
    TripDayDetail,
    TripPlan,
)

logger = logging.getLogger(__name__)

_TRIP_DEFAULTS: dict[str, Any] = {
    "name":        config.DEFAULT_TRIP_NAME,
    "preferences": None,
    "user_id":     None,
}

_DAY_DEFAULTS: dict[str, Any] = {
    "description": None,
}

_ACTIVITY_DEFAULTS: dict[str, Any] = {
    "start_time": None,
    "end_time":   None,
    "notes":      None,
}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _require(row: dict[str, Any], keys: tuple[str, ...], kind: str) -> None:
    missing = [k for k in keys if row.get(k) is None]
    if missing:
        raise PersistenceError(f"{kind} is missing required field(s): {', '.join(missing)}")


class EntityStore:
    """
    Authoritative keeper of all mutable entities.

    Every access to the mutable collections holds self._lock; reads copy
    the rows they need under the lock and sort outside it.
    """

    def __init__(self, parks: list[Park], activities: list[ParkActivity]) -> None:
        # ── catalog (read-only after construction) ────────────────────────
        self._parks: dict[int, Park] = {p.id: p for p in parks}
        self._park_activities: dict[int, ParkActivity] = {a.id: a for a in activities}
        self._activities_by_park: dict[int, tuple[ParkActivity, ...]] = {}
        for a in sorted(activities, key=lambda a: a.id):
            self._activities_by_park[a.park_id] = self._activities_by_park.get(a.park_id, ()) + (a,)

        # ── mutable entities ──────────────────────────────────────────────
        self._trips: dict[int, TripPlan] = {}
        self._days: dict[int, TripDay] = {}
        self._trip_activities: dict[int, TripActivity] = {}
        # trip_id -> {day_number: day_id}, trip_day_id -> {order: trip_activity_id}
        self._days_by_trip: dict[int, dict[int, int]] = {}
        self._activities_by_day: dict[int, dict[int, int]] = {}
        self._next_ids: dict[str, int] = {"trip": 1, "day": 1, "activity": 1}
        self._lock = threading.RLock()

    @classmethod
    def with_default_catalog(cls) -> "EntityStore":
        from db.catalog_data import load_default_catalog

        parks, activities = load_default_catalog()
        return cls(parks, activities)

    def _allocate_id(self, kind: str) -> int:
        new_id = self._next_ids[kind]
        self._next_ids[kind] = new_id + 1
        return new_id

    # ── Catalog reads ─────────────────────────────────────────────────────────

    def get_all_parks(self) -> list[Park]:
        return sorted(self._parks.values(), key=lambda p: p.id)

    def get_park_by_id(self, park_id: int) -> Optional[Park]:
        return self._parks.get(park_id)

    def get_parks_by_month(self, month: str) -> list[Park]:
        return [p for p in self.get_all_parks() if month in p.best_months]

    def get_park_activities(self, park_id: int) -> list[ParkActivity]:
        """All catalog activities of a park, ascending by id."""
        return list(self._activities_by_park.get(park_id, ()))

    def get_park_activity_by_id(self, activity_id: int) -> Optional[ParkActivity]:
        return self._park_activities.get(activity_id)

    # ── TripPlan ──────────────────────────────────────────────────────────────

    def create_trip_plan(self, fields: dict[str, Any]) -> TripPlan:
        """
        Store a new trip plan. Returns it with id and created_at assigned.

        Required keys: park_id, month, days
        Optional keys: name (default "My Trip"), preferences, user_id
        """
        row = {**_TRIP_DEFAULTS, **fields}
        _require(row, ("park_id", "month", "days"), "TripPlan")
        with self._lock:
            trip = TripPlan(
                id=self._allocate_id("trip"),
                park_id=row["park_id"],
                month=row["month"],
                days=row["days"],
                name=row["name"] or _TRIP_DEFAULTS["name"],
                created_at=_now_iso(),
                preferences=row["preferences"],
                user_id=row["user_id"],
            )
            self._trips[trip.id] = trip
        return trip

    def get_trip_plan(self, trip_id: int) -> Optional[TripPlan]:
        with self._lock:
            return self._trips.get(trip_id)

    # ── TripDay ───────────────────────────────────────────────────────────────

    def create_trip_day(self, fields: dict[str, Any]) -> TripDay:
        """
        Store one day of a trip.

        Required keys: trip_id, day_number, title
        Optional keys: description
        """
        row = {**_DAY_DEFAULTS, **fields}
        _require(row, ("trip_id", "day_number", "title"), "TripDay")
        with self._lock:
            if row["trip_id"] not in self._trips:
                raise PersistenceError(f"TripDay references unknown trip {row['trip_id']}")
            trip_days = self._days_by_trip.setdefault(row["trip_id"], {})
            if row["day_number"] in trip_days:
                raise PersistenceError(
                    f"Trip {row['trip_id']} already has day {row['day_number']}"
                )
            day = TripDay(
                id=self._allocate_id("day"),
                trip_id=row["trip_id"],
                day_number=row["day_number"],
                title=row["title"],
                description=row["description"],
            )
            self._days[day.id] = day
            trip_days[day.day_number] = day.id
        return day

    def get_trip_days_by_trip_id(self, trip_id: int) -> list[TripDay]:
        """All days of a trip, ascending by day_number."""
        with self._lock:
            days = [self._days[d] for d in self._days_by_trip.get(trip_id, {}).values()]
        return sorted(days, key=lambda d: d.day_number)

    def delete_trip_days_by_trip_id(self, trip_id: int) -> int:
        """
        Remove every day of a trip together with the activities they own.

        Used for rollback and before regeneration. Deleting a trip that
        has no days is a no-op. Returns the number of days removed.
        """
        with self._lock:
            day_ids = list(self._days_by_trip.pop(trip_id, {}).values())
            for day_id in day_ids:
                for act_id in self._activities_by_day.pop(day_id, {}).values():
                    del self._trip_activities[act_id]
                del self._days[day_id]
        if day_ids:
            logger.debug("Deleted %d day(s) for trip %s", len(day_ids), trip_id)
        return len(day_ids)

    # ── TripActivity ──────────────────────────────────────────────────────────

    def create_trip_activity(self, fields: dict[str, Any]) -> TripActivity:
        """
        Store one scheduled activity of a day.

        Required keys: trip_day_id, activity_id, order
        Optional keys: start_time, end_time, notes

        activity_id is NOT checked against the catalog here; a dangling
        reference surfaces on the next get_trip_activities_by_day_id().
        """
        row = {**_ACTIVITY_DEFAULTS, **fields}
        _require(row, ("trip_day_id", "activity_id", "order"), "TripActivity")
        with self._lock:
            if row["trip_day_id"] not in self._days:
                raise PersistenceError(f"TripActivity references unknown day {row['trip_day_id']}")
            day_activities = self._activities_by_day.setdefault(row["trip_day_id"], {})
            if row["order"] in day_activities:
                raise PersistenceError(
                    f"Day {row['trip_day_id']} already has an activity at order {row['order']}"
                )
            activity = TripActivity(
                id=self._allocate_id("activity"),
                trip_day_id=row["trip_day_id"],
                activity_id=row["activity_id"],
                order=row["order"],
                start_time=row["start_time"],
                end_time=row["end_time"],
                notes=row["notes"],
            )
            self._trip_activities[activity.id] = activity
            day_activities[activity.order] = activity.id
        return activity

    def get_trip_activities_by_day_id(self, day_id: int) -> list[TripActivityDetail]:
        """
        Activities of a day ascending by order, each joined with its
        catalog ParkActivity.

        Raises ReferentialIntegrityError when a referenced ParkActivity
        does not exist.
        """
        with self._lock:
            rows = [self._trip_activities[a] for a in self._activities_by_day.get(day_id, {}).values()]
        rows.sort(key=lambda a: a.order)

        joined: list[TripActivityDetail] = []
        for row in rows:
            park_activity = self._park_activities.get(row.activity_id)
            if park_activity is None:
                logger.error(
                    "Dangling catalog reference: trip activity %s -> park activity %s",
                    row.id, row.activity_id,
                )
                raise ReferentialIntegrityError(row.id, row.activity_id)
            joined.append(TripActivityDetail(activity=row, park_activity=park_activity))
        return joined

    # ── Joined read ───────────────────────────────────────────────────────────

    def get_trip_itinerary(self, trip_id: int) -> list[TripDayDetail]:
        """
        Days of a trip (by day_number) with their joined activities (by order).

        Taken under one lock hold, so the result is a consistent snapshot.
        """
        with self._lock:
            return [
                TripDayDetail(day=day, activities=self.get_trip_activities_by_day_id(day.id))
                for day in self.get_trip_days_by_trip_id(trip_id)
            ]
