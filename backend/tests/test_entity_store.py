"""
EntityStore: catalog reads, id generation, ordering, joins and the
integrity rules enforced at write and read time.
"""

import sys
import threading

import pytest

from errors import PersistenceError, ReferentialIntegrityError


def _day(store, trip_id, day_number, title="A day"):
    return store.create_trip_day({"trip_id": trip_id, "day_number": day_number, "title": title})


def _activity(store, day_id, activity_id, order, **extra):
    return store.create_trip_activity({
        "trip_day_id": day_id, "activity_id": activity_id, "order": order, **extra,
    })


# ── Catalog ────────────────────────────────────────────────────────────────────

def test_catalog_has_seed_parks(store):
    parks = store.get_all_parks()
    assert [p.id for p in parks] == [1, 2, 3, 4, 5]
    assert parks[0].name == "Yosemite National Park"


def test_parks_by_month_filters_on_best_months(store):
    may = store.get_parks_by_month("May")
    assert may
    assert all("May" in p.best_months for p in may)


def test_park_activities_sorted_by_id_and_scoped_to_park(store):
    activities = store.get_park_activities(1)
    assert [a.id for a in activities] == sorted(a.id for a in activities)
    assert {a.park_id for a in activities} == {1}
    assert len(activities) == 7


def test_unknown_catalog_lookups_return_none(store):
    assert store.get_park_by_id(999) is None
    assert store.get_park_activity_by_id(999) is None
    assert store.get_park_activities(999) == []


# ── TripPlan ───────────────────────────────────────────────────────────────────

def test_create_trip_plan_applies_defaults(store):
    trip = store.create_trip_plan({"park_id": 1, "month": "May", "days": 2})
    assert trip.id == 1
    assert trip.name == "My Trip"
    assert trip.preferences is None
    assert trip.user_id is None
    assert trip.created_at
    assert store.get_trip_plan(trip.id) is trip


def test_trip_ids_increase(store):
    first = store.create_trip_plan({"park_id": 1, "month": "May", "days": 2})
    second = store.create_trip_plan({"park_id": 1, "month": "June", "days": 1, "name": "Second"})
    assert second.id == first.id + 1
    assert second.name == "Second"


def test_create_trip_plan_requires_fields(store):
    with pytest.raises(PersistenceError):
        store.create_trip_plan({"park_id": 1, "month": "May"})


# ── TripDay ────────────────────────────────────────────────────────────────────

def test_days_sorted_by_day_number(store, trip):
    _day(store, trip.id, 3)
    _day(store, trip.id, 1)
    _day(store, trip.id, 2)
    assert [d.day_number for d in store.get_trip_days_by_trip_id(trip.id)] == [1, 2, 3]


def test_day_requires_existing_trip(store):
    with pytest.raises(PersistenceError):
        _day(store, 42, 1)


def test_duplicate_day_number_rejected(store, trip):
    _day(store, trip.id, 1)
    with pytest.raises(PersistenceError):
        _day(store, trip.id, 1)


# ── TripActivity ───────────────────────────────────────────────────────────────

def test_activities_sorted_by_order_and_joined(store, trip):
    day = _day(store, trip.id, 1)
    _activity(store, day.id, 9, 2, start_time="11:00")
    _activity(store, day.id, 8, 1, start_time="09:00")

    joined = store.get_trip_activities_by_day_id(day.id)
    assert [j.activity.order for j in joined] == [1, 2]
    assert joined[0].park_activity.id == 8

    row = joined[0].to_dict()
    assert row["name"] == store.get_park_activity_by_id(8).name
    assert row["trip_day_id"] == day.id
    assert row["difficulty"] in ("easy", "moderate", "difficult")


def test_activity_requires_existing_day(store):
    with pytest.raises(PersistenceError):
        _activity(store, 77, 8, 1)


def test_duplicate_order_rejected(store, trip):
    day = _day(store, trip.id, 1)
    _activity(store, day.id, 8, 1)
    with pytest.raises(PersistenceError):
        _activity(store, day.id, 9, 1)


def test_dangling_catalog_reference_detected_on_read(store, trip):
    day = _day(store, trip.id, 1)
    bad = _activity(store, day.id, 9999, 1)   # accepted at write time

    with pytest.raises(ReferentialIntegrityError) as excinfo:
        store.get_trip_activities_by_day_id(day.id)
    assert excinfo.value.trip_activity_id == bad.id
    assert excinfo.value.activity_id == 9999


# ── Delete ─────────────────────────────────────────────────────────────────────

def test_delete_days_is_idempotent(store, trip):
    assert store.delete_trip_days_by_trip_id(trip.id) == 0
    assert store.delete_trip_days_by_trip_id(trip.id) == 0


def test_delete_days_removes_owned_activities(store, trip):
    day = _day(store, trip.id, 1)
    _activity(store, day.id, 8, 1)

    assert store.delete_trip_days_by_trip_id(trip.id) == 1
    assert store.get_trip_days_by_trip_id(trip.id) == []
    assert store.get_trip_activities_by_day_id(day.id) == []


def test_delete_only_touches_one_trip(store, trip):
    other = store.create_trip_plan({"park_id": 1, "month": "May", "days": 1})
    _day(store, trip.id, 1)
    _day(store, other.id, 1)

    store.delete_trip_days_by_trip_id(trip.id)
    assert len(store.get_trip_days_by_trip_id(other.id)) == 1


def test_ids_not_reused_after_delete(store, trip):
    first = _day(store, trip.id, 1)
    store.delete_trip_days_by_trip_id(trip.id)
    again = _day(store, trip.id, 1)
    assert again.id > first.id


def test_trip_itinerary_joins_days_and_activities(store, trip):
    day2 = _day(store, trip.id, 2)
    day1 = _day(store, trip.id, 1)
    _activity(store, day1.id, 8, 1)
    _activity(store, day2.id, 10, 1)
    _activity(store, day2.id, 9, 2)

    itinerary = store.get_trip_itinerary(trip.id)
    assert [d.day.day_number for d in itinerary] == [1, 2]
    assert [a.park_activity.id for a in itinerary[1].activities] == [10, 9]
    assert itinerary[1].to_dict()["activities"][1]["order"] == 2


def test_day_number_reusable_after_delete(store, trip):
    day = _day(store, trip.id, 1)
    _activity(store, day.id, 8, 1)
    store.delete_trip_days_by_trip_id(trip.id)

    again = _day(store, trip.id, 1)
    _activity(store, again.id, 8, 1)
    assert [d.id for d in store.get_trip_days_by_trip_id(trip.id)] == [again.id]


# ── Concurrency ────────────────────────────────────────────────────────────────

def test_reads_survive_concurrent_writes(store, trip):
    busy = store.create_trip_plan({"park_id": 2, "month": "May", "days": 3})
    day = _day(store, trip.id, 1)
    _activity(store, day.id, 8, 1)

    stop = threading.Event()
    errors: list[BaseException] = []

    def write():
        try:
            while not stop.is_set():
                for n in range(1, 4):
                    d = _day(store, busy.id, n)
                    _activity(store, d.id, 9, 1)
                store.delete_trip_days_by_trip_id(busy.id)
        except Exception as exc:
            errors.append(exc)

    def read():
        try:
            for _ in range(2000):
                assert len(store.get_trip_days_by_trip_id(trip.id)) == 1
                assert len(store.get_trip_activities_by_day_id(day.id)) == 1
                assert len(store.get_park_activities(2)) == 6
                store.get_trip_itinerary(busy.id)
        except Exception as exc:
            errors.append(exc)

    interval = sys.getswitchinterval()
    sys.setswitchinterval(1e-6)
    try:
        writer = threading.Thread(target=write)
        readers = [threading.Thread(target=read) for _ in range(2)]
        writer.start()
        for r in readers:
            r.start()
        for r in readers:
            r.join(timeout=30)
        stop.set()
        writer.join(timeout=30)
    finally:
        sys.setswitchinterval(interval)

    assert errors == []
