"""
TripPlanner: per-trip serialisation of generate_itinerary across threads.
"""

import threading

import pytest

from conftest import ScriptedLLM
from modules.planning import ItineraryGenerator, ItineraryWriter, TripPlanner


class GatedLLM(ScriptedLLM):
    """
    The first generate() call parks until `release` is set; every call then
    falls through to the (empty) script, so the planner uses its fallback.
    """

    def __init__(self):
        super().__init__()
        self.entered = threading.Event()
        self.release = threading.Event()
        self.started = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self._guard = threading.Lock()

    def generate(self, prompt, expect_json=False, system_instruction=None):
        with self._guard:
            self.started += 1
            first = self.started == 1
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if first:
                self.entered.set()
                self.release.wait(timeout=10)
            return super().generate(prompt, expect_json, system_instruction)
        finally:
            with self._guard:
                self.in_flight -= 1


@pytest.fixture
def gated_llm():
    return GatedLLM()


@pytest.fixture
def planner(store, gated_llm):
    return TripPlanner(store, ItineraryGenerator(gated_llm), ItineraryWriter(store))


def _run(planner, trip_id, errors):
    try:
        planner.generate_itinerary(trip_id)
    except Exception as exc:
        errors.append(exc)


def test_same_trip_generations_are_serialised(planner, gated_llm, store, trip):
    errors: list[BaseException] = []
    first = threading.Thread(target=_run, args=(planner, trip.id, errors))
    second = threading.Thread(target=_run, args=(planner, trip.id, errors))

    first.start()
    assert gated_llm.entered.wait(timeout=5)
    second.start()
    second.join(timeout=0.2)
    assert second.is_alive()

    gated_llm.release.set()
    first.join(timeout=10)
    second.join(timeout=10)

    assert errors == []
    assert gated_llm.started == 2
    assert gated_llm.max_in_flight == 1

    itinerary = store.get_trip_itinerary(trip.id)
    assert [d.day.day_number for d in itinerary] == [1, 2, 3]
    for day in itinerary:
        orders = [a.activity.order for a in day.activities]
        assert orders == list(range(1, len(orders) + 1))


def test_different_trips_generate_in_parallel(planner, gated_llm, store, trip):
    other = store.create_trip_plan({"park_id": 1, "month": "June", "days": 2})
    errors: list[BaseException] = []
    blocked = threading.Thread(target=_run, args=(planner, trip.id, errors))
    free = threading.Thread(target=_run, args=(planner, other.id, errors))

    blocked.start()
    assert gated_llm.entered.wait(timeout=5)
    free.start()
    free.join(timeout=5)
    finished_while_blocked = not free.is_alive()

    gated_llm.release.set()
    blocked.join(timeout=10)
    free.join(timeout=10)

    assert finished_while_blocked
    assert errors == []
    assert gated_llm.max_in_flight == 2
    assert len(store.get_trip_itinerary(other.id)) == 2
    assert len(store.get_trip_itinerary(trip.id)) == 3
