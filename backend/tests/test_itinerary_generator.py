"""
ItineraryGenerator: deterministic fallback, model-output validation and
the silent switch to the fallback on any generation failure.
"""

import pytest

from conftest import ScriptedLLM, make_activity, read_events
from errors import GenerationError
from modules.planning.itinerary_generator import (
    FALLBACK_NOTE,
    ItineraryGenerator,
    activities_per_day,
    build_itinerary_prompt,
    fallback_itinerary,
    parse_itinerary_response,
)

# Declared out of category order; sorted: Biking(2) Fishing(4) Hiking(1) Photography(5) Scenic Views(3)
FIVE = [
    make_activity(1, "Hiking"),
    make_activity(2, "Biking"),
    make_activity(3, "Scenic Views"),
    make_activity(4, "Fishing"),
    make_activity(5, "Photography"),
]


def _ids(day):
    return [a.activity_id for a in day.activities]


def _llm_plan(*days):
    """days: lists of activity ids -> model-shaped JSON dict."""
    return {"itinerary": [
        {
            "day_number": n,
            "title": f"Day {n}",
            "description": "Generated",
            "activities": [
                {"activity_id": aid, "name": "ignored", "start_time": "09:00",
                 "end_time": "10:00", "notes": "", "order": i}
                for i, aid in enumerate(ids, start=1)
            ],
        }
        for n, ids in enumerate(days, start=1)
    ]}


# ── Fallback ───────────────────────────────────────────────────────────────────

def test_fallback_five_activities_three_days():
    days = fallback_itinerary(FIVE, 3)
    assert [_ids(d) for d in days] == [[2, 4], [1, 5], [3, 2]]
    assert [d.day_number for d in days] == [1, 2, 3]
    assert days[0].title == "Day 1: Exploring the Park"
    assert days[2].title == "Day 3: Exploring the Park"


def test_fallback_slot_times_and_orders():
    day = fallback_itinerary([make_activity(1, "Hiking", duration=90),
                              make_activity(2, "Hiking", duration=45)], 1)[0]
    first, second = day.activities
    assert (first.order, first.start_time, first.end_time) == (1, "09:00", "10:30")
    assert (second.order, second.start_time, second.end_time) == (2, "11:00", "11:45")
    assert first.notes == FALLBACK_NOTE


def test_fallback_caps_four_per_day(store):
    yosemite = store.get_park_activities(1)
    days = fallback_itinerary(yosemite, 1)
    assert len(days[0].activities) == 4


def test_fallback_end_time_clamped_to_same_day():
    long = [make_activity(i, "Hiking", duration=600) for i in range(1, 5)]
    last = fallback_itinerary(long, 1)[0].activities[-1]
    assert last.start_time == "15:00"
    assert last.end_time == "23:59"


def test_fallback_wraps_small_catalog_across_days():
    days = fallback_itinerary([make_activity(7, "Hiking")], 3)
    assert [_ids(d) for d in days] == [[7], [7], [7]]


def test_fallback_is_pure():
    assert fallback_itinerary(FIVE, 4) == fallback_itinerary(list(FIVE), 4)


def test_fallback_rejects_empty_catalog():
    with pytest.raises(ValueError):
        fallback_itinerary([], 2)


@pytest.mark.parametrize("count, days, expected", [(5, 3, 2), (31, 1, 4), (1, 30, 1), (8, 2, 4)])
def test_activities_per_day(count, days, expected):
    assert activities_per_day(count, days) == expected


# ── Response validation ────────────────────────────────────────────────────────

def test_parse_valid_response_uses_catalog_names():
    days = parse_itinerary_response(_llm_plan([1, 2], [3]), FIVE, 2)
    assert [_ids(d) for d in days] == [[1, 2], [3]]
    assert days[0].activities[0].name == "Activity 1"


def test_parse_sorts_days_and_accepts_numeric_strings():
    raw = _llm_plan([1], [2])
    raw["itinerary"].reverse()
    raw["itinerary"][0]["day_number"] = "2"
    days = parse_itinerary_response(raw, FIVE, 2)
    assert [d.day_number for d in days] == [1, 2]


@pytest.mark.parametrize("mutate", [
    lambda raw: raw.pop("itinerary"),
    lambda raw: raw["itinerary"].pop(),                                   # too few days
    lambda raw: raw["itinerary"][0].update(day_number=5),                 # out of range
    lambda raw: raw["itinerary"][0].update(title=""),
    lambda raw: raw["itinerary"][0].update(activities=[]),
    lambda raw: raw["itinerary"][0]["activities"][0].update(activity_id=99),
    lambda raw: raw["itinerary"][0]["activities"][0].update(start_time="9am"),
    lambda raw: raw["itinerary"][0]["activities"][1].update(order=3),     # gap
    lambda raw: raw["itinerary"][0]["activities"][0].update(order=True),
])
def test_parse_rejects_malformed_response(mutate):
    raw = _llm_plan([1, 2], [3])
    mutate(raw)
    with pytest.raises(GenerationError):
        parse_itinerary_response(raw, FIVE, 2)


def test_parse_rejects_non_object():
    with pytest.raises(GenerationError):
        parse_itinerary_response(["not", "a", "plan"], FIVE, 1)


def test_prompt_lists_catalog_and_weather(store):
    park = store.get_park_by_id(1)
    activities = store.get_park_activities(1)
    prompt = build_itinerary_prompt(park, activities, "May", 3, "waterfalls")
    assert "Create a 3-day itinerary" in prompt
    assert f"- id {activities[0].id}: {activities[0].name}" in prompt
    assert "Weather in May: High: 71°F" in prompt
    assert "waterfalls" in prompt


# ── Generator ──────────────────────────────────────────────────────────────────

def test_generate_uses_valid_model_plan(store):
    park = store.get_park_by_id(2)
    activities = store.get_park_activities(2)
    ids = [a.id for a in activities]
    llm = ScriptedLLM(_llm_plan(ids[:2], ids[2:4]))

    itinerary = ItineraryGenerator(llm).generate(park, activities, "May", 2, "sunrise")

    assert itinerary.source == "llm"
    assert not itinerary.used_fallback
    assert [_ids(d) for d in itinerary.days] == [ids[:2], ids[2:4]]
    assert llm.calls[0]["expect_json"] is True


@pytest.mark.parametrize("response", [
    GenerationError("timeout"),
    RuntimeError("transport blew up"),
    {"itinerary": []},
    {"itinerary": [{"day_number": 1, "title": "x", "activities": [{"activity_id": 9999}]}]},
    "plain text instead of JSON",
])
def test_generate_falls_back_on_any_failure(store, response):
    park = store.get_park_by_id(2)
    activities = store.get_park_activities(2)

    itinerary = ItineraryGenerator(ScriptedLLM(response)).generate(park, activities, "May", 3)

    assert itinerary.used_fallback
    assert itinerary.fallback_reason
    assert itinerary.days == fallback_itinerary(activities, 3)


def test_generate_logs_source(store, logs_dir):
    park = store.get_park_by_id(3)
    ItineraryGenerator(ScriptedLLM()).generate(
        park, store.get_park_activities(3), "April", 2, session_id="trip_7",
    )
    (event,) = read_events(logs_dir, "trip_7")
    assert event["event_type"] == "ITINERARY_GENERATED"
    assert event["payload"]["source"] == "fallback"
    assert event["payload"]["day_count"] == 2


def test_generate_requires_activities(store):
    with pytest.raises(ValueError):
        ItineraryGenerator(ScriptedLLM()).generate(store.get_park_by_id(1), [], "May", 1)
