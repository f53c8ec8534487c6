"""
Recommendation cache (in-memory and Redis-backed) and the
RecommendationService get-or-create flow.
"""

import json

import pytest

from conftest import ScriptedLLM, read_events
from errors import GenerationError, NotFoundError, ValidationError
from modules.recommendation import (
    APOLOGY_TEXT,
    InMemoryRecommendationCache,
    RecommendationCache,
    RecommendationService,
    RedisRecommendationCache,
)
from modules.recommendation.recommender import build_recommendation_prompt


class FakeRedis:
    """The handful of redis-py calls the cache makes, backed by a dict."""

    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value

    def incr(self, key):
        self.data[key] = int(self.data.get(key, 0)) + 1
        return self.data[key]

    def scan_iter(self, pattern):
        return (k for k in list(self.data) if k.startswith("airec:") and k != "airec:next_id")


@pytest.fixture(params=["in_memory", "redis"])
def cache(request):
    if request.param == "redis":
        return RedisRecommendationCache(client=FakeRedis())
    return InMemoryRecommendationCache()


# ── Cache ──────────────────────────────────────────────────────────────────────

def test_miss_then_hit(cache):
    assert cache.get(1, "May", "waterfalls") is None
    stored = cache.create(1, "May", "waterfalls", "See Vernal Fall.")
    hit = cache.get(1, "May", "waterfalls")
    assert hit is not None
    assert hit.id == stored.id
    assert hit.recommendation == "See Vernal Fall."


def test_surrounding_whitespace_is_trimmed(cache):
    cache.create(1, "May", "  waterfalls \n", "text")
    assert cache.get(1, "May", "waterfalls") is not None
    assert cache.get(1, "May", "waterfalls").user_preferences == "waterfalls"


@pytest.mark.parametrize("other", ["Waterfalls", "waterfalls!", "water falls", "waterfall"])
def test_any_character_difference_misses(cache, other):
    cache.create(1, "May", "waterfalls", "text")
    assert cache.get(1, "May", other) is None


def test_fingerprint_includes_park_and_month(cache):
    cache.create(1, "May", "hiking", "text")
    assert cache.get(2, "May", "hiking") is None
    assert cache.get(1, "June", "hiking") is None


def test_independent_entries_get_increasing_ids(cache):
    a = cache.create(1, "May", "hiking", "a")
    b = cache.create(1, "May", "hiking.", "b")
    assert b.id > a.id
    assert cache.get(1, "May", "hiking").recommendation == "a"
    assert cache.get(1, "May", "hiking.").recommendation == "b"


def test_put_overwrites_silently(cache):
    first = cache.create(1, "May", "hiking", "old")
    first.recommendation = "new"
    cache.put(first)
    assert cache.get(1, "May", "hiking").recommendation == "new"


def test_redis_key_hashes_preferences():
    client = FakeRedis()
    RedisRecommendationCache(client=client).create(3, "April", "arches at sunset", "text")
    keys = [k for k in client.data if k != "airec:next_id"]
    assert len(keys) == 1
    assert keys[0].startswith("airec:3:April:")
    assert "sunset" not in keys[0]
    assert json.loads(client.data[keys[0]])["user_preferences"] == "arches at sunset"


def test_backends_share_only_the_abstract_contract():
    redis_cache = RedisRecommendationCache(client=FakeRedis())
    assert isinstance(redis_cache, RecommendationCache)
    assert not isinstance(redis_cache, InMemoryRecommendationCache)
    assert not hasattr(redis_cache, "_entries")
    with pytest.raises(TypeError):
        RecommendationCache()


def test_redis_ids_come_from_the_shared_counter():
    client = FakeRedis()
    first = RedisRecommendationCache(client=client).create(1, "May", "hiking", "a")
    second = RedisRecommendationCache(client=client).create(1, "May", "biking", "b")
    assert (first.id, second.id) == (1, 2)
    assert client.data["airec:next_id"] == 2


# ── Service ────────────────────────────────────────────────────────────────────

def _body(**overrides):
    body = {"parkId": 1, "month": "May", "preferences": "waterfalls and easy hikes"}
    body.update(overrides)
    return body


def test_identical_requests_generate_once(store, logs_dir):
    llm = ScriptedLLM("Start early at Vernal Fall.")
    service = RecommendationService(store, InMemoryRecommendationCache(), llm)

    first = service.recommend(_body())
    second = service.recommend(_body(preferences="  waterfalls and easy hikes  "))

    assert first.recommendation == second.recommendation == "Start early at Vernal Fall."
    assert not first.cached
    assert second.cached
    assert len(llm.calls) == 1

    events = [e["event_type"] for e in read_events(logs_dir, "recommendations")]
    assert events == ["RECOMMENDATION_CACHE", "RECOMMENDATION_GENERATED", "RECOMMENDATION_CACHE"]


def test_different_preferences_generate_again(store):
    llm = ScriptedLLM("one", "two")
    service = RecommendationService(store, InMemoryRecommendationCache(), llm)
    assert service.recommend(_body()).recommendation == "one"
    assert service.recommend(_body(preferences="waterfalls and easy hikes!")).recommendation == "two"
    assert len(llm.calls) == 2


def test_failure_returns_apology_without_caching(store):
    llm = ScriptedLLM(GenerationError("quota"), "Real advice.")
    cache = InMemoryRecommendationCache()
    service = RecommendationService(store, cache, llm)

    degraded = service.recommend(_body())
    assert degraded.recommendation == APOLOGY_TEXT
    assert degraded.degraded
    assert len(cache) == 0

    assert service.recommend(_body()).recommendation == "Real advice."
    assert len(cache) == 1


def test_blank_generation_counts_as_failure(store):
    service = RecommendationService(store, InMemoryRecommendationCache(), ScriptedLLM("   "))
    assert service.recommend(_body()).recommendation == APOLOGY_TEXT


def test_unknown_park_is_not_found(store):
    service = RecommendationService(store, InMemoryRecommendationCache(), ScriptedLLM())
    with pytest.raises(NotFoundError, match="Park not found"):
        service.recommend(_body(parkId=999))


@pytest.mark.parametrize("body, message", [
    ({"parkId": 1, "month": "May"}, "Missing required fields"),
    ({"parkId": 1, "month": "Mayo", "preferences": "x"}, "Invalid month"),
    ({"parkId": 1, "month": "May", "preferences": "   "}, "Preferences must not be empty"),
    ({"parkId": 1, "month": "May", "preferences": "x" * 501}, "Preferences must be 500 characters or fewer"),
])
def test_invalid_requests(store, body, message):
    service = RecommendationService(store, InMemoryRecommendationCache(), ScriptedLLM())
    with pytest.raises(ValidationError) as excinfo:
        service.recommend(body)
    assert excinfo.value.message == message


def test_prompt_mentions_park_month_and_preferences(store):
    park = store.get_park_by_id(1)
    prompt = build_recommendation_prompt(park, "May", "waterfalls")
    assert park.name in prompt
    assert '"waterfalls"' in prompt
    assert "Weather in May: High: 71°F" in prompt
