"""
modules/recommendation/cache.py
--------------------------------
Recommendation cache keyed on the fingerprint
(park_id, month, exact trimmed preferences).

Matching is exact after trimming surrounding whitespace: case, inner
whitespace and punctuation all matter. No eviction, no TTL, no size
bound; fine for a demo-scale catalog, a capacity risk anywhere else.

Backends (RECOMMENDATION_CACHE_BACKEND):
    in_memory  InMemoryRecommendationCache  dict inside the process
    redis      RedisRecommendationCache     shared, see db/redis_client.py
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

import redis

import config
from db import redis_client
from schemas.trip import AiRecommendation

logger = logging.getLogger(__name__)

Fingerprint = tuple[int, str, str]


def fingerprint(park_id: int, month: str, preferences: str) -> Fingerprint:
    return (park_id, month, preferences.strip())


class RecommendationCache(ABC):
    """
    Contract shared by every backend. get() and put() are the only
    storage operations; create() stamps id and timestamp and stores.
    """

    @abstractmethod
    def get(self, park_id: int, month: str, preferences: str) -> Optional[AiRecommendation]:
        ...

    @abstractmethod
    def put(self, recommendation: AiRecommendation) -> AiRecommendation:
        """Store under the recommendation's fingerprint; overwrites silently."""

    @abstractmethod
    def _allocate_id(self) -> int:
        ...

    @abstractmethod
    def __len__(self) -> int:
        ...

    def create(self, park_id: int, month: str, preferences: str, text: str) -> AiRecommendation:
        """Assign id + timestamp to freshly generated text and store it."""
        return self.put(AiRecommendation(
            id=self._allocate_id(),
            park_id=park_id,
            month=month,
            user_preferences=preferences.strip(),
            recommendation=text,
            created_at=datetime.now(timezone.utc).isoformat(),
        ))


class InMemoryRecommendationCache(RecommendationCache):
    """In-process cache."""

    def __init__(self) -> None:
        self._entries: dict[Fingerprint, AiRecommendation] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def get(self, park_id: int, month: str, preferences: str) -> Optional[AiRecommendation]:
        with self._lock:
            return self._entries.get(fingerprint(park_id, month, preferences))

    def put(self, recommendation: AiRecommendation) -> AiRecommendation:
        with self._lock:
            self._entries[recommendation.fingerprint] = recommendation
        return recommendation

    def _allocate_id(self) -> int:
        with self._lock:
            rec_id = self._next_id
            self._next_id += 1
        return rec_id

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class RedisRecommendationCache(RecommendationCache):
    """Stored in Redis; ids come from a Redis counter so instances agree."""

    def __init__(self, client: redis.Redis | None = None) -> None:
        self._client = client or redis_client.get_redis()

    def get(self, park_id: int, month: str, preferences: str) -> Optional[AiRecommendation]:
        data = redis_client.get_recommendation(park_id, month, preferences.strip(), client=self._client)
        return AiRecommendation(**data) if data else None

    def put(self, recommendation: AiRecommendation) -> AiRecommendation:
        redis_client.set_recommendation(recommendation.to_dict(), client=self._client)
        return recommendation

    def _allocate_id(self) -> int:
        return redis_client.next_recommendation_id(client=self._client)

    def __len__(self) -> int:
        return sum(1 for _ in self._client.scan_iter("airec:*:*:*"))


def make_recommendation_cache() -> RecommendationCache:
    backend = config.RECOMMENDATION_CACHE_BACKEND
    if backend == "redis":
        logger.info("Recommendation cache: redis at %s:%s", config.REDIS_HOST, config.REDIS_PORT)
        return RedisRecommendationCache()
    if backend != "in_memory":
        logger.warning("Unknown RECOMMENDATION_CACHE_BACKEND=%r; using in_memory", backend)
    return InMemoryRecommendationCache()
