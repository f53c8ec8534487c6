"""
db/redis_client.py
-------------------
redis-py client — singleton plus helpers for the recommendation key schema.

Only used when RECOMMENDATION_CACHE_BACKEND=redis; the default in-memory
cache never touches Redis.

Key schemas:

  1. airec:{park_id}:{month}:{sha256(preferences)}
       Type : String (JSON-encoded AiRecommendation)
       TTL  : none — entries are immutable and never expire
       Value: {"id", "park_id", "month", "user_preferences",
               "recommendation", "created_at"}

  2. airec:next_id
       Type : String (integer counter, INCR)

The preference text is hashed so arbitrary user input never ends up in a
key name; the exact text is kept inside the value.

Environment variables (set in config.py):
    REDIS_HOST        default: localhost
    REDIS_PORT        default: 6379
    REDIS_DB          default: 0
    REDIS_PASSWORD    default: ""  (empty = no auth)
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

import redis

import config

# Module-level singleton; initialised lazily on first call to get_redis()
_client: redis.Redis | None = None

_NEXT_ID_KEY = "airec:next_id"


def get_redis() -> redis.Redis:
    """Return the singleton Redis client, creating it on first call."""
    global _client
    if _client is None:
        kwargs: dict[str, Any] = {
            "host":             config.REDIS_HOST,
            "port":             config.REDIS_PORT,
            "db":               config.REDIS_DB,
            "decode_responses": True,   # return str, not bytes
        }
        if config.REDIS_PASSWORD:
            kwargs["password"] = config.REDIS_PASSWORD
        _client = redis.Redis(**kwargs)
    return _client


# ── Recommendation cache ───────────────────────────────────────────────────────

def recommendation_key(park_id: int, month: str, preferences: str) -> str:
    digest = hashlib.sha256(preferences.encode("utf-8")).hexdigest()
    return f"airec:{park_id}:{month}:{digest}"


def get_recommendation(
    park_id: int,
    month: str,
    preferences: str,
    client: redis.Redis | None = None,
) -> dict | None:
    """Return the stored recommendation dict, or None on cache miss."""
    raw = (client or get_redis()).get(recommendation_key(park_id, month, preferences))
    return json.loads(raw) if raw is not None else None


def set_recommendation(record: dict[str, Any], client: redis.Redis | None = None) -> None:
    """Write one recommendation without expiry (overwrites silently)."""
    key = recommendation_key(record["park_id"], record["month"], record["user_preferences"])
    (client or get_redis()).set(key, json.dumps(record))


def next_recommendation_id(client: redis.Redis | None = None) -> int:
    return int((client or get_redis()).incr(_NEXT_ID_KEY))
