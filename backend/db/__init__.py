"""
db/
----
Storage layer for the park trip planner.

Storage architecture:
  EntityStore (in-process) — authoritative, volatile
    catalog : parks, park activities (read-only, db/catalog_data.py)
    entities: trip plans, trip days, trip activities

  Redis (redis-py) — optional shared recommendation cache
    airec:{park_id}:{month}:{sha256(preferences)}   no TTL
    airec:next_id                                   id counter
    enabled by RECOMMENDATION_CACHE_BACKEND=redis

Public exports (import from here for convenience):
    from db import EntityStore, get_redis
"""

from db.entity_store import EntityStore
from db.redis_client import get_redis

__all__ = ["EntityStore", "get_redis"]
