"""
api/routes/days.py
------------------
GET /api/days/{day_id}/activities — one day's activities, ascending by
order, joined with their catalog entries.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api.dependencies import get_store
from db.entity_store import EntityStore
from modules.validation import parse_id

router = APIRouter()


@router.get("/{day_id}/activities", summary="Activities of one trip day")
def day_activities(day_id: str, store: EntityStore = Depends(get_store)) -> list[dict]:
    return [a.to_dict() for a in store.get_trip_activities_by_day_id(parse_id(day_id, "day"))]
