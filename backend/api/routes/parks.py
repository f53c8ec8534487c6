"""
api/routes/parks.py
-------------------
Read-only catalog endpoints.

    GET /api/parks
    GET /api/parks/month/{month}          parks whose best_months include month
    GET /api/parks/{park_id}
    GET /api/parks/{park_id}/activities   catalog activities, ascending by id
    GET /api/parks/{park_id}/weather      live weather via OpenWeatherMap
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api.dependencies import get_store, get_weather_tool
from db.entity_store import EntityStore
from errors import NotFoundError, ValidationError
from modules.tool_usage.weather_tool import WeatherTool, format_for_display
from modules.validation import is_valid_month, parse_id
from schemas.catalog import Park

router = APIRouter()


def _park_or_404(store: EntityStore, raw_id: str) -> Park:
    park = store.get_park_by_id(parse_id(raw_id, "park"))
    if park is None:
        raise NotFoundError("Park not found")
    return park


@router.get("", summary="All parks")
def list_parks(store: EntityStore = Depends(get_store)) -> list[dict]:
    return [p.to_dict() for p in store.get_all_parks()]


@router.get("/month/{month}", summary="Parks best visited in a month")
def parks_by_month(month: str, store: EntityStore = Depends(get_store)) -> list[dict]:
    if not is_valid_month(month):
        raise ValidationError("Invalid month")
    return [p.to_dict() for p in store.get_parks_by_month(month)]


@router.get("/{park_id}", summary="One park")
def get_park(park_id: str, store: EntityStore = Depends(get_store)) -> dict:
    return _park_or_404(store, park_id).to_dict()


@router.get("/{park_id}/activities", summary="Activity catalog of a park")
def park_activities(park_id: str, store: EntityStore = Depends(get_store)) -> list[dict]:
    park = _park_or_404(store, park_id)
    return [a.to_dict() for a in store.get_park_activities(park.id)]


@router.get("/{park_id}/weather", summary="Current weather at a park")
def park_weather(
    park_id: str,
    store: EntityStore = Depends(get_store),
    weather: WeatherTool = Depends(get_weather_tool),
) -> dict:
    """
    Always 200 for a known park; an unavailable weather service shows up
    as N/A values plus error / errorMessage.
    """
    park = _park_or_404(store, park_id)
    return format_for_display(weather.fetch(park.latitude, park.longitude))
