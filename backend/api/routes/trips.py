"""
api/routes/trips.py
-------------------
Trip planning endpoints.

Flow:
  1. POST /api/trips                    → 201 TripPlan
  2. POST /api/trips/{trip_id}/generate → days with joined activities
                                          (header X-Itinerary-Source: llm | fallback)
  3. GET  /api/trips/{trip_id}/days     → same shape, read back from the store
  4. GET  /api/days/{day_id}/activities → one day's joined activities (api/routes/days.py)

Request bodies use camelCase keys (parkId, userId); responses use the
stored snake_case field names.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

from api.dependencies import get_planner
from modules.planning import TripPlanner
from modules.validation import parse_id

router = APIRouter()

ITINERARY_SOURCE_HEADER = "X-Itinerary-Source"


# ── Request schemas ────────────────────────────────────────────────────────────

class CreateTripRequest(BaseModel):
    """Presence and ranges are checked by TripPlanner so the messages match the API."""
    model_config = ConfigDict(populate_by_name=True)

    park_id: Optional[StrictInt] = Field(None, alias="parkId")
    month: Optional[StrictStr] = None
    days: Optional[StrictInt] = None
    preferences: Optional[StrictStr] = None
    name: Optional[StrictStr] = None
    user_id: Optional[StrictInt] = Field(None, alias="userId")


# ── Endpoints ──────────────────────────────────────────────────────────────────

@router.post("", status_code=201, summary="Create a trip plan")
def create_trip(req: CreateTripRequest, planner: TripPlanner = Depends(get_planner)) -> dict:
    return planner.create_trip(req.model_dump(by_alias=True)).to_dict()


@router.get("/{trip_id}", summary="One trip plan")
def get_trip(trip_id: str, planner: TripPlanner = Depends(get_planner)) -> dict:
    return planner.get_trip(parse_id(trip_id, "trip")).to_dict()


@router.post("/{trip_id}/generate", summary="Generate and store the itinerary of a trip")
def generate_itinerary(
    trip_id: str,
    response: Response,
    planner: TripPlanner = Depends(get_planner),
) -> list[dict]:
    """
    Generates with the LLM, falling back to the deterministic plan when
    generation fails, then persists the days atomically.

    404 when the trip, its park or the park's activities are missing;
    500 when persisting failed (the message says whether anything was retained).
    """
    days, itinerary = planner.generate_itinerary(parse_id(trip_id, "trip"))
    response.headers[ITINERARY_SOURCE_HEADER] = itinerary.source
    return [d.to_dict() for d in days]


@router.get("/{trip_id}/days", summary="Stored days of a trip")
def trip_days(trip_id: str, planner: TripPlanner = Depends(get_planner)) -> list[dict]:
    """Days by day_number, each with its joined activities by order; [] if none."""
    return [d.to_dict() for d in planner.get_days(parse_id(trip_id, "trip"))]
