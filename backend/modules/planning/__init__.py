"""
modules/planning package — itinerary generation, persistence and the
trip planning service that ties them together.
"""
from modules.planning.itinerary_generator import ItineraryGenerator, fallback_itinerary
from modules.planning.itinerary_writer import (
    ItineraryWriter,
    WriteOutcome,
    WriteResult,
    raise_for_outcome,
)
from modules.planning.trip_planner import TripPlanner

__all__ = [
    "ItineraryGenerator",
    "ItineraryWriter",
    "TripPlanner",
    "WriteOutcome",
    "WriteResult",
    "fallback_itinerary",
    "raise_for_outcome",
]
