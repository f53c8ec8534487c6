"""
api/dependencies.py
-------------------
FastAPI dependencies handing route functions the collaborators that
create_app() placed on app.state.
"""
from __future__ import annotations

from fastapi import Request

from db.entity_store import EntityStore
from modules.planning import TripPlanner
from modules.recommendation import RecommendationService
from modules.tool_usage.weather_tool import WeatherTool


def get_store(request: Request) -> EntityStore:
    return request.app.state.store


def get_planner(request: Request) -> TripPlanner:
    return request.app.state.planner


def get_recommendation_service(request: Request) -> RecommendationService:
    return request.app.state.recommendations


def get_weather_tool(request: Request) -> WeatherTool:
    return request.app.state.weather
