"""
api/server.py
-------------
FastAPI application entry point.

Run dev server:
    cd backend
    uvicorn api.server:app --reload --port 5000

Endpoints:
    GET  /api/health
    GET  /api/parks
    GET  /api/parks/month/{month}
    GET  /api/parks/{park_id}
    GET  /api/parks/{park_id}/activities
    GET  /api/parks/{park_id}/weather
    POST /api/trips
    GET  /api/trips/{trip_id}
    POST /api/trips/{trip_id}/generate
    GET  /api/trips/{trip_id}/days
    GET  /api/days/{day_id}/activities
    POST /api/recommendations

Every error body is {"message": "..."}.
"""
from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

import config
from api.routes import days, health, parks, recommendations, trips
from db.entity_store import EntityStore
from errors import PlannerError
from llm import GenerationCapability, get_llm_client
from modules.observability.logger import StructuredLogger, get_event_logger
from modules.planning import ItineraryGenerator, ItineraryWriter, TripPlanner
from modules.recommendation import (
    RecommendationCache,
    RecommendationService,
    make_recommendation_cache,
)
from modules.tool_usage.weather_tool import WeatherTool

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("api")

_MAX_LOG_LINE = 80


def create_app(
    store: Optional[EntityStore] = None,
    llm: Optional[GenerationCapability] = None,
    cache: Optional[RecommendationCache] = None,
    weather: Optional[WeatherTool] = None,
    event_logger: Optional[StructuredLogger] = None,
) -> FastAPI:
    """
    Build the app with its collaborators wired onto app.state.

    Anything not passed in is built from config; tests pass fakes.
    """
    store = store or EntityStore.with_default_catalog()
    llm = llm or get_llm_client()
    cache = cache if cache is not None else make_recommendation_cache()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        config.validate_config()
        logger.info("serving on port %s", config.PORT)
        yield
        (event_logger or get_event_logger()).close()

    app = FastAPI(
        title="Park Trip Planner API",
        version="1.0.0",
        description=(
            "National park trip planner backend. Generates day-by-day itineraries "
            "and cached visit recommendations with Gemini, with a deterministic "
            "fallback when generation is unavailable."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.started_at = time.monotonic()
    app.state.store = store
    app.state.planner = TripPlanner(
        store,
        ItineraryGenerator(llm, event_logger=event_logger),
        ItineraryWriter(store, event_logger=event_logger),
    )
    app.state.recommendations = RecommendationService(store, cache, llm, event_logger=event_logger)
    app.state.weather = weather or WeatherTool()

    # Allow the browser client (any origin during development)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_api_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        path = request.url.path
        if path.startswith("/api"):
            duration_ms = int((time.perf_counter() - start) * 1000)
            line = f"{request.method} {path} {response.status_code} in {duration_ms}ms"
            if len(line) > _MAX_LOG_LINE:
                line = line[: _MAX_LOG_LINE - 1] + "…"
            logger.info(line)
        return response

    _register_exception_handlers(app)

    app.include_router(health.router,          prefix="/api",                 tags=["Health"])
    app.include_router(parks.router,           prefix="/api/parks",           tags=["Parks"])
    app.include_router(trips.router,           prefix="/api/trips",           tags=["Trips"])
    app.include_router(days.router,            prefix="/api/days",            tags=["Trips"])
    app.include_router(recommendations.router, prefix="/api/recommendations", tags=["Recommendations"])

    return app


# ── Error mapping ──────────────────────────────────────────────────────────────

def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def _register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(PlannerError)
    async def planner_error(request: Request, exc: PlannerError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
        return _message(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.debug("Rejected body for %s: %s", request.url.path, exc.errors())
        return _message(400, "Invalid request body")

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _message(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _message(500, "Internal Server Error")


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.server:app", host="0.0.0.0", port=config.PORT, reload=True)
