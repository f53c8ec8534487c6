"""
api/routes/health.py
--------------------
Health-check endpoint — used by load balancers and container health checks.
"""
from __future__ import annotations

import time

from fastapi import APIRouter, Request

import config

router = APIRouter()


@router.get("/health", summary="Health check")
def health(request: Request) -> dict:
    """Returns 200 OK with process uptime (seconds) while the service is running."""
    return {
        "status":  "ok",
        "service": "parkplanner-backend",
        "uptime":  round(time.monotonic() - request.app.state.started_at, 3),
        "env":     config.APP_ENV,
    }
