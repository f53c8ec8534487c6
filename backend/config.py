"""
config.py
---------
Central configuration for the park trip planner backend.
All secrets loaded from environment variables — never hard-coded.

validate_config() is called once at application startup; it only logs,
missing optional keys degrade features instead of blocking startup.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load .env from the backend directory (if it exists) so env vars in that file
# are picked up by os.getenv() below.  Won't override vars already set in the shell.
_env_path = Path(__file__).parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path, override=False)


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


# ── Server ───────────────────────────────────────────────────────────────────
APP_ENV: str   = os.getenv("APP_ENV", "development")
PORT: int      = int(os.getenv("PORT", "5000"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# ── LLM ──────────────────────────────────────────────────────────────────────
GEMINI_API_KEY: str      = os.getenv("GEMINI_API_KEY", "")
LLM_MODEL_NAME: str      = os.getenv("LLM_MODEL_NAME", "gemini-1.5-flash")
LLM_TIMEOUT_SECONDS: int = int(os.getenv("LLM_TIMEOUT_SECONDS", "60"))

# Stub mode is forced when no key is configured.
USE_STUB_LLM: bool = _flag("USE_STUB_LLM", "false") or not GEMINI_API_KEY

# ── Recommendation cache ─────────────────────────────────────────────────────
# "in_memory" | "redis"
RECOMMENDATION_CACHE_BACKEND: str = os.getenv("RECOMMENDATION_CACHE_BACKEND", "in_memory")

# ── Redis (only used when RECOMMENDATION_CACHE_BACKEND=redis) ────────────────
REDIS_HOST: str     = os.getenv("REDIS_HOST",     "localhost")
REDIS_PORT: int     = int(os.getenv("REDIS_PORT", "6379"))
REDIS_DB: int       = int(os.getenv("REDIS_DB",   "0"))
REDIS_PASSWORD: str = os.getenv("REDIS_PASSWORD", "")

# ── OpenWeatherMap ───────────────────────────────────────────────────────────
# "fake_key" returns fixed demo data without a network call.
OPENWEATHER_API_KEY: str     = os.getenv("OPENWEATHER_API_KEY", "")
OPENWEATHER_BASE_URL: str    = os.getenv(
    "OPENWEATHER_BASE_URL", "https://api.openweathermap.org/data/2.5/weather"
)
WEATHER_TIMEOUT_SECONDS: int = int(os.getenv("WEATHER_TIMEOUT_SECONDS", "10"))

# ── Observability ────────────────────────────────────────────────────────────
LOGS_DIR: Path = Path(os.getenv("LOGS_DIR", str(Path(__file__).parent / "logs")))

# ── Planning limits ──────────────────────────────────────────────────────────
MAX_TRIP_DAYS: int          = int(os.getenv("MAX_TRIP_DAYS", "30"))
MAX_PREFERENCES_LENGTH: int = int(os.getenv("MAX_PREFERENCES_LENGTH", "500"))
FALLBACK_MAX_ACTIVITIES_PER_DAY: int = int(os.getenv("FALLBACK_MAX_ACTIVITIES_PER_DAY", "4"))
DEFAULT_TRIP_NAME: str      = "My Trip"

VALID_MONTHS: tuple[str, ...] = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def validate_config() -> None:
    """Log warnings for missing optional configuration and a short summary."""
    if not GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY not set. AI features will use fallback responses.")
    if not OPENWEATHER_API_KEY:
        logger.warning("OPENWEATHER_API_KEY not set. Weather features will return placeholder data.")

    logger.info(
        "Server configuration: env=%s port=%s llm=%s weather=%s cache=%s",
        APP_ENV,
        PORT,
        "stub" if USE_STUB_LLM else LLM_MODEL_NAME,
        "configured" if OPENWEATHER_API_KEY else "not configured",
        RECOMMENDATION_CACHE_BACKEND,
    )
