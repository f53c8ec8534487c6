"""
Shared fixtures: a fresh EntityStore per test, a scripted generation
client, a tmp-dir event logger and a TestClient wired to all of them.
"""

import json

import pytest
from fastapi.testclient import TestClient

from api.server import create_app
from db.catalog_data import load_default_catalog
from db.entity_store import EntityStore
from errors import GenerationError
from llm import GenerationCapability
from modules.observability.logger import StructuredLogger, set_event_logger
from modules.recommendation import InMemoryRecommendationCache
from modules.tool_usage.weather_tool import WeatherTool
from schemas.catalog import Park, ParkActivity

EMPTY_PARK_ID = 6


class ScriptedLLM(GenerationCapability):
    """
    Answers generate() calls from a queue; queued exceptions are raised.
    An exhausted queue behaves like the stub client.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def generate(self, prompt, expect_json=False, system_instruction=None):
        self.calls.append({"prompt": prompt, "expect_json": expect_json})
        if not self.responses:
            raise GenerationError("no scripted response left")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_activity(activity_id, category, duration=60, park_id=1, name=None):
    return ParkActivity(
        id=activity_id,
        park_id=park_id,
        name=name or f"Activity {activity_id}",
        description=f"{category} activity",
        category=category,
        duration_minutes=duration,
    )


def read_events(logs_dir, session_id):
    path = logs_dir / f"{session_id}.jsonl"
    if not path.exists():
        return []
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


@pytest.fixture
def logs_dir(tmp_path):
    return tmp_path / "logs"


@pytest.fixture(autouse=True)
def event_logger(logs_dir):
    logger = StructuredLogger(logs_dir)
    set_event_logger(logger)
    yield logger
    set_event_logger(None)


@pytest.fixture
def store():
    return EntityStore.with_default_catalog()


@pytest.fixture
def store_with_empty_park():
    parks, activities = load_default_catalog()
    parks.append(Park(
        id=EMPTY_PARK_ID,
        name="Empty Test Park",
        state="Nowhere",
        description="A park without any catalog activities.",
        best_months=("May",),
    ))
    return EntityStore(parks, activities)


@pytest.fixture
def llm():
    return ScriptedLLM()


@pytest.fixture
def app(store, llm, event_logger):
    return create_app(
        store=store,
        llm=llm,
        cache=InMemoryRecommendationCache(),
        weather=WeatherTool(api_key="fake_key"),
        event_logger=event_logger,
    )


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def trip(store):
    """A 3-day May trip to Grand Canyon (park 2, six activities)."""
    return store.create_trip_plan({"park_id": 2, "month": "May", "days": 3})
