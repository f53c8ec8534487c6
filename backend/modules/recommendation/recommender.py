"""
modules/recommendation/recommender.py
--------------------------------------
Natural-language visit recommendations for one park and month.

Flow for POST /api/recommendations:
    validate body → park lookup (404) → cache lookup
        hit  → stored text, no generation call
        miss → generate_recommendation() → cache.create() → text

A generation failure degrades to APOLOGY_TEXT. The apology is returned
but never cached, so the same fingerprint can still get a real answer
on a later request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from db.entity_store import EntityStore
from errors import GenerationError, NotFoundError
from llm import GenerationCapability
from modules.observability.logger import StructuredLogger, get_event_logger
from modules.recommendation.cache import RecommendationCache
from modules.validation import validate_recommendation_request
from schemas.catalog import Park

logger = logging.getLogger(__name__)

APOLOGY_TEXT = (
    "Sorry, I couldn't generate a recommendation at this time. Please try again later."
)
SESSION_ID = "recommendations"

_SYSTEM_INSTRUCTION = (
    "You are an expert national parks guide who gives personalized, practical "
    "advice to visitors. You are concise, friendly, and knowledgeable about "
    "outdoor activities, wildlife, and seasonal conditions at US National Parks."
)


def build_recommendation_prompt(park: Park, month: str, preferences: str) -> str:
    return f"""
You are a National Park expert and travel advisor. You're helping a visitor plan their trip to {park.name} in {month}.

Park Information:
- Name: {park.name}
- Location: {park.state}
- Description: {park.description}
- Best months to visit: {", ".join(park.best_months) or "All year"}
- Available activities: {", ".join(park.activities) or "Various activities"}
- Weather in {month}: {park.weather_for(month).describe()}
- Highlights: {", ".join(park.highlights) or "Various highlights"}
- Monthly Notes: {park.notes_for(month)}

The visitor has shared the following preferences and interests:
"{preferences}"

Please provide a personalized recommendation for their visit to {park.name} in {month}, including:
1. A brief introduction addressing them personally
2. 2-3 must-see attractions or viewpoints based on their specific interests
3. Best times of day for certain activities considering the {month} weather
4. Specific trails or experiences that match their preferences
5. Practical tips that would enhance their experience (clothing, gear, timing)
6. Any special considerations for this park during {month}

Format your response in a conversational, friendly tone. Break up text into small paragraphs. Use about 200-250 words total.
"""


def generate_recommendation(
    llm: GenerationCapability,
    park: Park,
    month: str,
    preferences: str,
) -> Optional[str]:
    """Generated text, or None when the capability failed or answered empty."""
    try:
        text = llm.generate(
            build_recommendation_prompt(park, month, preferences),
            expect_json=False,
            system_instruction=_SYSTEM_INSTRUCTION,
        )
    except GenerationError as exc:
        logger.warning("Recommendation for park %s / %s failed: %s", park.id, month, exc)
        return None
    if not isinstance(text, str) or not text.strip():
        logger.warning("Recommendation for park %s / %s came back empty", park.id, month)
        return None
    return text.strip()


@dataclass
class RecommendationOutcome:
    recommendation: str
    cached: bool = False         # served from the cache
    degraded: bool = False       # apology text, nothing stored

    def to_dict(self) -> dict:
        return {"recommendation": self.recommendation}


class RecommendationService:
    """
    Usage:
        service = RecommendationService(store, make_recommendation_cache(), get_llm_client())
        service.recommend({"parkId": 1, "month": "May", "preferences": "waterfalls"})
    """

    def __init__(
        self,
        store: EntityStore,
        cache: RecommendationCache,
        llm: GenerationCapability,
        event_logger: StructuredLogger | None = None,
    ) -> None:
        self._store = store
        self._cache = cache
        self._llm = llm
        self._event_logger = event_logger

    def recommend(self, body: dict[str, Any]) -> RecommendationOutcome:
        validate_recommendation_request(body).raise_if_invalid()

        park = self._store.get_park_by_id(body["parkId"])
        if park is None:
            raise NotFoundError("Park not found")

        month = body["month"]
        preferences = body["preferences"].strip()

        cached = self._cache.get(park.id, month, preferences)
        self._log("RECOMMENDATION_CACHE", {
            "park_id": park.id,
            "month":   month,
            "hit":     cached is not None,
        })
        if cached is not None:
            logger.debug("Recommendation cache hit: park=%s month=%s", park.id, month)
            return RecommendationOutcome(cached.recommendation, cached=True)

        text = generate_recommendation(self._llm, park, month, preferences)
        if text is None:
            self._log("RECOMMENDATION_GENERATED", {
                "park_id": park.id, "month": month, "degraded": True,
            })
            return RecommendationOutcome(APOLOGY_TEXT, degraded=True)

        stored = self._cache.create(park.id, month, preferences, text)
        self._log("RECOMMENDATION_GENERATED", {
            "park_id":           park.id,
            "month":             month,
            "degraded":          False,
            "recommendation_id": stored.id,
        })
        return RecommendationOutcome(stored.recommendation)

    def _log(self, event_type: str, payload: dict) -> None:
        (self._event_logger or get_event_logger()).log(SESSION_ID, event_type, payload)
