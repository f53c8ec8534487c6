"""
modules/recommendation package — cached natural-language visit advice.
"""
from modules.recommendation.cache import (
    InMemoryRecommendationCache,
    RecommendationCache,
    RedisRecommendationCache,
    make_recommendation_cache,
)
from modules.recommendation.recommender import (
    APOLOGY_TEXT,
    RecommendationOutcome,
    RecommendationService,
)

__all__ = [
    "APOLOGY_TEXT",
    "InMemoryRecommendationCache",
    "RecommendationCache",
    "RecommendationOutcome",
    "RecommendationService",
    "RedisRecommendationCache",
    "make_recommendation_cache",
]
