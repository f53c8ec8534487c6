"""
api/routes/recommendations.py
-----------------------------
POST /api/recommendations  {parkId, month, preferences} → {recommendation}

Identical (parkId, month, trimmed preferences) requests are answered
from the recommendation cache without a new generation call.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

from api.dependencies import get_recommendation_service
from modules.recommendation import RecommendationService

router = APIRouter()


class RecommendationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    park_id: Optional[StrictInt] = Field(None, alias="parkId")
    month: Optional[StrictStr] = None
    preferences: Optional[StrictStr] = None


@router.post("", summary="Personalised visit recommendation")
def recommend(
    req: RecommendationRequest,
    service: RecommendationService = Depends(get_recommendation_service),
) -> dict:
    return service.recommend(req.model_dump(by_alias=True)).to_dict()
