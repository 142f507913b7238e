#!/usr/bin/env python3
"""
Matchmaking endpoints - rank pets for an adopter and look up single scores.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Body, Depends

from ..dependencies import get_matchmaking_service
from ..services.matchmaking_service import MatchmakingService
from ..models.requests import RecommendRequest, ScoreRequest
from ..models.responses import (
    RecommendationsResponse,
    ScoreResponse,
    InvalidateResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/matchmaking", tags=["matchmaking"])


@router.post("/{adopter_id}/recommend", response_model=RecommendationsResponse)
def recommend(
    adopter_id: str,
    request: RecommendRequest,
    service: MatchmakingService = Depends(get_matchmaking_service)
):
    """
    Submit or retake the questionnaire and rank the supplied pets.

    Previous recommendations for the adopter are invalidated before the
    new set is computed. Invalid answers return 422 with one message per field.
    """
    return service.recommend(adopter_id, request.answers, request.pets)


@router.get("/{adopter_id}", response_model=RecommendationsResponse)
def get_recommendations(
    adopter_id: str,
    service: MatchmakingService = Depends(get_matchmaking_service)
):
    """
    Get the adopter's current ranked recommendations.
    """
    return service.get_recommendations(adopter_id)


@router.get("/{adopter_id}/pets/{pet_id}", response_model=ScoreResponse)
def get_score(
    adopter_id: str,
    pet_id: str,
    service: MatchmakingService = Depends(get_matchmaking_service)
):
    """
    Get one pet's compatibility score from the cached recommendations.
    """
    return service.get_score(adopter_id, pet_id)


@router.post("/{adopter_id}/pets/{pet_id}", response_model=ScoreResponse)
def score_pet(
    adopter_id: str,
    pet_id: str,
    request: Optional[ScoreRequest] = Body(default=None),
    service: MatchmakingService = Depends(get_matchmaking_service)
):
    """
    Get one pet's score, scoring the supplied listing on demand if the pet
    is not in the cached recommendations yet.
    """
    pet = request.pet if request else None
    return service.get_score(adopter_id, pet_id, pet=pet)


@router.delete("/{adopter_id}", response_model=InvalidateResponse)
def invalidate(
    adopter_id: str,
    service: MatchmakingService = Depends(get_matchmaking_service)
):
    """
    Invalidate the adopter's recommendations (e.g. when a retake starts).
    """
    return service.invalidate(adopter_id)
