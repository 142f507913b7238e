#!/usr/bin/env python3
"""
Matchmaking service - maps engine results onto API responses.
"""

import logging
from typing import Any, Dict, List, Optional

from core.matching_service import MatchingService
from core.scorer.models import CompatibilityScore, RecommendationSet
from ..models.responses import (
    CompatibilitySummary,
    DimensionDetail,
    PetDetail,
    RecommendationsResponse,
    ScoreResponse,
    InvalidateResponse
)
from ..exceptions import (
    RecommendationsNotFoundException,
    ScoreNotFoundException,
    InvalidListingException
)

logger = logging.getLogger(__name__)


class MatchmakingService:
    """Service for questionnaire submissions and compatibility lookups."""

    def __init__(self, engine: MatchingService):
        self.engine = engine

    def recommend(
        self,
        adopter_id: str,
        answers: Dict[str, Any],
        pets: List[Dict[str, Any]]
    ) -> RecommendationsResponse:
        """
        Submit (or retake) the questionnaire and rank the supplied pets.

        Raises:
            ValidationError: if the answers are invalid (mapped to 422).
        """
        recommendation_set = self.engine.submit_questionnaire(adopter_id, answers, pets)
        return self._to_recommendations_response(recommendation_set)

    def get_recommendations(self, adopter_id: str) -> RecommendationsResponse:
        recommendation_set = self.engine.get_recommendations(adopter_id)
        if recommendation_set is None:
            raise RecommendationsNotFoundException(
                f"No current recommendations for adopter {adopter_id}"
            )
        return self._to_recommendations_response(recommendation_set)

    def get_score(
        self,
        adopter_id: str,
        pet_id: str,
        pet: Optional[Dict[str, Any]] = None
    ) -> ScoreResponse:
        try:
            score = self.engine.get_score(adopter_id, pet_id, pet=pet)
        except ValueError as e:
            raise InvalidListingException(str(e)) from e
        if score is None:
            raise ScoreNotFoundException(
                f"No compatibility score for pet {pet_id} and adopter {adopter_id}"
            )
        return ScoreResponse(success=True, score=self._to_summary(score))

    def invalidate(self, adopter_id: str) -> InvalidateResponse:
        version = self.engine.invalidate(adopter_id)
        return InvalidateResponse(success=True, adopter_id=adopter_id, profile_version=version)

    def _to_recommendations_response(self, recommendation_set: RecommendationSet) -> RecommendationsResponse:
        profile = recommendation_set.profile
        return RecommendationsResponse(
            success=True,
            adopter_id=recommendation_set.adopter_id,
            profile_version=recommendation_set.profile_version,
            profile_fingerprint=profile.fingerprint if profile else None,
            count=len(recommendation_set),
            computed_at=recommendation_set.computed_at.isoformat() if recommendation_set.computed_at else None,
            matching=[self._to_summary(s) for s in recommendation_set.matching],
            not_matching=[self._to_summary(s) for s in recommendation_set.not_matching]
        )

    @staticmethod
    def _to_summary(score: CompatibilityScore) -> CompatibilitySummary:
        data = score.to_dict()
        data['dimensions'] = [DimensionDetail(**d) for d in data['dimensions']]
        data['pet'] = PetDetail(**data['pet']) if data['pet'] else None
        return CompatibilitySummary(**data)
