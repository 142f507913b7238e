#!/usr/bin/env python3
"""
Matching Service - Entry points of the compatibility engine.

Wires the pipeline together for the surrounding application:
- submit_questionnaire: validate answers, invalidate the previous set, rank, cache
- rank: rank candidate pets for an already-normalized profile and cache the set
- get_recommendations: cached ranked set for an adopter
- get_score: O(1) single-pet lookup, scoring on demand for pets added later
- invalidate: drop an adopter's set ahead of a recompute

Every write to the cache carries the profile version it was computed from;
results computed from a superseded questionnaire are discarded by the cache
instead of being cancelled.
"""

from datetime import datetime
from typing import Any, Callable, Iterable, Mapping, Optional
import logging
import time

from core.cache.recommendation_cache import RecommendationCache, InMemoryRecommendationCache
from core.config_loader import MatchingConfig
from core.matcher.models import AdopterProfile
from core.matcher.normalizer import normalize_adopter, normalize_pet
from core.scorer.models import CompatibilityScore, RecommendationSet
from core.scorer import ranker
from core.utils import utc_now

logger = logging.getLogger(__name__)

PetLookup = Callable[[str], Optional[Any]]


class MatchingService:
    """
    Compatibility engine facade.

    Holds no per-adopter state of its own: the cache is the only shared
    mutable resource, so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        config: Optional[MatchingConfig] = None,
        cache: Optional[RecommendationCache] = None,
        clock: Callable[[], datetime] = utc_now,
        pet_lookup: Optional[PetLookup] = None
    ):
        """
        Args:
            config: MatchingConfig (defaults to built-in weights and thresholds)
            cache: RecommendationCache backend (defaults to in-memory)
            clock: Timestamp source for computed_at
            pet_lookup: Optional callable returning a pet listing by id, used
                when get_score needs a pet that is not in the cached set
        """
        self.config = config or MatchingConfig()
        self.cache = cache if cache is not None else InMemoryRecommendationCache()
        self.clock = clock
        self.pet_lookup = pet_lookup

    def submit_questionnaire(
        self,
        adopter_id: str,
        raw_answers: Mapping[str, Any],
        pets: Iterable[Any]
    ) -> RecommendationSet:
        """
        Handle a (re)submitted questionnaire.

        Answers are validated before anything else, so a rejected retake
        leaves the previous recommendations in place.

        Raises:
            ValidationError: if the answers are incomplete or invalid
        """
        profile = normalize_adopter(raw_answers, adopter_id=adopter_id)
        version = self.cache.invalidate(profile.adopter_id)
        return self._rank_and_store(profile.with_version(version), pets)

    def rank(self, profile: AdopterProfile, pets: Iterable[Any]) -> RecommendationSet:
        """
        Rank pets for a profile validated upstream and cache the result.

        A profile with version 0 has never been registered with the cache and
        is treated as a new submission (the previous set is invalidated).
        """
        if profile.version <= 0:
            profile = profile.with_version(self.cache.invalidate(profile.adopter_id))
        return self._rank_and_store(profile, pets)

    def _rank_and_store(self, profile: AdopterProfile, pets: Iterable[Any]) -> RecommendationSet:
        start = time.monotonic()
        recommendation_set = ranker.rank(
            profile,
            pets,
            self.config.scorer,
            self.config.ranker,
            computed_at=self.clock()
        )
        stored = self.cache.put(recommendation_set)
        latency_ms = int((time.monotonic() - start) * 1000)

        if stored:
            logger.info(
                f"Recommendations ready for adopter {profile.adopter_id}: "
                f"{len(recommendation_set)} pets ranked in {latency_ms}ms"
            )
        else:
            logger.info(
                f"Recommendations for adopter {profile.adopter_id} v{profile.version} "
                f"superseded by a newer questionnaire; result not cached"
            )
        return recommendation_set

    def get_recommendations(self, adopter_id: str) -> Optional[RecommendationSet]:
        return self.cache.get(adopter_id)

    def get_score(
        self,
        adopter_id: str,
        pet_id: str,
        pet: Optional[Any] = None
    ) -> Optional[CompatibilityScore]:
        """
        Look up one pet's score for an adopter.

        When the adopter has a cached set but the pet is not in it (e.g. the
        listing was created afterwards), the pet is scored on demand against
        the cached profile and merged into the set, so later lookups are
        plain cache hits. Adoption status is not checked here: a detail page
        may show the score of a pet that is no longer available.

        Args:
            adopter_id: Adopter identifier
            pet_id: Pet identifier
            pet: Optional listing (PetAttributes or raw mapping) for on-demand scoring

        Returns:
            CompatibilityScore, or None if the adopter has no current set or
            the pet cannot be found
        """
        recommendation_set = self.cache.get(adopter_id)
        if recommendation_set is None or recommendation_set.profile is None:
            return None

        score = recommendation_set.get(pet_id)
        if score is not None:
            return score

        if pet is None and self.pet_lookup is not None:
            pet = self.pet_lookup(pet_id)
        if pet is None:
            logger.debug(f"No listing available to score pet {pet_id} on demand")
            return None

        pet_attributes = normalize_pet(pet)
        if pet_attributes.pet_id != str(pet_id):
            raise ValueError(f"Listing id {pet_attributes.pet_id} does not match requested pet {pet_id}")

        # Score against the cached snapshot only; never mix in a newer profile
        profile = recommendation_set.profile
        score = ranker.score_pet(profile, pet_attributes, self.config.scorer, computed_at=self.clock())
        self.cache.merge_score(adopter_id, profile.version, score)
        return score

    def invalidate(self, adopter_id: str) -> int:
        """Drop the adopter's recommendations; returns the new profile version."""
        return self.cache.invalidate(adopter_id)
