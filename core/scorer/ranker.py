#!/usr/bin/env python3
"""
Ranker - Score every eligible pet for one adopter and order the results.

Per-pet scoring is pure, so it fans out over a thread pool and the results
are sorted afterwards; completion order never affects the output.

Ordering: overall_score desc, listing recency (newer first), pet_id asc.
A pet whose scoring raises is kept, scored with every dimension unknown and
a reason noting incomplete data.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Any, Iterable, List, Optional, Sequence
import logging

from core.config_loader import ScorerConfig, RankerConfig
from core.exceptions import PetDataError
from core.matcher.models import AdopterProfile, PetAttributes
from core.matcher.dimensions import score_dimensions, unknown_dimensions
from core.matcher.normalizer import normalize_pet
from core.scorer.aggregator import aggregate
from core.scorer import explainer
from core.scorer.models import CompatibilityScore, RecommendationSet, ranking_key

logger = logging.getLogger(__name__)


def _build_score(
    profile: AdopterProfile,
    pet: PetAttributes,
    results,
    config: ScorerConfig,
    computed_at: Optional[datetime],
    extra_reasons: Sequence[str] = ()
) -> CompatibilityScore:
    overall_score, label = aggregate(results, config)
    reasons = list(extra_reasons) + explainer.explain(results, label, config)
    return CompatibilityScore(
        adopter_id=profile.adopter_id,
        pet_id=pet.pet_id,
        overall_score=overall_score,
        label=label,
        reasons=tuple(reasons),
        computed_at=computed_at,
        profile_version=profile.version,
        listed_at=pet.listed_at,
        pet=pet.summary(),
        risks=tuple(explainer.risks(results, config)),
        missing_info=tuple(explainer.missing_info(results)),
        dimensions=tuple(results),
    )


def score_pet(
    profile: AdopterProfile,
    pet: PetAttributes,
    config: ScorerConfig,
    computed_at: Optional[datetime] = None
) -> CompatibilityScore:
    """
    Score one pet for one adopter profile.

    Shared by bulk ranking and on-demand lookups so both paths produce the
    same result for the same inputs.
    """
    try:
        results = score_dimensions(profile, pet, config)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning(f"Scoring failed for pet {pet.pet_id}, falling back to unknown dimensions: {e!r}")
        results = unknown_dimensions(profile, pet.pet_id, config)
        return _build_score(
            profile, pet, results, config, computed_at,
            extra_reasons=(explainer.INCOMPLETE_DATA_REASON,)
        )
    return _build_score(profile, pet, results, config, computed_at)


def _coerce_pets(pets: Iterable[Any]) -> List[PetAttributes]:
    """Normalize raw listings; listings without an id are skipped."""
    coerced = []
    for raw in pets:
        try:
            coerced.append(normalize_pet(raw))
        except PetDataError as e:
            logger.warning(f"Skipping pet listing: {e}")
    return coerced


def is_eligible(pet: PetAttributes, ranker_config: RankerConfig) -> bool:
    """Open for adoption: not archived, and every status the listing gives is eligible."""
    if pet.archived:
        return False
    statuses = pet.statuses
    if not statuses:
        return False
    return all(status.value in ranker_config.eligible_statuses for status in statuses)



def rank(
    profile: AdopterProfile,
    pets: Iterable[Any],
    scorer_config: ScorerConfig,
    ranker_config: RankerConfig,
    computed_at: Optional[datetime] = None
) -> RecommendationSet:
    """
    Build the ranked RecommendationSet for a profile.

    Args:
        profile: Normalized adopter profile
        pets: PetAttributes or raw listing mappings
        scorer_config: ScorerConfig for dimension scoring and aggregation
        ranker_config: RankerConfig (worker pool size, eligible statuses)
        computed_at: Timestamp stamped on every score in this run

    Returns:
        RecommendationSet; empty when no pet is eligible
    """
    candidates = [p for p in _coerce_pets(pets) if is_eligible(p, ranker_config)]

    # Duplicate listings keep the first occurrence
    seen = set()
    eligible = []
    for pet in candidates:
        if pet.pet_id in seen:
            logger.warning(f"Duplicate pet listing {pet.pet_id} ignored")
            continue
        seen.add(pet.pet_id)
        eligible.append(pet)

    if not eligible:
        logger.info(f"No eligible pets for adopter {profile.adopter_id}")
        return RecommendationSet(adopter_id=profile.adopter_id, profile=profile, computed_at=computed_at)

    workers = min(len(eligible), ranker_config.max_workers)
    if workers <= 1:
        scores = [score_pet(profile, pet, scorer_config, computed_at) for pet in eligible]
    else:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pet-scorer") as executor:
            scores = list(executor.map(
                lambda pet: score_pet(profile, pet, scorer_config, computed_at),
                eligible
            ))

    scores.sort(key=ranking_key)

    result = RecommendationSet(
        adopter_id=profile.adopter_id,
        profile=profile,
        scores=tuple(scores),
        computed_at=computed_at
    )
    logger.info(
        f"Ranked {len(result)} pets for adopter {profile.adopter_id} "
        f"(profile v{profile.version}): {len(result.matching)} matching, "
        f"{len(result.not_matching)} not matching"
    )
    return result
