#!/usr/bin/env python3
"""
Explainer - Render the most salient dimension results as short reasons.

Ordering:
1. Hard mismatches that disqualified the pet, in canonical dimension order
2. Remaining informative dimensions by impact |sub_score - 100| descending
   (ties: heavier weight first, then canonical order), up to max_reasons
3. Unknown dimensions only when nothing else is informative
4. "Not enough information to compare" when nothing was scored

Output depends only on the dimension results, so identical inputs always
produce identical reasons.
"""

from typing import Dict, List, Optional, Sequence
import logging

from core.config_loader import ScorerConfig
from core.matcher.models import DimensionResult, Dimension, Verdict
from core.scorer.models import Label

logger = logging.getLogger(__name__)

NO_INFORMATION_REASON = "Not enough information to compare"
INCOMPLETE_DATA_REASON = "Listing data is incomplete; some details could not be compared"

# mismatch / positive / negative / unknown phrasing per dimension
PHRASES: Dict[Dimension, Dict[str, str]] = {
    Dimension.LIVING_SPACE: {
        'mismatch': "Requires more space than your home offers",
        'positive': "Your home suits this pet's space needs",
        'negative': "May need more space than your home offers",
        'unknown': "Shelter has not listed this pet's space needs",
    },
    Dimension.ENERGY: {
        'mismatch': "Energy level is far from your lifestyle",
        'positive': "Energy level matches your lifestyle",
        'negative': "Energy level differs from your lifestyle",
        'unknown': "Shelter has not listed this pet's energy level",
    },
    Dimension.EXPERIENCE: {
        'mismatch': "Needs a much more experienced owner",
        'positive': "Your experience fits this pet's needs",
        'negative': "Would benefit from a more experienced owner",
        'unknown': "Shelter has not listed the experience this pet needs",
    },
    Dimension.KIDS: {
        'mismatch': "Not suited to living with your children",
        'positive': "Fits your household's situation with children",
        'negative': "May need supervision around your children",
        'unknown': "Shelter has not said how this pet does with children",
    },
    Dimension.SPECIAL_CARE: {
        'mismatch': "Needs more special care than you can provide",
        'positive': "Care needs fit what you can provide",
        'negative': "Care needs may stretch what you can provide",
        'unknown': "Shelter has not listed this pet's care needs",
    },
    Dimension.SPECIES: {
        'mismatch': "Not the species you are looking for",
        'positive': "Matches your preferred species",
        'negative': "Not the species you are looking for",
        'unknown': "Shelter has not listed this pet's species",
    },
    Dimension.SIZE: {
        'mismatch': "Not the size you are looking for",
        'positive': "Matches your preferred size",
        'negative': "Not the size you are looking for",
        'unknown': "Shelter has not listed this pet's size",
    },
    Dimension.OTHER_PETS: {
        'mismatch': "Not friendly with cats",
        'positive': "Gets along with cats",
        'negative': "May not get along with cats",
        'unknown': "Shelter has not said whether this pet gets along with cats",
    },
}


def _impact_key(result: DimensionResult):
    return (-(100 - result.sub_score), -result.weight, result.dimension.order)


def phrase_for(result: DimensionResult, config: ScorerConfig) -> str:
    phrases = PHRASES[result.dimension]
    if result.verdict == Verdict.UNKNOWN:
        return phrases['unknown']
    if result.verdict == Verdict.MISMATCH:
        return phrases['mismatch']
    if result.sub_score >= config.positive_reason_min:
        return phrases['positive']
    return phrases['negative']


def explain(
    results: Sequence[DimensionResult],
    label: Optional[Label],
    config: ScorerConfig
) -> List[str]:
    """
    Produce a non-empty, ordered list of reasons (highest impact first).

    Args:
        results: Dimension results for one (adopter, pet) pair
        label: Label produced by the aggregator
        config: ScorerConfig (max_reasons, positive_reason_min)

    Returns:
        List of short natural-language reasons
    """
    if not results:
        return [NO_INFORMATION_REASON]

    hard = sorted((r for r in results if r.is_hard_mismatch), key=lambda r: r.dimension.order)
    reasons = [phrase_for(r, config) for r in hard]

    informative = sorted(
        (r for r in results if r.is_informative and not r.is_hard_mismatch),
        key=_impact_key
    )
    if not informative and not hard:
        # Only unknowns left: say what the shelter did not tell us
        informative = sorted(results, key=lambda r: (-r.weight, r.dimension.order))

    remaining = max(0, config.max_reasons - len(reasons))
    for result in informative[:remaining]:
        phrase = phrase_for(result, config)
        if phrase not in reasons:
            reasons.append(phrase)

    if not reasons:
        reasons.append(NO_INFORMATION_REASON)

    logger.debug(f"Explained {label.value if label else 'unlabelled'} score with {len(reasons)} reason(s)")
    return reasons


def risks(results: Sequence[DimensionResult], config: ScorerConfig) -> List[str]:
    """Concerns worth raising with the adopter: every partial or mismatched dimension."""
    flagged = sorted(
        (r for r in results if r.verdict in (Verdict.PARTIAL, Verdict.MISMATCH)),
        key=_impact_key
    )
    return [phrase_for(r, config) for r in flagged]


def missing_info(results: Sequence[DimensionResult]) -> List[str]:
    """Dimensions the shelter did not provide data for, in canonical order."""
    return [r.dimension.value for r in results if r.verdict == Verdict.UNKNOWN]
