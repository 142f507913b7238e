#!/usr/bin/env python3
"""
Aggregator - Combine dimension results into one overall score and label.

Formula:
- If any hard dimension is a mismatch: overall_score = 0, NOT_SUITABLE (early exit)
- Otherwise: overall_score = round(sum(sub_score * weight) / sum(weight))
- Label by thresholds: SUITABLE >= suitable_min, CONDITIONAL >= conditional_min
- Nothing scored at all: 100, CONDITIONAL (neutral, not overstated)
"""

from typing import Sequence, Tuple

from core.config_loader import ScorerConfig, LabelThresholds
from core.matcher.models import DimensionResult
from core.scorer.models import Label


def label_for_score(overall_score: int, thresholds: LabelThresholds) -> Label:
    if overall_score >= thresholds.suitable_min:
        return Label.SUITABLE
    if overall_score >= thresholds.conditional_min:
        return Label.CONDITIONAL
    return Label.NOT_SUITABLE


def _round_half_up(value: float) -> int:
    # round() uses banker's rounding; 72.5 must become 73
    return int(value + 0.5)


def aggregate(
    results: Sequence[DimensionResult],
    config: ScorerConfig
) -> Tuple[int, Label]:
    """
    Aggregate dimension results into (overall_score, label).

    Args:
        results: Non-skipped dimension results for one (adopter, pet) pair
        config: ScorerConfig with thresholds

    Returns:
        Tuple of (overall_score 0-100, label)
    """
    if any(r.is_hard_mismatch for r in results):
        return 0, Label.NOT_SUITABLE

    total_weight = sum(r.weight for r in results)
    if not results or total_weight <= 0:
        return 100, Label.CONDITIONAL

    raw_score = sum(r.sub_score * r.weight for r in results) / total_weight
    overall_score = max(0, min(100, _round_half_up(raw_score)))
    return overall_score, label_for_score(overall_score, config.thresholds)

