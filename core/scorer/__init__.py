#!/usr/bin/env python3
"""
Scoring Module - Rule-based compatibility scoring and ranking.

Public API:
- rank / score_pet: Ranked results for an adopter, or one pet's score
- CompatibilityScore / RecommendationSet: Result records
- Label: SUITABLE / CONDITIONAL / NOT_SUITABLE

Split into focused, single-responsibility modules:

- models.py: Data structures (CompatibilityScore, RecommendationSet)
- aggregator.py: Weighted average with the hard-mismatch override
- explainer.py: Natural-language reasons, risks and missing info
- ranker.py: Parallel per-pet scoring, ordering and partitioning
"""

from core.scorer.models import CompatibilityScore, RecommendationSet, Label
from core.scorer.aggregator import aggregate
from core.scorer.explainer import explain
from core.scorer.ranker import rank, score_pet

__all__ = [
    'rank', 'score_pet', 'aggregate', 'explain',
    'CompatibilityScore', 'RecommendationSet', 'Label'
]
