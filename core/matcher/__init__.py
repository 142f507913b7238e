"""Matcher Module - Attribute normalization and per-dimension scoring."""
from core.matcher.models import (
    AdopterProfile, PetAttributes, PetSummary, DimensionResult, Dimension, Verdict,
    LivingSpace, EnergyLevel, ExperienceLevel, KidsAtHome, KidsCompatibility,
    CareLevel, Species, Size, AdoptionStatus
)
from core.matcher.normalizer import normalize_adopter, normalize_pet
from core.matcher.dimensions import score_dimensions, unknown_dimensions

__all__ = [
    'normalize_adopter', 'normalize_pet', 'score_dimensions', 'unknown_dimensions',
    'AdopterProfile', 'PetAttributes', 'PetSummary', 'DimensionResult', 'Dimension', 'Verdict',
    'LivingSpace', 'EnergyLevel', 'ExperienceLevel', 'KidsAtHome', 'KidsCompatibility',
    'CareLevel', 'Species', 'Size', 'AdoptionStatus'
]
