#!/usr/bin/env python3
"""
Dimension Scorers - One pure function per comparison dimension.

Each scorer returns a DimensionResult (sub-score 0-100 plus verdict), or None
when the dimension does not apply (adopter expressed no preference).

- Ordinal dimensions decay with distance: exact = 100, one step = 60,
  two steps = 20; definitionally incompatible pairs score 0 / mismatch.
- Categorical filters (species, size, other pets) are all-or-nothing.
- Unknown pet attributes score config.unknown_score with verdict unknown.
"""

from typing import Callable, List, Optional, Sequence, Tuple
import logging

from core.config_loader import ScorerConfig
from core.matcher.models import (
    AdopterProfile, PetAttributes, DimensionResult, Dimension, Verdict,
    LivingSpace, EnergyLevel, ExperienceLevel, KidsAtHome, KidsCompatibility,
    CareLevel, Species, Size,
)

logger = logging.getLogger(__name__)

LIVING_SPACE_RANK = {
    LivingSpace.APARTMENT: 0,
    LivingSpace.HOUSE_NO_YARD: 1,
    LivingSpace.HOUSE_WITH_YARD: 2,
}

ENERGY_RANK = {
    EnergyLevel.LOW: 0,
    EnergyLevel.MEDIUM: 1,
    EnergyLevel.HIGH: 2,
    EnergyLevel.VERY_HIGH: 3,
}

EXPERIENCE_RANK = {
    ExperienceLevel.NONE: 0,
    ExperienceLevel.SOME: 1,
    ExperienceLevel.EXPERIENCED: 2,
}

KIDS_AT_HOME_RANK = {
    KidsAtHome.NONE: 0,
    KidsAtHome.OLDER: 1,
    KidsAtHome.YOUNG: 2,
}

KIDS_COMPATIBILITY_RANK = {
    KidsCompatibility.NONE: 0,
    KidsCompatibility.OLDER: 1,
    KidsCompatibility.ANY: 2,
}

CARE_RANK = {
    CareLevel.NONE: 0,
    CareLevel.LIMITED: 1,
    CareLevel.FULL: 2,
}


def _value(v) -> Optional[str]:
    return getattr(v, 'value', v) if v is not None else None


def _result(
    dimension: Dimension,
    sub_score: int,
    verdict: Verdict,
    config: ScorerConfig,
    adopter_value=None,
    pet_value=None
) -> DimensionResult:
    return DimensionResult(
        dimension=dimension,
        sub_score=sub_score,
        verdict=verdict,
        weight=config.weights.for_dimension(dimension.value),
        hard=dimension.value in config.hard_dimensions,
        adopter_value=_value(adopter_value),
        pet_value=_value(pet_value),
    )


def _unknown(dimension: Dimension, config: ScorerConfig, adopter_value=None) -> DimensionResult:
    return _result(dimension, config.unknown_score, Verdict.UNKNOWN, config, adopter_value, None)


def _ordinal(
    dimension: Dimension,
    distance: int,
    incompatible: bool,
    config: ScorerConfig,
    adopter_value,
    pet_value
) -> DimensionResult:
    """Score by ordinal distance; `incompatible` overrides to 0 / mismatch."""
    if incompatible or distance >= len(config.ordinal_step_scores):
        return _result(dimension, 0, Verdict.MISMATCH, config, adopter_value, pet_value)
    verdict = Verdict.MATCH if distance == 0 else Verdict.PARTIAL
    return _result(dimension, config.ordinal_step_scores[distance], verdict, config, adopter_value, pet_value)


def score_living_space(
    adopter_space: LivingSpace,
    pet_space: Optional[LivingSpace],
    config: ScorerConfig
) -> DimensionResult:
    """A home at least as roomy as the pet's ideal is a full match; an
    apartment for a pet that needs a yard is disqualifying."""
    if pet_space is None:
        return _unknown(Dimension.LIVING_SPACE, config, adopter_space)
    shortfall = max(0, LIVING_SPACE_RANK[pet_space] - LIVING_SPACE_RANK[adopter_space])
    return _ordinal(Dimension.LIVING_SPACE, shortfall, shortfall >= 2, config, adopter_space, pet_space)


def score_energy(
    adopter_tolerance: EnergyLevel,
    pet_energy: Optional[EnergyLevel],
    config: ScorerConfig
) -> DimensionResult:
    """Symmetric: a calm pet for an active household is a poor fit too."""
    if pet_energy is None:
        return _unknown(Dimension.ENERGY, config, adopter_tolerance)
    distance = abs(ENERGY_RANK[pet_energy] - ENERGY_RANK[adopter_tolerance])
    return _ordinal(Dimension.ENERGY, distance, distance >= 3, config, adopter_tolerance, pet_energy)


def score_experience(
    adopter_experience: ExperienceLevel,
    pet_needs: Optional[ExperienceLevel],
    config: ScorerConfig
) -> DimensionResult:
    if pet_needs is None:
        return _unknown(Dimension.EXPERIENCE, config, adopter_experience)
    shortfall = max(0, EXPERIENCE_RANK[pet_needs] - EXPERIENCE_RANK[adopter_experience])
    return _ordinal(Dimension.EXPERIENCE, shortfall, shortfall >= 2, config, adopter_experience, pet_needs)


def score_kids(
    kids_at_home: KidsAtHome,
    pet_kids: Optional[KidsCompatibility],
    config: ScorerConfig
) -> DimensionResult:
    if pet_kids is None:
        return _unknown(Dimension.KIDS, config, kids_at_home)
    incompatible = KIDS_AT_HOME_RANK[kids_at_home] > KIDS_COMPATIBILITY_RANK[pet_kids]
    return _ordinal(Dimension.KIDS, 0, incompatible, config, kids_at_home, pet_kids)


def score_special_care(
    capacity: CareLevel,
    pet_needs: Optional[CareLevel],
    config: ScorerConfig
) -> DimensionResult:
    if pet_needs is None:
        return _unknown(Dimension.SPECIAL_CARE, config, capacity)
    shortfall = max(0, CARE_RANK[pet_needs] - CARE_RANK[capacity])
    return _ordinal(Dimension.SPECIAL_CARE, shortfall, shortfall >= 2, config, capacity, pet_needs)


def _categorical(dimension: Dimension, preference, pet_value, config: ScorerConfig) -> Optional[DimensionResult]:
    if preference is None:
        return None
    if pet_value is None:
        return _unknown(dimension, config, preference)
    if preference == pet_value:
        return _result(dimension, 100, Verdict.MATCH, config, preference, pet_value)
    return _result(dimension, 0, Verdict.MISMATCH, config, preference, pet_value)


def score_species(
    preference: Optional[Species],
    pet_species: Optional[Species],
    config: ScorerConfig
) -> Optional[DimensionResult]:
    return _categorical(Dimension.SPECIES, preference, pet_species, config)


def score_size(
    preference: Optional[Size],
    pet_size: Optional[Size],
    config: ScorerConfig
) -> Optional[DimensionResult]:
    return _categorical(Dimension.SIZE, preference, pet_size, config)


def score_other_pets(
    has_cats: Optional[bool],
    pet_species: Optional[Species],
    cat_friendly: Optional[bool],
    config: ScorerConfig
) -> Optional[DimensionResult]:
    """Cats at home require a cat, or a pet rated cat-friendly."""
    if not has_cats:
        return None
    if pet_species == Species.CAT or cat_friendly is True:
        return _result(Dimension.OTHER_PETS, 100, Verdict.MATCH, config, 'cats', 'cat-friendly')
    if cat_friendly is False:
        return _result(Dimension.OTHER_PETS, 0, Verdict.MISMATCH, config, 'cats', 'not-cat-friendly')
    return _unknown(Dimension.OTHER_PETS, config, 'cats')


DimensionScorer = Callable[[AdopterProfile, PetAttributes, ScorerConfig], Optional[DimensionResult]]

# Canonical order; results are always produced in this order
DIMENSION_SCORERS: Sequence[Tuple[Dimension, DimensionScorer]] = (
    (Dimension.LIVING_SPACE,
     lambda a, p, c: score_living_space(a.living_space, p.ideal_living_space, c)),
    (Dimension.ENERGY,
     lambda a, p, c: score_energy(a.energy_tolerance, p.energy_level, c)),
    (Dimension.EXPERIENCE,
     lambda a, p, c: score_experience(a.experience_level, p.experience_needed, c)),
    (Dimension.KIDS,
     lambda a, p, c: score_kids(a.kids_at_home, p.kids_compatibility, c)),
    (Dimension.SPECIAL_CARE,
     lambda a, p, c: score_special_care(a.special_care_capacity, p.special_care_needs, c)),
    (Dimension.SPECIES,
     lambda a, p, c: score_species(a.species_preference, p.species, c)),
    (Dimension.SIZE,
     lambda a, p, c: score_size(a.size_preference, p.size, c)),
    (Dimension.OTHER_PETS,
     lambda a, p, c: score_other_pets(a.has_cats, p.species, p.cat_friendly, c)),
)


def score_dimensions(
    profile: AdopterProfile,
    pet: PetAttributes,
    config: ScorerConfig
) -> List[DimensionResult]:
    """
    Run every dimension scorer for one (adopter, pet) pair.

    Raises KeyError / TypeError if the pet carries values outside the
    canonical enums (e.g. constructed without the normalizer); the ranker
    falls back to unknown_dimensions in that case.
    """
    results = []
    for _dimension, scorer in DIMENSION_SCORERS:
        result = scorer(profile, pet, config)
        if result is not None:
            results.append(result)
    return results


def unknown_dimensions(profile: AdopterProfile, pet_id: str, config: ScorerConfig) -> List[DimensionResult]:
    """Every applicable dimension scored as unknown, for pets whose data could not be read."""
    return score_dimensions(profile, PetAttributes(pet_id=pet_id), config)
