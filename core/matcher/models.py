#!/usr/bin/env python3
"""
Matcher Models - Canonical adopter and pet records plus per-dimension results.

Pet attributes the shelter did not provide (or provided in an unrecognised
form) are stored as None and score as "unknown".
"""

from dataclasses import dataclass, asdict, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class LivingSpace(str, Enum):
    APARTMENT = "apartment"
    HOUSE_NO_YARD = "house-no-yard"
    HOUSE_WITH_YARD = "house-with-yard"


class EnergyLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very-high"  # pets only


class ExperienceLevel(str, Enum):
    NONE = "none"
    SOME = "some"
    EXPERIENCED = "experienced"


class KidsAtHome(str, Enum):
    NONE = "none"
    OLDER = "older"
    YOUNG = "young"


class KidsCompatibility(str, Enum):
    """Which children a pet is rated as safe around."""
    NONE = "none"
    OLDER = "older"
    ANY = "any"


class CareLevel(str, Enum):
    NONE = "none"
    LIMITED = "limited"
    FULL = "full"


class Species(str, Enum):
    DOG = "dog"
    CAT = "cat"
    RABBIT = "rabbit"
    BIRD = "bird"
    OTHER = "other"


class Size(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class AdoptionStatus(str, Enum):
    AVAILABLE = "available"
    PENDING = "pending"
    ADOPTED = "adopted"
    OTHER = "other"  # any status word not listed above


class Verdict(str, Enum):
    MATCH = "match"
    PARTIAL = "partial"
    MISMATCH = "mismatch"
    UNKNOWN = "unknown"


class Dimension(str, Enum):
    """Comparison dimensions, in canonical order (used for tie-breaks)."""
    LIVING_SPACE = "living_space"
    ENERGY = "energy"
    EXPERIENCE = "experience"
    KIDS = "kids"
    SPECIAL_CARE = "special_care"
    SPECIES = "species"
    SIZE = "size"
    OTHER_PETS = "other_pets"

    @property
    def order(self) -> int:
        return _DIMENSION_ORDER[self]


_DIMENSION_ORDER = {d: i for i, d in enumerate(Dimension)}


def _enum_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


@dataclass(frozen=True)
class AdopterProfile:
    """Canonical questionnaire answers for one submission.

    Superseded on retake, never edited: `version` is assigned by the
    recommendation cache when the previous submission is invalidated.
    """
    adopter_id: str
    living_space: LivingSpace
    energy_tolerance: EnergyLevel
    experience_level: ExperienceLevel
    kids_at_home: KidsAtHome
    special_care_capacity: CareLevel

    species_preference: Optional[Species] = None
    size_preference: Optional[Size] = None
    has_cats: Optional[bool] = None

    version: int = 0
    fingerprint: str = ""

    def with_version(self, version: int) -> 'AdopterProfile':
        return replace(self, version=version)

    def to_dict(self) -> Dict[str, Any]:
        return {k: _enum_value(v) for k, v in asdict(self).items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AdopterProfile':
        """Rebuild a profile serialized with to_dict (no re-validation)."""
        species = data.get('species_preference')
        size = data.get('size_preference')
        return cls(
            adopter_id=data['adopter_id'],
            living_space=LivingSpace(data['living_space']),
            energy_tolerance=EnergyLevel(data['energy_tolerance']),
            experience_level=ExperienceLevel(data['experience_level']),
            kids_at_home=KidsAtHome(data['kids_at_home']),
            special_care_capacity=CareLevel(data['special_care_capacity']),
            species_preference=Species(species) if species else None,
            size_preference=Size(size) if size else None,
            has_cats=data.get('has_cats'),
            version=int(data.get('version', 0)),
            fingerprint=data.get('fingerprint', ''),
        )


@dataclass(frozen=True)
class PetSummary:
    """What a result card shows about the pet."""
    pet_id: str
    name: Optional[str] = None
    species: Optional[Species] = None
    size: Optional[Size] = None
    breed: Optional[str] = None
    image: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: _enum_value(v) for k, v in asdict(self).items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PetSummary':
        species = data.get('species')
        size = data.get('size')
        return cls(
            pet_id=data['pet_id'],
            name=data.get('name'),
            species=Species(species) if species else None,
            size=Size(size) if size else None,
            breed=data.get('breed'),
            image=data.get('image'),
        )


@dataclass(frozen=True)
class PetAttributes:
    """Read-only snapshot of a pet listing at scoring time.

    Shelter listings carry two status fields: `adoption_status` (the
    adoption workflow) and `listing_status` (whether the listing is open).
    """
    pet_id: str
    name: Optional[str] = None
    species: Optional[Species] = None
    size: Optional[Size] = None
    ideal_living_space: Optional[LivingSpace] = None
    energy_level: Optional[EnergyLevel] = None
    experience_needed: Optional[ExperienceLevel] = None
    kids_compatibility: Optional[KidsCompatibility] = None
    special_care_needs: Optional[CareLevel] = None
    cat_friendly: Optional[bool] = None
    adoption_status: Optional[AdoptionStatus] = None
    listing_status: Optional[AdoptionStatus] = None
    archived: bool = False
    listed_at: Optional[datetime] = None
    breed: Optional[str] = None
    image: Optional[str] = None

    @property
    def statuses(self) -> Tuple[AdoptionStatus, ...]:
        """Status fields the listing provided."""
        return tuple(s for s in (self.adoption_status, self.listing_status) if s is not None)

    def summary(self) -> PetSummary:
        return PetSummary(
            pet_id=self.pet_id,
            name=self.name,
            species=self.species,
            size=self.size,
            breed=self.breed,
            image=self.image,
        )



@dataclass(frozen=True)
class DimensionResult:
    """Outcome of comparing one dimension for one (adopter, pet) pair."""
    dimension: Dimension
    sub_score: int
    verdict: Verdict
    weight: float
    hard: bool = False
    adopter_value: Optional[str] = None
    pet_value: Optional[str] = None

    @property
    def is_informative(self) -> bool:
        return self.verdict != Verdict.UNKNOWN

    @property
    def is_hard_mismatch(self) -> bool:
        return self.hard and self.verdict == Verdict.MISMATCH

    def to_dict(self) -> Dict[str, Any]:
        return {
            'dimension': self.dimension.value,
            'sub_score': self.sub_score,
            'verdict': self.verdict.value,
            'weight': self.weight,
            'hard': self.hard,
            'adopter_value': self.adopter_value,
            'pet_value': self.pet_value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DimensionResult':
        return cls(
            dimension=Dimension(data['dimension']),
            sub_score=int(data['sub_score']),
            verdict=Verdict(data['verdict']),
            weight=float(data['weight']),
            hard=bool(data.get('hard', False)),
            adopter_value=data.get('adopter_value'),
            pet_value=data.get('pet_value'),
        )
