#!/usr/bin/env python3
"""
Scoring Models - Data structures for compatibility results.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from core.matcher.models import AdopterProfile, DimensionResult, PetSummary
from core.utils import parse_datetime

ENGINE_VERSION = "1.0"


class Label(str, Enum):
    SUITABLE = "SUITABLE"
    CONDITIONAL = "CONDITIONAL"
    NOT_SUITABLE = "NOT_SUITABLE"


@dataclass(frozen=True)
class CompatibilityScore:
    """Compatibility of one pet for one adopter profile version."""
    adopter_id: str
    pet_id: str
    overall_score: int
    label: Label
    reasons: Tuple[str, ...]
    # Excluded from equality so identical inputs compare equal across runs
    computed_at: Optional[datetime] = field(default=None, compare=False)

    profile_version: int = 0
    listed_at: Optional[datetime] = None
    pet: Optional[PetSummary] = None
    risks: Tuple[str, ...] = field(default_factory=tuple)
    missing_info: Tuple[str, ...] = field(default_factory=tuple)
    dimensions: Tuple[DimensionResult, ...] = field(default_factory=tuple)
    engine_version: str = ENGINE_VERSION

    @property
    def is_matching(self) -> bool:
        return self.overall_score > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'adopter_id': self.adopter_id,
            'pet_id': self.pet_id,
            'overall_score': self.overall_score,
            'label': self.label.value,
            'reasons': list(self.reasons),
            'computed_at': self.computed_at.isoformat() if self.computed_at else None,
            'profile_version': self.profile_version,
            'listed_at': self.listed_at.isoformat() if self.listed_at else None,
            'pet': self.pet.to_dict() if self.pet else None,
            'risks': list(self.risks),
            'missing_info': list(self.missing_info),
            'dimensions': [d.to_dict() for d in self.dimensions],
            'engine_version': self.engine_version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CompatibilityScore':
        return cls(
            adopter_id=data['adopter_id'],
            pet_id=data['pet_id'],
            overall_score=int(data['overall_score']),
            label=Label(data['label']),
            reasons=tuple(data.get('reasons') or ()),
            computed_at=parse_datetime(data.get('computed_at')),
            profile_version=int(data.get('profile_version', 0)),
            listed_at=parse_datetime(data.get('listed_at')),
            pet=PetSummary.from_dict(data['pet']) if data.get('pet') else None,
            risks=tuple(data.get('risks') or ()),
            missing_info=tuple(data.get('missing_info') or ()),
            dimensions=tuple(DimensionResult.from_dict(d) for d in data.get('dimensions') or ()),
            engine_version=data.get('engine_version', ENGINE_VERSION),
        )


def ranking_key(score: CompatibilityScore) -> Tuple[int, float, str]:
    """Sort key: score desc, newest listing first (undated last), then pet_id."""
    listed = score.listed_at.timestamp() if score.listed_at else float('-inf')
    return (-score.overall_score, -listed, score.pet_id)


@dataclass(frozen=True)
class RecommendationSet:
    """
    Ranked compatibility results for one adopter profile version.

    Immutable: adding a pet produces a new set (see with_score), so readers
    holding a reference never observe a partial update.
    """
    adopter_id: str
    profile: Optional[AdopterProfile]
    scores: Tuple[CompatibilityScore, ...] = field(default_factory=tuple)
    computed_at: Optional[datetime] = field(default=None, compare=False)
    _index: Mapping[str, CompatibilityScore] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, 'scores', tuple(self.scores))
        object.__setattr__(self, '_index', MappingProxyType({s.pet_id: s for s in self.scores}))

    @property
    def profile_version(self) -> int:
        return self.profile.version if self.profile is not None else 0

    @property
    def matching(self) -> List[CompatibilityScore]:
        return [s for s in self.scores if s.is_matching]

    @property
    def not_matching(self) -> List[CompatibilityScore]:
        return [s for s in self.scores if not s.is_matching]

    def __len__(self) -> int:
        return len(self.scores)

    def get(self, pet_id: str) -> Optional[CompatibilityScore]:
        """O(1) lookup of one pet's score."""
        return self._index.get(pet_id)

    def with_score(self, score: CompatibilityScore) -> 'RecommendationSet':
        """Return a new set with `score` added (or replaced) at its ranked position."""
        others = [s for s in self.scores if s.pet_id != score.pet_id]
        others.append(score)
        others.sort(key=ranking_key)
        return replace(self, scores=tuple(others))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'adopter_id': self.adopter_id,
            'profile': self.profile.to_dict() if self.profile else None,
            'profile_version': self.profile_version,
            'computed_at': self.computed_at.isoformat() if self.computed_at else None,
            'scores': [s.to_dict() for s in self.scores],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RecommendationSet':
        profile = data.get('profile')
        return cls(
            adopter_id=data['adopter_id'],
            profile=AdopterProfile.from_dict(profile) if profile else None,
            scores=tuple(CompatibilityScore.from_dict(s) for s in data.get('scores') or ()),
            computed_at=parse_datetime(data.get('computed_at')),
        )
