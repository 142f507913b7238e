#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class DimensionDetail(BaseModel):
    """Outcome of one comparison dimension."""
    dimension: str
    sub_score: int = Field(ge=0, le=100)
    verdict: str
    weight: float = Field(ge=0)
    hard: bool = False
    adopter_value: Optional[str] = None
    pet_value: Optional[str] = None


class PetDetail(BaseModel):
    """What a result card shows about the pet."""
    pet_id: str
    name: Optional[str] = None
    species: Optional[str] = None
    size: Optional[str] = None
    breed: Optional[str] = None
    image: Optional[str] = None


class CompatibilitySummary(BaseModel):
    """Compatibility of one pet for one adopter."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "adopter_id": "adopter-42",
                "pet_id": "pet-7",
                "pet": {"pet_id": "pet-7", "name": "Biscuit", "species": "dog", "size": "medium"},
                "overall_score": 88,
                "label": "SUITABLE",
                "reasons": [
                    "Your home suits this pet's space needs",
                    "Energy level matches your lifestyle",
                    "Would benefit from a more experienced owner"
                ],
                "risks": ["Would benefit from a more experienced owner"],
                "missing_info": [],
                "profile_version": 3,
                "computed_at": "2026-02-01T12:00:00+00:00"
            }
        }
    )

    adopter_id: str
    pet_id: str
    overall_score: int = Field(ge=0, le=100)
    label: str
    reasons: List[str]
    risks: List[str] = Field(default_factory=list)
    missing_info: List[str] = Field(default_factory=list)
    profile_version: int
    computed_at: Optional[str] = None
    listed_at: Optional[str] = None
    pet: Optional[PetDetail] = None
    dimensions: List[DimensionDetail] = Field(default_factory=list)
    engine_version: str


class RecommendationsResponse(BaseModel):
    """Ranked recommendations, split into matching and not matching."""
    success: bool
    adopter_id: str
    profile_version: int
    profile_fingerprint: Optional[str] = None
    count: int
    computed_at: Optional[str] = None
    matching: List[CompatibilitySummary]
    not_matching: List[CompatibilitySummary]


class ScoreResponse(BaseModel):
    """Single pet score lookup."""
    success: bool
    score: CompatibilitySummary


class InvalidateResponse(BaseModel):
    """Result of invalidating an adopter's recommendations."""
    success: bool
    adopter_id: str
    profile_version: int
