#!/usr/bin/env python3
"""
Request models for API endpoints.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class RecommendRequest(BaseModel):
    """Questionnaire submission plus the candidate listings to rank."""
    answers: Dict[str, Any] = Field(..., description="Raw questionnaire answers")
    pets: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Pet listings supplied by the listings service"
    )


class ScoreRequest(BaseModel):
    """On-demand scoring of a single listing for an adopter."""
    pet: Optional[Dict[str, Any]] = Field(
        None,
        description="Listing to score if it is not in the cached recommendations"
    )
