import yaml
import os
from typing import List, Optional, Dict, Literal
from pydantic import BaseModel, Field, field_validator


class DimensionWeights(BaseModel):
    """Relative weight of each comparison dimension in the overall score.

    Only ratios matter: the aggregator divides by the sum of the weights of
    the dimensions that were actually scored.
    """
    living_space: float = Field(default=0.30, ge=0)
    energy: float = Field(default=0.20, ge=0)
    experience: float = Field(default=0.20, ge=0)
    kids: float = Field(default=0.15, ge=0)
    special_care: float = Field(default=0.15, ge=0)
    species: float = Field(default=0.10, ge=0)
    size: float = Field(default=0.10, ge=0)
    other_pets: float = Field(default=0.10, ge=0)

    def for_dimension(self, dimension: str) -> float:
        return float(getattr(self, dimension))


class LabelThresholds(BaseModel):
    """Score cut-offs for labels (0-100)."""
    suitable_min: int = Field(default=70, ge=0, le=100)
    conditional_min: int = Field(default=40, ge=0, le=100)


class ScorerConfig(BaseModel):
    """
    Configuration for dimension scoring, aggregation and explanation.
    """
    weights: DimensionWeights = Field(default_factory=DimensionWeights)
    thresholds: LabelThresholds = Field(default_factory=LabelThresholds)

    # A mismatch on any of these forces overall_score = 0
    hard_dimensions: List[str] = Field(default_factory=lambda: [
        'living_space', 'kids', 'special_care', 'species', 'size', 'other_pets'
    ])

    # Sub-score by ordinal distance: exact, one step off, two steps off
    ordinal_step_scores: List[int] = Field(default_factory=lambda: [100, 60, 20])

    # Sub-score when the shelter did not provide the attribute
    unknown_score: int = Field(default=60, ge=0, le=100)

    # Reasons rendered per score (hard mismatches may exceed this)
    max_reasons: int = Field(default=3, ge=1)

    # Sub-score at or above which a reason is phrased positively
    positive_reason_min: int = Field(default=70, ge=0, le=100)

    @field_validator('ordinal_step_scores')
    @classmethod
    def _check_steps(cls, value: List[int]) -> List[int]:
        if len(value) != 3 or any(not 0 <= v <= 100 for v in value):
            raise ValueError("ordinal_step_scores must hold three values in [0, 100]")
        return value


class RankerConfig(BaseModel):
    """Configuration for ranking candidate pets."""
    max_workers: int = Field(default=8, ge=1)
    eligible_statuses: List[str] = Field(default_factory=lambda: ['available'])


class CacheConfig(BaseModel):
    """Recommendation cache backend settings."""
    backend: Literal['memory', 'redis'] = 'memory'
    redis_url: str = "redis://localhost:6379/0"
    password: Optional[str] = None
    key_prefix: str = "recommendations"
    ttl_seconds: Optional[int] = 24 * 60 * 60  # None = no expiry


class WebConfig(BaseModel):
    """Web server configuration."""
    host: str = "0.0.0.0"
    port: int = 8080


class MatchingConfig(BaseModel):
    """
    Top-level matching configuration.
    """
    scorer: ScorerConfig = Field(default_factory=ScorerConfig)
    ranker: RankerConfig = Field(default_factory=RankerConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)


class AppConfig(BaseModel):
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    web: WebConfig = Field(default_factory=WebConfig)


def _apply_env_overrides(data: Dict) -> Dict:
    """Apply environment variable overrides to raw config data."""
    env_redis_url = os.environ.get("REDIS_URL")
    env_backend = os.environ.get("MATCHING_CACHE_BACKEND")
    if env_redis_url or env_backend:
        matching = data.setdefault('matching', {}) or {}
        data['matching'] = matching
        cache = matching.setdefault('cache', {}) or {}
        matching['cache'] = cache
        if env_redis_url:
            cache['redis_url'] = env_redis_url
        if env_backend:
            cache['backend'] = env_backend

    env_web_host = os.environ.get("WEB_HOST")
    env_web_port = os.environ.get("WEB_PORT")
    if env_web_host or env_web_port:
        web = data.setdefault('web', {}) or {}
        data['web'] = web
        if env_web_host:
            web['host'] = env_web_host
        if env_web_port:
            web['port'] = int(env_web_port)

    return data


def load_config(config_path: str = "config.yaml") -> AppConfig:
    # If not found at relative path (e.g. running from root), try the project root
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    data: Dict = {}
    if os.path.exists(config_path):
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}

    return AppConfig(**_apply_env_overrides(data))
