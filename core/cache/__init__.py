"""Cache Module - Recommendation caching services."""
from core.cache.recommendation_cache import (
    RecommendationCache,
    InMemoryRecommendationCache
)
from core.cache.redis_cache import (
    RedisRecommendationCache,
    DEFAULT_TTL_SECONDS
)

__all__ = [
    'RecommendationCache',
    'InMemoryRecommendationCache',
    'RedisRecommendationCache',
    'DEFAULT_TTL_SECONDS'
]
