from dataclasses import dataclass
from typing import Optional
import logging

from core.cache.recommendation_cache import RecommendationCache, InMemoryRecommendationCache
from core.cache.redis_cache import RedisRecommendationCache
from core.config_loader import AppConfig, CacheConfig
from core.matching_service import MatchingService, PetLookup

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    Provides a single source of truth for service instantiation so the CLI
    and the web layer build the engine the same way.
    """
    config: AppConfig
    cache: RecommendationCache
    matching_service: MatchingService

    @classmethod
    def build(cls, config: AppConfig, pet_lookup: Optional[PetLookup] = None) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration
            pet_lookup: Optional listing lookup for on-demand single-pet scoring

        Returns:
            Fully wired AppContext instance
        """
        cache = cls._build_cache(config.matching.cache)
        matching_service = MatchingService(
            config=config.matching,
            cache=cache,
            pet_lookup=pet_lookup
        )
        return cls(config=config, cache=cache, matching_service=matching_service)

    @staticmethod
    def _build_cache(cache_config: CacheConfig) -> RecommendationCache:
        """Build the recommendation cache backend selected in configuration."""
        if cache_config.backend == 'redis':
            return RedisRecommendationCache(
                redis_url=cache_config.redis_url,
                password=cache_config.password,
                key_prefix=cache_config.key_prefix,
                ttl_seconds=cache_config.ttl_seconds
            )
        logger.info("Using in-memory recommendation cache")
        return InMemoryRecommendationCache(ttl_seconds=cache_config.ttl_seconds)
