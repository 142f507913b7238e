"""Redis Recommendation Cache - Durable recommendation sets shared across processes."""
import json
import logging
from typing import Optional
from urllib.parse import urlparse

from redis import Redis
from redis.exceptions import RedisError, WatchError

from core.cache.recommendation_cache import RecommendationCache
from core.scorer.models import CompatibilityScore, RecommendationSet

logger = logging.getLogger(__name__)

# 24 hours in seconds
DEFAULT_TTL_SECONDS = 24 * 60 * 60


def _sanitize_url(url: str) -> str:
    """Remove credentials from URL for safe logging."""
    try:
        parsed = urlparse(url)
        if parsed.password:
            sanitized = parsed._replace(
                netloc=f"{parsed.username or ''}:*@{parsed.hostname}:{parsed.port or 6379}"
            )
            return sanitized.geturl()
        return url
    except ValueError:
        return url


class RedisRecommendationCache(RecommendationCache):
    """
    Recommendation cache backed by Redis.

    Layout per adopter:
    - {prefix}:{adopter_id}          JSON-serialized RecommendationSet
    - {prefix}:{adopter_id}:scores   hash of pet_id -> JSON CompatibilityScore (single-pet lookups)
    - {prefix}:{adopter_id}:version  monotonic profile version (INCR on invalidate)

    Writes WATCH the version key and commit in MULTI/EXEC, so a write from an
    outdated profile version can never land after an invalidate. Read and
    write failures degrade to a cache miss; invalidate failures propagate,
    since swallowing them could leave a stale set visible.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        password: Optional[str] = None,
        key_prefix: str = "recommendations",
        ttl_seconds: Optional[int] = DEFAULT_TTL_SECONDS,
        redis_client: Optional[Redis] = None
    ):
        self.redis_url = redis_url
        self.key_prefix = key_prefix
        self.ttl_seconds = ttl_seconds

        if redis_client is not None:
            self._redis = redis_client
        else:
            self._redis = Redis.from_url(
                redis_url,
                password=password,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5
            )
            logger.info(f"Recommendation cache using Redis at {_sanitize_url(redis_url)}")

    @property
    def is_available(self) -> bool:
        try:
            return bool(self._redis.ping())
        except RedisError:
            return False

    def _set_key(self, adopter_id: str) -> str:
        return f"{self.key_prefix}:{adopter_id}"

    def _scores_key(self, adopter_id: str) -> str:
        return f"{self.key_prefix}:{adopter_id}:scores"

    def _version_key(self, adopter_id: str) -> str:
        return f"{self.key_prefix}:{adopter_id}:version"

    def _store(self, pipe, adopter_id: str, recommendation_set: RecommendationSet, scores=None) -> None:
        """Queue the set and its per-pet entries; `scores` limits the hash update to those pets."""
        payload = json.dumps(recommendation_set.to_dict())
        set_key = self._set_key(adopter_id)
        scores_key = self._scores_key(adopter_id)
        if self.ttl_seconds:
            pipe.setex(set_key, self.ttl_seconds, payload)
        else:
            pipe.set(set_key, payload)

        if scores is None:
            pipe.delete(scores_key)
            scores = recommendation_set.scores
        if scores:
            pipe.hset(scores_key, mapping={s.pet_id: json.dumps(s.to_dict()) for s in scores})
            if self.ttl_seconds:
                pipe.expire(scores_key, self.ttl_seconds)

    def get(self, adopter_id: str) -> Optional[RecommendationSet]:
        try:
            data = self._redis.get(self._set_key(adopter_id))
        except RedisError as e:
            logger.warning(f"Error reading from recommendation cache: {e}")
            return None

        if not data:
            logger.debug(f"Recommendation cache miss for adopter {adopter_id}")
            return None

        try:
            return RecommendationSet.from_dict(json.loads(data))
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Corrupt recommendation cache entry for adopter {adopter_id}: {e}")
            return None

    def get_score(self, adopter_id: str, pet_id: str) -> Optional[CompatibilityScore]:
        try:
            data = self._redis.hget(self._scores_key(adopter_id), pet_id)
        except RedisError as e:
            logger.warning(f"Error reading from recommendation cache: {e}")
            return None

        if not data:
            return None

        try:
            return CompatibilityScore.from_dict(json.loads(data))
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Corrupt cached score for adopter {adopter_id}, pet {pet_id}: {e}")
            return None

    def current_version(self, adopter_id: str) -> int:
        try:
            return int(self._redis.get(self._version_key(adopter_id)) or 0)
        except RedisError as e:
            logger.warning(f"Error reading profile version from cache: {e}")
            return 0

    def invalidate(self, adopter_id: str) -> int:
        with self._redis.pipeline(transaction=True) as pipe:
            pipe.incr(self._version_key(adopter_id))
            pipe.delete(self._set_key(adopter_id), self._scores_key(adopter_id))
            new_version, _ = pipe.execute()
        logger.info(f"Invalidated recommendations for adopter {adopter_id} (now v{new_version})")
        return int(new_version)

    def put(self, recommendation_set: RecommendationSet) -> bool:
        adopter_id = recommendation_set.adopter_id
        write_version = recommendation_set.profile_version
        version_key = self._version_key(adopter_id)

        try:
            with self._redis.pipeline() as pipe:
                while True:
                    try:
                        pipe.watch(version_key)
                        current = int(pipe.get(version_key) or 0)
                        if write_version < current:
                            pipe.reset()
                            self._log_discard(adopter_id, write_version, current)
                            return False
                        pipe.multi()
                        pipe.set(version_key, write_version)
                        self._store(pipe, adopter_id, recommendation_set)
                        pipe.execute()
                        logger.debug(f"Cached {len(recommendation_set)} scores for adopter {adopter_id} (v{write_version})")
                        return True
                    except WatchError:
                        # Version changed between WATCH and EXEC; re-check it
                        continue
        except RedisError as e:
            logger.warning(f"Error writing to recommendation cache: {e}")
            return False

    def merge_score(self, adopter_id: str, profile_version: int, score: CompatibilityScore) -> bool:
        version_key = self._version_key(adopter_id)
        set_key = self._set_key(adopter_id)

        try:
            with self._redis.pipeline() as pipe:
                while True:
                    try:
                        pipe.watch(version_key, set_key)
                        current = int(pipe.get(version_key) or 0)
                        data = pipe.get(set_key)
                        if profile_version < current or not data:
                            pipe.reset()
                            self._log_discard(adopter_id, profile_version, current)
                            return False
                        existing = RecommendationSet.from_dict(json.loads(data))
                        if existing.profile_version != profile_version:
                            pipe.reset()
                            self._log_discard(adopter_id, profile_version, existing.profile_version)
                            return False
                        pipe.multi()
                        self._store(pipe, adopter_id, existing.with_score(score), scores=[score])
                        pipe.execute()
                        return True
                    except WatchError:
                        continue
        except (RedisError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Error merging score into recommendation cache: {e}")
            return False
