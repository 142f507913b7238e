"""Recommendation Cache - Versioned per-adopter store of ranked results."""
import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional, Tuple

from core.exceptions import StaleWriteDiscarded
from core.scorer.models import CompatibilityScore, RecommendationSet

logger = logging.getLogger(__name__)


class RecommendationCache(ABC):
    """
    Contract for recommendation caches.

    - get / get_score never return a set older than the last invalidate
    - put replaces an adopter's set wholesale
    - writes carrying a profile version older than the adopter's current
      version are discarded (returns False)
    """

    @abstractmethod
    def get(self, adopter_id: str) -> Optional[RecommendationSet]:
        ...

    def get_score(self, adopter_id: str, pet_id: str) -> Optional[CompatibilityScore]:
        recommendation_set = self.get(adopter_id)
        if recommendation_set is None:
            return None
        return recommendation_set.get(pet_id)

    @abstractmethod
    def put(self, recommendation_set: RecommendationSet) -> bool:
        ...

    @abstractmethod
    def invalidate(self, adopter_id: str) -> int:
        """Drop the adopter's set and return the new (bumped) profile version."""
        ...

    @abstractmethod
    def current_version(self, adopter_id: str) -> int:
        ...

    @abstractmethod
    def merge_score(self, adopter_id: str, profile_version: int, score: CompatibilityScore) -> bool:
        """Add one on-demand score to the cached set if it still matches profile_version."""
        ...

    @staticmethod
    def _log_discard(adopter_id: str, write_version: int, current_version: int) -> None:
        logger.info(str(StaleWriteDiscarded(adopter_id, write_version, current_version)))


class InMemoryRecommendationCache(RecommendationCache):
    """
    Process-local cache.

    Published sets are immutable and swapped by a single dict assignment, so
    readers take no lock. Writers for the same adopter serialize on a
    per-adopter lock that guards the version check and the swap together.

    Sets expire `ttl_seconds` after they were last written (None keeps them
    until invalidated). Versions and their locks outlive expiry so a write
    from an earlier profile is still rejected.
    """

    def __init__(self, ttl_seconds: Optional[int] = None, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._sets: Dict[str, Tuple[RecommendationSet, Optional[float]]] = {}
        self._versions: Dict[str, int] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, adopter_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(adopter_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[adopter_id] = lock
            return lock

    def _expiry(self) -> Optional[float]:
        return self._clock() + self.ttl_seconds if self.ttl_seconds else None

    def _live(self, adopter_id: str) -> Optional[RecommendationSet]:
        entry = self._sets.get(adopter_id)
        if entry is None:
            return None
        recommendation_set, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            return None
        return recommendation_set

    def get(self, adopter_id: str) -> Optional[RecommendationSet]:
        recommendation_set = self._live(adopter_id)
        if recommendation_set is None and adopter_id in self._sets:
            with self._lock_for(adopter_id):
                if self._live(adopter_id) is None:
                    self._sets.pop(adopter_id, None)
                    logger.debug(f"Recommendation set for adopter {adopter_id} expired")
        logger.debug(
            f"Recommendation cache {'hit' if recommendation_set else 'miss'} for adopter {adopter_id}"
        )
        return recommendation_set

    def current_version(self, adopter_id: str) -> int:
        return self._versions.get(adopter_id, 0)

    def put(self, recommendation_set: RecommendationSet) -> bool:
        adopter_id = recommendation_set.adopter_id
        write_version = recommendation_set.profile_version
        with self._lock_for(adopter_id):
            current = self._versions.get(adopter_id, 0)
            if write_version < current:
                self._log_discard(adopter_id, write_version, current)
                return False
            self._versions[adopter_id] = write_version
            self._sets[adopter_id] = (recommendation_set, self._expiry())
        logger.debug(f"Cached {len(recommendation_set)} scores for adopter {adopter_id} (v{write_version})")
        return True

    def invalidate(self, adopter_id: str) -> int:
        with self._lock_for(adopter_id):
            new_version = self._versions.get(adopter_id, 0) + 1
            self._versions[adopter_id] = new_version
            self._sets.pop(adopter_id, None)
        logger.info(f"Invalidated recommendations for adopter {adopter_id} (now v{new_version})")
        return new_version

    def merge_score(self, adopter_id: str, profile_version: int, score: CompatibilityScore) -> bool:
        with self._lock_for(adopter_id):
            current = self._versions.get(adopter_id, 0)
            existing = self._live(adopter_id)
            if profile_version < current or existing is None or existing.profile_version != profile_version:
                self._log_discard(adopter_id, profile_version, current)
                return False
            self._sets[adopter_id] = (existing.with_score(score), self._expiry())
        logger.debug(f"Merged on-demand score for pet {score.pet_id} into adopter {adopter_id} set")
        return True

