#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.
"""

from functools import lru_cache

from core.app_context import AppContext
from .config import get_config
from .services.matchmaking_service import MatchmakingService


@lru_cache()
def get_app_context() -> AppContext:
    """
    Build the application context once per process.

    The recommendation cache lives inside it, so every request shares the
    same cache instance.
    """
    return AppContext.build(get_config())


def get_matchmaking_service() -> MatchmakingService:
    """
    FastAPI dependency that yields the matchmaking service.

    Usage:
        @router.get("/endpoint")
        def endpoint(service: MatchmakingService = Depends(get_matchmaking_service)):
            ...
    """
    return MatchmakingService(get_app_context().matching_service)
