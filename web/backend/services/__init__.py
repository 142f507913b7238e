"""Business logic services."""

from .matchmaking_service import MatchmakingService
