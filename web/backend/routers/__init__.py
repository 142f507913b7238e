"""API route handlers."""

from .matchmaking import router as matchmaking_router
