#!/usr/bin/env python3
"""
PawMatch API - FastAPI Application

Exposes the compatibility engine to the surrounding adoption app.

Usage:
    uvicorn web.backend.app:app

Then open:
    - http://localhost:8080/docs - API Documentation (Swagger UI)
    - http://localhost:8080/redoc - Alternative API Documentation
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException

from core.cache.redis_cache import RedisRecommendationCache
from core.exceptions import ValidationError, PetDataError
from .config import get_config
from .dependencies import get_app_context
from .exceptions import (
    ServiceException,
    service_exception_handler,
    validation_exception_handler,
    pet_data_exception_handler,
    http_exception_handler,
    general_exception_handler
)
from .routers import matchmaking_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the engine once at startup and report which cache backs it."""
    context = get_app_context()
    cache = context.cache
    if isinstance(cache, RedisRecommendationCache) and not cache.is_available:
        logger.warning("Redis is not reachable; recommendations will not be cached")
    logger.info(f"Matching engine ready with {type(cache).__name__}")
    yield


# Create FastAPI app
app = FastAPI(
    lifespan=lifespan,
    title="PawMatch API",
    description="Adopter-pet compatibility matching and ranking",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Register exception handlers
app.add_exception_handler(ServiceException, service_exception_handler)
app.add_exception_handler(ValidationError, validation_exception_handler)
app.add_exception_handler(PetDataError, pet_data_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# Include routers
app.include_router(matchmaking_router)


@app.get("/health")
def health_check():
    """Health check endpoint; reports whether the recommendation cache is reachable."""
    cache = get_app_context().cache
    cache_ok = cache.is_available if isinstance(cache, RedisRecommendationCache) else True
    return {
        "status": "healthy" if cache_ok else "degraded",
        "service": "pawmatch-web",
        "cache": type(cache).__name__
    }


def main():
    """Run the web server."""
    import uvicorn

    config = get_config()
    logger.info(f"Starting PawMatch Web Server on {config.web.host}:{config.web.port}")
    logger.info(f"API Docs: http://{config.web.host}:{config.web.port}/docs")

    uvicorn.run(
        "web.backend.app:app",
        host=config.web.host,
        port=config.web.port,
        reload=False,
        log_level="info"
    )


if __name__ == "__main__":
    main()
