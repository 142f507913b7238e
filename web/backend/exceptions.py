#!/usr/bin/env python3
"""
Custom exceptions and error handlers for the web application.
"""

import logging
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse

from core.exceptions import ValidationError, PetDataError

logger = logging.getLogger(__name__)


class ServiceException(Exception):
    """Base exception for service layer errors."""
    pass


class RecommendationsNotFoundException(ServiceException):
    """Raised when an adopter has no current recommendations."""
    pass


class ScoreNotFoundException(ServiceException):
    """Raised when a pet's score is not available for an adopter."""
    pass


class InvalidListingException(ServiceException):
    """Raised when a supplied listing does not belong to the requested pet."""
    pass


async def service_exception_handler(
    request: Request,
    exc: ServiceException
) -> JSONResponse:
    """
    Handle service layer exceptions.

    Args:
        request: The FastAPI request.
        exc: The service exception.

    Returns:
        JSONResponse with error details.
    """
    status_code = 500
    if isinstance(exc, (RecommendationsNotFoundException, ScoreNotFoundException)):
        status_code = 404
        logger.info(f"Not found in {request.url.path}: {exc}")
    elif isinstance(exc, InvalidListingException):
        status_code = 400
        logger.info(f"Bad listing in {request.url.path}: {exc}")
    else:
        logger.error(f"Service error in {request.url.path}: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": str(exc),
            "type": exc.__class__.__name__
        }
    )


async def validation_exception_handler(
    request: Request,
    exc: ValidationError
) -> JSONResponse:
    """
    Surface questionnaire validation errors verbatim, one message per field.
    """
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": str(exc),
            "type": "ValidationError",
            "fields": exc.errors
        }
    )


async def pet_data_exception_handler(
    request: Request,
    exc: PetDataError
) -> JSONResponse:
    """Handle listings that cannot be scored at all (no pet id)."""
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": str(exc),
            "type": "PetDataError"
        }
    )


async def http_exception_handler(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """
    Handle FastAPI HTTP exceptions with consistent format.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "type": "HTTPException"
        }
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions.
    """
    logger.exception(f"Unexpected error in {request.url.path}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "type": "InternalError"
        }
    )
