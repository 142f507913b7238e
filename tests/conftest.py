"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
Plain builders for profiles and pets live in tests/fixtures/pet_fixtures.py.
"""

import warnings

import pytest

from core.exceptions import IncompleteDataWarning
from core.cache.recommendation_cache import InMemoryRecommendationCache
from core.matching_service import MatchingService
from tests.fixtures.pet_fixtures import fixed_clock


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "redis: marks tests that exercise the Redis cache backend (deselect with '-m \"not redis\"')"
    )


@pytest.fixture(autouse=True)
def quiet_incomplete_data():
    """Listings with missing fields are expected in tests; keep the output readable."""
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", IncompleteDataWarning)
        yield


@pytest.fixture
def recommendation_cache():
    return InMemoryRecommendationCache()


@pytest.fixture
def matching_service(recommendation_cache):
    return MatchingService(cache=recommendation_cache, clock=fixed_clock)
