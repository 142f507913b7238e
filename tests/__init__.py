#!/usr/bin/env python3
"""
Test suite for the PawMatch compatibility engine.

All tests can be run with standard Python tools:

    # Run all tests
    python -m pytest tests/ -v

    # Skip the (mocked) Redis cache tests
    python -m pytest tests/ -v -m "not redis"

No external services are required: Redis is mocked and the web layer is
exercised through FastAPI's TestClient.
"""
