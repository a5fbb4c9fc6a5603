"""
DoseKeeper Test Suite
=====================

Test Structure:
- test_services/: service-layer tests against an in-memory SQLite database
- test_tools/: time helpers and push delivery senders
- test_api/: API endpoint tests for FastAPI routes
- conftest.py: Shared pytest fixtures

Running Tests:
    # Run all tests
    pytest

    # Run specific test module
    pytest tests/test_services/

    # Run only marked tests
    pytest -m "api"
"""

from datetime import datetime

# Test configuration
TEST_DATABASE_URL = "sqlite:///:memory:"
TEST_PATIENT_EMAIL = "maria.lopez@example.com"

# Frozen clock reading (a Wednesday)
FROZEN_NOW = datetime(2024, 3, 6, 9, 30)

__all__ = [
    "TEST_DATABASE_URL",
    "FROZEN_NOW",
    "TEST_PATIENT_EMAIL",
]
