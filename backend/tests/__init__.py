"""
Test Suite

Structure:
    tests/
    ├── __init__.py         # This file
    ├── conftest.py         # Pytest fixtures (mongomock-backed data store)
    ├── factories.py        # Record builders
    ├── unit/               # Unit tests
    │   ├── test_domain/    # Document type table
    │   ├── test_repositories/  # Data store
    │   ├── test_engine/    # Validation, upload gate, state machine, print queue
    │   ├── test_services/  # Submission and notifications
    │   └── test_utils/     # Utility tests
    └── integration/        # Integration tests
        └── test_api/       # API endpoint tests

To run tests:
    pytest backend/tests/
    pytest backend/tests/unit/
    pytest backend/tests/integration/
"""
