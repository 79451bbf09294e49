"""
Test Suite

Structure:
    tests/
    ├── conftest.py         # Shared fixtures (fake helpdesk API, vocabulary)
    ├── unit/               # Vocabulary, form, summary, client and service tests
    └── integration/        # Console API endpoint tests

To run tests:
    pytest
    pytest backend/tests/unit/
    pytest backend/tests/integration/
"""
