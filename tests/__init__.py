"""reqlog test suite.

Test Structure:
    tests/
    ├── conftest.py          # Shared fixtures for all tests
    ├── unit/                # Unit tests (no ASGI app)
    └── integration/         # Middleware driven through a FastAPI app

Run all tests:
    pytest

Run specific test categories:
    pytest tests/unit
    pytest -m integration
"""
