"""Unit tests for centralized database layer.

This package contains unit tests for the centralized
database layer in streamo/core/database, including:

- Entity model validation tests (SQLModel)
- Repository pattern tests (mocked)
- Business logic tests
- Edge case and error handling tests

All tests use in-memory SQLite or mocks to ensure fast execution
without requiring external database services.
"""
