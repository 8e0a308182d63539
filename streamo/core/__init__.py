"""
Core utilities and configuration for Streamo.

This package provides core functionality including logging configuration,
security primitives, database setup, and other shared utilities.
"""

from streamo.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
