"""
Utility functions and helpers.

Provides common utilities used across the codebase.
"""

from gitsource.utils.logging_config import setup_logging, get_logger
from gitsource.utils.validation import validate_url, parse_depth, validate_source_config

__all__ = [
    "setup_logging",
    "get_logger",
    "validate_url",
    "parse_depth",
    "validate_source_config",
]
