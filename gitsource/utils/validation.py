"""
Input validation utilities.

Provides validation functions for remote URLs, depths and source
configurations.
"""

from typing import Optional, Tuple, Union

from gitsource.core.config import SourceConfig
from gitsource.core.exceptions import ConfigurationError
from gitsource.ingestion.remote import parse_remote
from gitsource.ingestion.repository import FULL_HISTORY

CONTRIBUTOR_SCOPES = ("all", "repo", "path")


def validate_url(url: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a repository URL.

    Args:
        url: URL to validate.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not url or not url.strip():
        return False, "URL cannot be empty"

    try:
        parse_remote(url)
    except ConfigurationError as e:
        return False, e.args[0]

    return True, None


def parse_depth(value: Union[int, str, None]) -> Union[int, str]:
    """
    Normalize a depth option.

    Args:
        value: Positive integer, numeric string, "all", or None.

    Returns:
        The integer depth, or "all" for full history.

    Raises:
        ConfigurationError: If the value is neither.
    """
    if value is None:
        return 1
    if isinstance(value, str):
        if value.strip().lower() == FULL_HISTORY:
            return FULL_HISTORY
        try:
            value = int(value)
        except ValueError:
            raise ConfigurationError(f"Invalid depth: {value!r}")
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigurationError(f"Invalid depth: {value!r}")
    return value


def validate_source_config(source: SourceConfig) -> SourceConfig:
    """
    Validate and normalize a source configuration in place.

    Raises:
        ConfigurationError: On the first invalid option.
    """
    if not source.name or not source.name.strip():
        raise ConfigurationError("Source name is required")

    is_valid, error = validate_url(source.remote)
    if not is_valid:
        raise ConfigurationError(error, details={"name": source.name})

    if source.branch is not None and not source.branch.strip():
        source.branch = None

    source.depth = parse_depth(source.depth)

    if source.contributors is not None and source.contributors not in CONTRIBUTOR_SCOPES:
        raise ConfigurationError(
            f"Invalid contributors option: {source.contributors}",
            details={"allowed": list(CONTRIBUTOR_SCOPES)},
        )

    if not source.patterns:
        raise ConfigurationError("At least one pattern is required", details={"name": source.name})

    return source
