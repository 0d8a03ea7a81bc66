"""
Detection of an existing mirror at a local path.
"""

import logging
import os
from pathlib import Path

from gitsource.ingestion.git_handler import GitBackend

logger = logging.getLogger(__name__)


def needs_clone(local_path: Path) -> bool:
    """Return True when local_path is missing or an empty directory."""
    local_path = Path(local_path)
    if not local_path.exists():
        return True
    return local_path.is_dir() and not any(os.scandir(local_path))


def is_mirror_valid(git: GitBackend, local_path: Path, remote_url: str) -> bool:
    """
    Check whether local_path holds a mirror of remote_url.

    A missing or empty directory is reported as "no mirror" rather than an
    error. A non-empty directory without git metadata never matches.

    Args:
        git: Version-control backend used to query the configured remote.
        local_path: Candidate mirror directory.
        remote_url: Remote the mirror is expected to track.

    Returns:
        True if the mirror's remote URL equals remote_url exactly.
    """
    local_path = Path(local_path)
    if needs_clone(local_path) or not local_path.is_dir():
        return False

    if not (local_path / ".git").exists():
        logger.debug(f"No git metadata in {local_path}")
        return False

    existing = git.raw(local_path, ["ls-remote", "--get-url"]).strip()
    if existing != remote_url.strip():
        logger.warning(
            f"Mirror at {local_path} tracks {existing!r}, expected {remote_url!r}"
        )
        return False

    return True
