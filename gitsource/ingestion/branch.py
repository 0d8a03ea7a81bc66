"""
Resolution of the reference a mirror should be reset to.
"""

import logging
from pathlib import Path
from typing import Optional

from gitsource.core.exceptions import GitCommandError, NoUpstreamError
from gitsource.ingestion.git_handler import GitBackend

logger = logging.getLogger(__name__)

DETACHED_HEAD = "HEAD"


def current_ref(git: GitBackend, repo_path: Path) -> str:
    """Return the checked-out branch name, or HEAD when detached."""
    return git.raw(repo_path, ["rev-parse", "--abbrev-ref", "HEAD"]).strip()


def resolve_tracking_ref(
    git: GitBackend,
    repo_path: Path,
    branch: Optional[str] = None,
) -> str:
    """
    Determine the upstream reference to reset the mirror against.

    Args:
        git: Version-control backend.
        repo_path: Path to the mirror.
        branch: Requested branch; the current checkout is used when None.

    Returns:
        The upstream name (e.g. "origin/main"), or HEAD for a detached
        checkout, which has nothing to track.

    Raises:
        NoUpstreamError: If the branch has no configured upstream.
    """
    if not isinstance(branch, str):
        branch = current_ref(git, repo_path)

    if branch == DETACHED_HEAD:
        logger.debug(f"Mirror at {repo_path} is detached")
        return DETACHED_HEAD

    try:
        upstream = git.raw(
            repo_path,
            ["rev-parse", "--symbolic-full-name", "--abbrev-ref", f"{branch}@{{u}}"],
        )
    except GitCommandError as e:
        raise NoUpstreamError(branch, str(repo_path)) from e

    return upstream.strip()
