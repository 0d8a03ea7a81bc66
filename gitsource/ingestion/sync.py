"""
Mirror synchronization.

Brings a local mirror into a consistent state relative to a requested
remote, branch and depth. The mirror is a machine-managed cache: local
modifications are discarded on update, and a directory that belongs to a
different remote is never repaired or deleted.
"""

import logging
from pathlib import Path

from gitsource.core.exceptions import SyncFatalError
from gitsource.ingestion.branch import DETACHED_HEAD, current_ref, resolve_tracking_ref
from gitsource.ingestion.git_handler import GitBackend
from gitsource.ingestion.locator import is_mirror_valid, needs_clone
from gitsource.ingestion.repository import (
    SyncAction,
    SyncRequest,
    SyncResult,
    depth_argument,
)

logger = logging.getLogger(__name__)


class SyncEngine:
    """
    State machine keeping a local mirror in sync with its remote.

    Absent paths are cloned, matching mirrors are fetched and hard-reset to
    their tracking ref (or left alone when detached), and anything else is
    fatal. Repeated calls with the same request converge to the same state.
    """

    def __init__(self, git: GitBackend):
        self.git = git

    def ensure_synced(self, request: SyncRequest) -> SyncResult:
        """
        Synchronize the mirror described by request.

        Args:
            request: Remote, branch, depth and local path to synchronize.

        Returns:
            SyncResult with the ref the mirror settled on.

        Raises:
            SyncFatalError: If the path holds something other than a mirror
                of the requested remote.
            GitCommandError: If any git invocation fails.
            NoUpstreamError: If the tracked branch has no upstream.
        """
        path = request.local_path
        depth = depth_argument(request.depth)

        if needs_clone(path):
            return self._clone(request, depth)

        if not path.is_dir():
            raise SyncFatalError(str(path), request.remote_url, "not a directory")

        if not is_mirror_valid(self.git, path, request.remote_url):
            logger.error(f"Refusing to sync {request.name}: {path} holds another repository")
            raise SyncFatalError(str(path), request.remote_url, "remote mismatch")

        target = resolve_tracking_ref(self.git, path, request.branch)
        if target == DETACHED_HEAD:
            logger.info(f"Mirror {path} is detached; leaving it pinned")
            return SyncResult(path, DETACHED_HEAD, SyncAction.PINNED)

        logger.info(f"Updating mirror {path} to {target}")
        self.git.fetch(path, depth=depth)
        self.git.reset(path, target)

        return SyncResult(
            local_path=path,
            resolved_ref=current_ref(self.git, path),
            action=SyncAction.UPDATED,
            tracking_ref=target,
        )

    def _clone(self, request: SyncRequest, depth) -> SyncResult:
        path: Path = request.local_path
        path.parent.mkdir(parents=True, exist_ok=True)

        self.git.clone(
            request.remote_url,
            path,
            depth=depth,
            branch=request.branch if isinstance(request.branch, str) else None,
        )

        return SyncResult(
            local_path=path,
            resolved_ref=current_ref(self.git, path),
            action=SyncAction.CLONED,
        )
