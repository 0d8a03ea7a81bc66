"""
Git operations handler for repository mirroring.

Defines the version-control capability the sync engine and metadata
extractor are built on, and provides the implementation that shells out
to the git executable.
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from gitsource.core.config import IngestionConfig
from gitsource.core.exceptions import GitCommandError

logger = logging.getLogger(__name__)


class GitBackend(ABC):
    """
    Version-control capability: clone, fetch, reset and raw queries.

    Every operation raises GitCommandError when the underlying tool fails.
    """

    @abstractmethod
    def clone(
        self,
        remote: str,
        path: Path,
        depth: Optional[int] = None,
        branch: Optional[str] = None,
    ) -> None:
        """Clone remote into path."""
        pass

    @abstractmethod
    def fetch(self, path: Path, depth: Optional[int] = None) -> None:
        """Fetch from the default remote of the mirror at path."""
        pass

    @abstractmethod
    def reset(self, path: Path, target: str) -> None:
        """Hard-reset the working tree and index of path to target."""
        pass

    @abstractmethod
    def raw(self, path: Path, args: List[str]) -> str:
        """Run an arbitrary git query in path and return its stdout."""
        pass


class GitHandler(GitBackend):
    """
    Handles Git operations by invoking the git executable.

    Each call is an independent subprocess; no handle state is shared
    beyond the mirror directory itself.
    """

    def __init__(self, config: IngestionConfig = None):
        self.config = config or IngestionConfig()

    def is_available(self) -> bool:
        """Check if git is available on the system."""
        try:
            result = subprocess.run(
                [self.config.git_executable, "--version"],
                capture_output=True,
                text=True,
                timeout=10,
            )
            return result.returncode == 0
        except (subprocess.TimeoutExpired, FileNotFoundError):
            return False

    def clone(
        self,
        remote: str,
        path: Path,
        depth: Optional[int] = None,
        branch: Optional[str] = None,
    ) -> None:
        args = ["clone"]

        if depth is not None:
            args.extend(["--depth", str(depth)])

        if branch:
            args.extend(["--branch", branch])

        args.extend([remote, str(path)])

        logger.info(f"Cloning repository: {remote}")
        self._run(args)
        logger.info(f"Repository cloned to: {path}")

    def fetch(self, path: Path, depth: Optional[int] = None) -> None:
        args = ["fetch"]
        if depth is not None:
            args.extend(["--depth", str(depth)])
        self._run(args, cwd=path)

    def reset(self, path: Path, target: str) -> None:
        self._run(["reset", "--hard", target], cwd=path)

    def raw(self, path: Path, args: List[str]) -> str:
        return self._run(args, cwd=path)

    def _run(self, args: List[str], cwd: Optional[Path] = None) -> str:
        """
        Run git with the given arguments and capture its output.

        Args:
            args: Arguments following the git executable.
            cwd: Working directory for the command.

        Returns:
            Captured standard output.

        Raises:
            GitCommandError: If git exits non-zero, times out, or is missing.
        """
        cmd = [self.config.git_executable] + list(args)
        logger.debug(f"Git command: {' '.join(cmd)} (cwd={cwd})")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                cwd=str(cwd) if cwd is not None else None,
                stdin=subprocess.DEVNULL,
                timeout=self.config.git_timeout,
            )
        except subprocess.TimeoutExpired:
            raise GitCommandError(
                cmd,
                reason=f"timed out after {self.config.git_timeout} seconds",
            )
        except FileNotFoundError:
            raise GitCommandError(
                cmd,
                reason=f"executable not found: {self.config.git_executable}",
            )

        if result.returncode != 0:
            raise GitCommandError(cmd, result.returncode, result.stderr)

        return result.stdout
