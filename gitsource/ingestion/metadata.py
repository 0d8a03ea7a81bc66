"""
Contributor and commit-log extraction from a synchronized mirror.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional, Union

from gitsource.core.config import LogOptions
from gitsource.ingestion.git_handler import GitBackend
from gitsource.ingestion.repository import ContributorEntry

logger = logging.getLogger(__name__)

# "   3\tJane Q. Doe <jane@example.com>"
SHORTLOG_LINE = re.compile(r"^\s*(\d+)\s+(.+?)\s+<([^>]+)>\s*$")


def parse_contributors(output: Optional[str]) -> List[ContributorEntry]:
    """
    Parse the output of ``git shortlog -n -s -e``.

    Args:
        output: Raw shortlog text; None or blank means no history.

    Returns:
        Contributors in the order git emitted them.
    """
    contributors = []
    for line in (output or "").strip().splitlines():
        if not line.strip():
            continue
        match = SHORTLOG_LINE.match(line)
        if not match:
            logger.debug(f"Skipping unparseable shortlog line: {line!r}")
            continue
        count, name, email = match.groups()
        contributors.append(ContributorEntry(name=name, email=email, commit_count=int(count)))
    return contributors


class MetadataExtractor:
    """Runs history queries against a mirror."""

    def __init__(self, git: GitBackend, repo_path: Path):
        self.git = git
        self.repo_path = Path(repo_path)

    def list_contributors(
        self, path: Union[str, Path, None] = None
    ) -> List[ContributorEntry]:
        """
        List contributors over HEAD, optionally scoped to a single path.

        A path without commits yields an empty list.
        """
        args = ["shortlog", "-n", "-s", "-e", "HEAD"]
        if path:
            args.extend(["--", self._pathspec(path)])
        return parse_contributors(self.git.raw(self.repo_path, args))

    def get_log(self, path: Union[str, Path], options: LogOptions = None) -> str:
        """
        Return the commit-log excerpt for path.

        Args:
            path: File to query.
            options: Format token and commit count; count <= 0 means the
                full history of the path.

        Returns:
            Trimmed log text as formatted by git.
        """
        options = options or LogOptions()
        args = ["log"]
        if options.count > 0:
            args.append(f"-{options.count}")
        if options.pretty:
            args.append(f"--pretty={options.pretty}")
        args.extend(["--", self._pathspec(path)])
        return self.git.raw(self.repo_path, args).strip()

    def _pathspec(self, path: Union[str, Path]) -> str:
        path = Path(path)
        if path.is_absolute():
            try:
                return path.relative_to(self.repo_path).as_posix()
            except ValueError:
                return str(path)
        return path.as_posix()
