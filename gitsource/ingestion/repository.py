"""
Repository data structures and metadata records.

Provides the requests and results of mirror synchronization and the
records forwarded to the storage sink.
"""

import hashlib
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from gitsource.ingestion.remote import RemoteDescriptor

FULL_HISTORY = "all"


def make_record_id(*parts: str) -> str:
    """Build a stable record identity from its key parts."""
    key = "/".join(parts)
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def depth_argument(depth: Union[int, str, None]) -> Optional[int]:
    """
    Translate a configured depth into a --depth value.

    Returns None for full history ("all", None or 0).
    """
    if depth is None or depth == FULL_HISTORY:
        return None
    depth = int(depth)
    return depth if depth > 0 else None


class SyncAction(Enum):
    """What the sync engine did to the mirror."""
    CLONED = "cloned"
    UPDATED = "updated"
    PINNED = "pinned"


@dataclass
class SyncRequest:
    """A request to bring a local mirror up to date with a remote."""

    name: str
    remote_url: str
    local_path: Path
    branch: Optional[str] = None
    depth: Union[int, str] = 1

    def __post_init__(self):
        self.local_path = Path(self.local_path)


@dataclass
class SyncResult:
    """Handle to a synchronized mirror and the ref it settled on."""

    local_path: Path
    resolved_ref: str
    action: SyncAction
    tracking_ref: Optional[str] = None


@dataclass
class ContributorEntry:
    """Commit count for one (name, email) pair in a history scope."""

    name: str
    email: str
    commit_count: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "email": self.email,
            "count": self.commit_count,
        }


@dataclass
class RepositoryRecord:
    """The single record describing a mirrored remote."""

    id: str
    source_instance_name: str
    remote: RemoteDescriptor
    contributors: Optional[List[ContributorEntry]] = None

    @classmethod
    def for_remote(cls, name: str, remote: RemoteDescriptor) -> "RepositoryRecord":
        """Create the record for a named source."""
        return cls(
            id=make_record_id("git-remote", name),
            source_instance_name=name,
            remote=remote,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        data = {
            "id": self.id,
            "source_instance_name": self.source_instance_name,
        }
        data.update(self.remote.to_dict())
        if self.contributors is not None:
            data["contributors"] = [c.to_dict() for c in self.contributors]
        return data


@dataclass
class FileRecord:
    """A discovered file enriched with git metadata."""

    id: str
    source_instance_name: str
    path: Path
    relative_path: str
    size_bytes: int
    extension: str
    modified_at: datetime
    remote_id: Optional[str] = None
    contributors: Optional[List[ContributorEntry]] = None
    log: Optional[str] = None

    @classmethod
    def from_path(cls, path: Path, repo_root: Path, name: str) -> "FileRecord":
        """Create a FileRecord from a file path under the mirror root."""
        path = Path(path)
        relative = path.relative_to(repo_root).as_posix()
        stat = path.stat()

        return cls(
            id=make_record_id("git-file", name, relative),
            source_instance_name=name,
            path=path,
            relative_path=relative,
            size_bytes=stat.st_size,
            extension=path.suffix.lower(),
            modified_at=datetime.fromtimestamp(stat.st_mtime),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        data = {
            "id": self.id,
            "source_instance_name": self.source_instance_name,
            "path": str(self.path),
            "relative_path": self.relative_path,
            "size_bytes": self.size_bytes,
            "extension": self.extension,
            "modified_at": self.modified_at.isoformat(),
            "remote_id": self.remote_id,
        }
        if self.contributors is not None:
            data["contributors"] = [c.to_dict() for c in self.contributors]
        if self.log is not None:
            data["log"] = self.log
        return data


@dataclass
class IngestionSummary:
    """Outcome of one complete ingestion pass."""

    repository: RepositoryRecord
    sync: SyncResult
    files: List[FileRecord] = field(default_factory=list)

    @property
    def file_count(self) -> int:
        return len(self.files)
