"""
Record sink implementations.

Defines the interface that receives repository and file records and
provides concrete implementations for different storage mechanisms.
"""

import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List

from gitsource.core.config import StorageConfig
from gitsource.core.exceptions import StorageError
from gitsource.ingestion.repository import FileRecord, RepositoryRecord

logger = logging.getLogger(__name__)

REPOSITORY_FILE = "repository.json"
FILES_FILE = "files.jsonl"


class RecordSink(ABC):
    """
    Abstract base class for record sinks.

    Implementations must accept file records from several threads at once.
    """

    @abstractmethod
    def create_repository(self, record: RepositoryRecord) -> None:
        """Store the repository record for one ingestion pass."""
        pass

    @abstractmethod
    def create_file(self, record: FileRecord) -> None:
        """Store a file record."""
        pass


class MemoryStorageBackend(RecordSink):
    """Keeps records in memory, in submission order."""

    def __init__(self):
        self.repositories: List[RepositoryRecord] = []
        self.files: List[FileRecord] = []
        self._lock = threading.Lock()

    def create_repository(self, record: RepositoryRecord) -> None:
        with self._lock:
            self.repositories.append(record)

    def create_file(self, record: FileRecord) -> None:
        with self._lock:
            self.files.append(record)


class JSONStorageBackend(RecordSink):
    """
    JSON-based storage backend.

    Writes one ``repository.json`` per source and appends file records to
    ``files.jsonl`` beside it. Writing the repository record truncates the
    file list, so a rerun replaces the previous pass.
    """

    def __init__(self, config: StorageConfig = None):
        self.config = config or StorageConfig()
        self.storage_dir = Path(self.config.storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _source_dir(self, name: str) -> Path:
        return self.storage_dir / name

    def create_repository(self, record: RepositoryRecord) -> None:
        source_dir = self._source_dir(record.source_instance_name)
        try:
            with self._lock:
                source_dir.mkdir(parents=True, exist_ok=True)
                with open(source_dir / REPOSITORY_FILE, "w") as f:
                    json.dump(record.to_dict(), f, indent=2)
                (source_dir / FILES_FILE).write_text("")
        except OSError as e:
            raise StorageError(
                f"Failed to store repository record: {e}",
                details={"name": record.source_instance_name},
            )
        logger.debug(f"Repository record stored in {source_dir}")

    def create_file(self, record: FileRecord) -> None:
        files_path = self._source_dir(record.source_instance_name) / FILES_FILE
        line = json.dumps(record.to_dict())
        try:
            with self._lock:
                with open(files_path, "a") as f:
                    f.write(line + "\n")
        except OSError as e:
            raise StorageError(
                f"Failed to store file record: {e}",
                details={"path": record.relative_path},
            )

    def load_repository(self, name: str) -> Dict[str, Any]:
        """Load the stored repository record for a source."""
        path = self._source_dir(name) / REPOSITORY_FILE
        if not path.exists():
            raise StorageError(f"No repository record for: {name}")
        with open(path, "r") as f:
            return json.load(f)

    def load_files(self, name: str) -> List[Dict[str, Any]]:
        """Load the stored file records for a source."""
        path = self._source_dir(name) / FILES_FILE
        if not path.exists():
            return []
        with open(path, "r") as f:
            return [json.loads(line) for line in f if line.strip()]
