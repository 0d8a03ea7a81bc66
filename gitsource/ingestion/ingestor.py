"""
Repository ingestion driver.

Synchronizes a mirror, emits one repository record, then enriches every
discovered file with git metadata and forwards it to the record sink.
"""

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, List, Optional, Union

from gitsource.core.config import LogOptions
from gitsource.core.exceptions import ConfigurationError
from gitsource.ingestion.branch import current_ref
from gitsource.ingestion.discovery import DEFAULT_PATTERNS, discover_files
from gitsource.ingestion.git_handler import GitBackend
from gitsource.ingestion.metadata import MetadataExtractor
from gitsource.ingestion.remote import parse_remote
from gitsource.ingestion.repository import (
    FileRecord,
    IngestionSummary,
    RepositoryRecord,
    SyncRequest,
)
from gitsource.ingestion.sync import SyncEngine

if TYPE_CHECKING:
    from gitsource.storage.backend import RecordSink

logger = logging.getLogger(__name__)


class ContributorScope(Enum):
    """Granularity at which contributor rosters are attached."""
    ALL = "all"
    REPO = "repo"
    PATH = "path"

    @property
    def includes_repo(self) -> bool:
        return self in (ContributorScope.ALL, ContributorScope.REPO)

    @property
    def includes_path(self) -> bool:
        return self in (ContributorScope.ALL, ContributorScope.PATH)


@dataclass
class IngestionOptions:
    """Which metadata to attach to emitted records."""

    contributors: Optional[ContributorScope] = None
    log: Optional[LogOptions] = None

    def __post_init__(self):
        if isinstance(self.contributors, str):
            try:
                self.contributors = ContributorScope(self.contributors)
            except ValueError:
                raise ConfigurationError(
                    f"Invalid contributors option: {self.contributors}",
                    details={"allowed": [s.value for s in ContributorScope]},
                )

    @property
    def repo_contributors(self) -> bool:
        return self.contributors is not None and self.contributors.includes_repo

    @property
    def path_contributors(self) -> bool:
        return self.contributors is not None and self.contributors.includes_path


class RepositoryIngestor:
    """
    Orchestrates one full ingestion pass for a git source.

    Per-file work runs on a bounded thread pool; the repository record is
    always submitted before any file record.
    """

    def __init__(self, git: GitBackend, sink: "RecordSink", max_workers: int = 8):
        self.git = git
        self.sink = sink
        self.max_workers = max(1, max_workers)
        self.sync_engine = SyncEngine(git)

    def run(
        self,
        request: SyncRequest,
        patterns: Union[str, Iterable[str]] = DEFAULT_PATTERNS,
        options: IngestionOptions = None,
    ) -> IngestionSummary:
        """
        Execute an ingestion pass.

        Args:
            request: Mirror to synchronize.
            patterns: Glob patterns selecting files under the mirror.
            options: Metadata to attach.

        Returns:
            Summary with the repository record and submitted file records.

        Raises:
            PipelineError: If synchronization, extraction or storage fails;
                the whole pass is aborted.
        """
        options = options or IngestionOptions()
        logger.info(f"Ingesting git source {request.name}: {request.remote_url}")

        sync_result = self.sync_engine.ensure_synced(request)
        repo_root = sync_result.local_path.resolve()
        extractor = MetadataExtractor(self.git, repo_root)

        remote = parse_remote(request.remote_url).with_ref(
            current_ref(self.git, repo_root)
        )
        repository = RepositoryRecord.for_remote(request.name, remote)
        if options.repo_contributors:
            repository.contributors = extractor.list_contributors()

        self.sink.create_repository(repository)

        paths = discover_files(repo_root, patterns)
        files = self._process_files(paths, repo_root, request.name, repository, extractor, options)

        logger.info(
            f"Git source {request.name} ingested: {len(files)} files at {remote.ref}"
        )
        return IngestionSummary(repository=repository, sync=sync_result, files=files)

    def _process_files(
        self,
        paths: List[Path],
        repo_root: Path,
        name: str,
        repository: RepositoryRecord,
        extractor: MetadataExtractor,
        options: IngestionOptions,
    ) -> List[FileRecord]:
        if not paths:
            return []

        def process(path: Path) -> FileRecord:
            record = FileRecord.from_path(path, repo_root, name)
            if options.path_contributors:
                record.contributors = extractor.list_contributors(path)
            if options.log:
                record.log = extractor.get_log(path, options.log)
            record.remote_id = repository.id
            self.sink.create_file(record)
            return record

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(process, path) for path in paths]
            done, pending = wait(futures, return_when=FIRST_EXCEPTION)
            for future in pending:
                future.cancel()
            for future in done:
                error = future.exception()
                if error is not None:
                    logger.error(f"File ingestion failed for {name}: {error}")
                    raise error

        return [future.result() for future in futures]
