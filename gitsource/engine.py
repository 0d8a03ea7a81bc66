"""
Main engine for the git source ingestion system.

Provides a high-level interface for mirroring configured sources and
running ingestion passes against them.
"""

import logging
from pathlib import Path
from typing import List, Optional

from gitsource.core.config import Config, PipelineConfig, SourceConfig
from gitsource.ingestion.git_handler import GitBackend, GitHandler
from gitsource.ingestion.ingestor import IngestionOptions, RepositoryIngestor
from gitsource.ingestion.repository import IngestionSummary, SyncRequest, SyncResult
from gitsource.ingestion.sync import SyncEngine
from gitsource.storage.backend import JSONStorageBackend, RecordSink
from gitsource.utils.validation import validate_source_config

logger = logging.getLogger(__name__)


class GitSourceEngine:
    """
    Main engine for git source ingestion.

    The working root used for default mirror locations comes from the
    injected configuration.
    """

    def __init__(
        self,
        config: PipelineConfig = None,
        git: GitBackend = None,
        sink: RecordSink = None,
    ):
        self.config = config or Config.get()
        self.git = git or GitHandler(self.config.ingestion)
        self._sink = sink

    @property
    def sink(self) -> RecordSink:
        if self._sink is None:
            self._sink = JSONStorageBackend(self.config.storage)
        return self._sink

    def mirror_path(self, source: SourceConfig) -> Path:
        """Local mirror directory for a source."""
        if source.local:
            return Path(source.local)
        return Path(self.config.work_dir) / ".cache" / self.config.cache_namespace / source.name

    def build_request(self, source: SourceConfig) -> SyncRequest:
        """Validate a source and build its sync request."""
        validate_source_config(source)
        return SyncRequest(
            name=source.name,
            remote_url=source.remote,
            local_path=self.mirror_path(source),
            branch=source.branch,
            depth=source.depth,
        )

    def sync(self, source: SourceConfig) -> SyncResult:
        """Synchronize the mirror of a source without ingesting it."""
        request = self.build_request(source)
        result = SyncEngine(self.git).ensure_synced(request)
        logger.info(f"Mirror {request.local_path} {result.action.value} at {result.resolved_ref}")
        return result

    def ingest(self, source: SourceConfig, sink: RecordSink = None) -> IngestionSummary:
        """
        Run one ingestion pass for a source.

        Args:
            source: Source configuration.
            sink: Destination for records; the engine's sink by default.

        Returns:
            IngestionSummary for the pass.
        """
        request = self.build_request(source)
        ingestor = RepositoryIngestor(
            self.git,
            sink or self.sink,
            max_workers=self.config.ingestion.max_workers,
        )
        options = IngestionOptions(contributors=source.contributors, log=source.log)
        return ingestor.run(request, source.patterns, options)

    def ingest_all(self, sink: RecordSink = None) -> List[IngestionSummary]:
        """Ingest every configured source in order; the first failure aborts."""
        return [self.ingest(source, sink) for source in self.config.sources]


def ingest_source(
    source: SourceConfig,
    config: PipelineConfig = None,
    sink: Optional[RecordSink] = None,
) -> IngestionSummary:
    """
    Convenience function to ingest a single source.

    Args:
        source: Source configuration.
        config: Optional pipeline configuration.
        sink: Optional record sink.

    Returns:
        IngestionSummary for the pass.
    """
    engine = GitSourceEngine(config, sink=sink)
    return engine.ingest(source)
