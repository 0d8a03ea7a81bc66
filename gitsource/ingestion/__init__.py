"""
Git mirror synchronization and metadata ingestion.

Handles cloning and updating mirrors, contributor and log extraction,
and the per-file ingestion pass.
"""

from gitsource.ingestion.repository import (
    ContributorEntry,
    FileRecord,
    IngestionSummary,
    RepositoryRecord,
    SyncAction,
    SyncRequest,
    SyncResult,
)
from gitsource.ingestion.remote import RemoteDescriptor, parse_remote
from gitsource.ingestion.git_handler import GitBackend, GitHandler
from gitsource.ingestion.sync import SyncEngine
from gitsource.ingestion.metadata import MetadataExtractor, parse_contributors
from gitsource.ingestion.ingestor import (
    ContributorScope,
    IngestionOptions,
    RepositoryIngestor,
)

__all__ = [
    "ContributorEntry",
    "FileRecord",
    "IngestionSummary",
    "RepositoryRecord",
    "SyncAction",
    "SyncRequest",
    "SyncResult",
    "RemoteDescriptor",
    "parse_remote",
    "GitBackend",
    "GitHandler",
    "SyncEngine",
    "MetadataExtractor",
    "parse_contributors",
    "ContributorScope",
    "IngestionOptions",
    "RepositoryIngestor",
]
