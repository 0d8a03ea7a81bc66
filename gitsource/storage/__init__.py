"""
Record storage layer.

Provides sinks that receive repository and file records produced by
an ingestion pass.
"""

from gitsource.storage.backend import (
    RecordSink,
    JSONStorageBackend,
    MemoryStorageBackend,
)

__all__ = [
    "RecordSink",
    "JSONStorageBackend",
    "MemoryStorageBackend",
]
