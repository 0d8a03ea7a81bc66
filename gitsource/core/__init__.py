"""
Core module containing configuration and the exception hierarchy.
"""

from gitsource.core.config import (
    Config,
    PipelineConfig,
    IngestionConfig,
    StorageConfig,
    SourceConfig,
    LogOptions,
)
from gitsource.core.exceptions import (
    PipelineError,
    IngestionError,
    ConfigurationError,
    StorageError,
    SyncFatalError,
    GitCommandError,
    NoUpstreamError,
)

__all__ = [
    "Config",
    "PipelineConfig",
    "IngestionConfig",
    "StorageConfig",
    "SourceConfig",
    "LogOptions",
    "PipelineError",
    "IngestionError",
    "ConfigurationError",
    "StorageError",
    "SyncFatalError",
    "GitCommandError",
    "NoUpstreamError",
]
