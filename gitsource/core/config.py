"""
Configuration management for the git source ingestion engine.

Provides centralized configuration for mirroring, metadata extraction
and record storage with sensible defaults.
"""

import os
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from gitsource.core.exceptions import ConfigurationError


@dataclass
class LogOptions:
    """Options for the commit-log excerpt attached to file records."""

    # Format token forwarded verbatim as --pretty=<token>
    pretty: Optional[str] = None

    # Number of commits to include (0 or negative = full history)
    count: int = 1


@dataclass
class SourceConfig:
    """Configuration for a single mirrored git source."""

    name: str
    remote: str

    # Branch to track; None follows the remote default / current checkout
    branch: Optional[str] = None

    # Glob patterns forwarded to file discovery
    patterns: List[str] = field(default_factory=lambda: ["**"])

    # Overrides the computed mirror directory
    local: Optional[str] = None

    # Shallow clone/fetch depth, or "all" for full history
    depth: Union[int, str] = 1

    # "all", "repo" or "path"
    contributors: Optional[str] = None

    log: Optional[LogOptions] = None

    @classmethod
    def from_dict(cls, data: dict) -> "SourceConfig":
        """Create a SourceConfig from a plain dictionary."""
        if not isinstance(data, dict):
            raise ConfigurationError(f"Source entry must be an object, got: {data!r}")
        data = dict(data)
        patterns = data.get("patterns", ["**"])
        if isinstance(patterns, str):
            patterns = [patterns]
        data["patterns"] = list(patterns)

        log = data.get("log")
        if isinstance(log, dict):
            try:
                data["log"] = LogOptions(**log)
            except TypeError as e:
                raise ConfigurationError(f"Invalid log options: {e}")
        elif log is True:
            data["log"] = LogOptions()

        try:
            return cls(**data)
        except TypeError as e:
            raise ConfigurationError(
                f"Invalid source configuration: {e}",
                details={"name": data.get("name")},
            )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "remote": self.remote,
            "branch": self.branch,
            "patterns": self.patterns,
            "local": self.local,
            "depth": self.depth,
            "contributors": self.contributors,
            "log": (
                {"pretty": self.log.pretty, "count": self.log.count}
                if self.log else None
            ),
        }


@dataclass
class IngestionConfig:
    """Configuration for repository synchronization and extraction."""

    # Executable used for every version-control operation
    git_executable: str = "git"

    # Timeout for git operations (seconds)
    git_timeout: int = 300

    # Upper bound on concurrent per-file extraction tasks
    max_workers: int = 8


@dataclass
class StorageConfig:
    """Configuration for record storage."""

    # Base directory for stored records
    storage_dir: str = "./data/records"


@dataclass
class PipelineConfig:
    """Master configuration combining all stage configurations."""

    ingestion: IngestionConfig = field(default_factory=IngestionConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    sources: List[SourceConfig] = field(default_factory=list)

    # Enable verbose logging
    verbose: bool = False

    # Working root; default mirrors live under <work_dir>/.cache/<namespace>
    work_dir: str = "."

    cache_namespace: str = "gitsource"


class Config:
    """
    Central configuration manager providing access to all settings.

    Supports loading from environment variables and configuration files.
    """

    _instance: Optional["Config"] = None
    _config: PipelineConfig = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._config = PipelineConfig()
        return cls._instance

    @classmethod
    def get(cls) -> PipelineConfig:
        """Get the current pipeline configuration."""
        if cls._instance is None:
            cls()
        return cls._instance._config

    @classmethod
    def reset(cls) -> PipelineConfig:
        """Discard the current configuration and restore defaults."""
        instance = cls()
        instance._config = PipelineConfig()
        return instance._config

    @classmethod
    def load_from_file(cls, config_path: str) -> PipelineConfig:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file.

        Returns:
            Loaded PipelineConfig instance.

        Raises:
            ConfigurationError: If the file is missing, is not valid JSON,
                or holds unknown or malformed settings.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in {config_path}: {e}", details={"path": str(config_path)}
            )
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration root must be an object: {config_path}")

        try:
            config = cls._dict_to_config(data)
        except TypeError as e:
            raise ConfigurationError(
                f"Invalid configuration in {config_path}: {e}",
                details={"path": str(config_path)},
            )

        instance = cls()
        instance._config = config
        return instance._config

    @classmethod
    def load_from_env(cls) -> PipelineConfig:
        """
        Load configuration from environment variables.

        Environment variables are prefixed with GITSOURCE_.

        Returns:
            PipelineConfig with environment overrides applied.
        """
        instance = cls()
        config = instance._config

        if os.getenv("GITSOURCE_WORK_DIR"):
            config.work_dir = os.getenv("GITSOURCE_WORK_DIR")

        if os.getenv("GITSOURCE_STORAGE_DIR"):
            config.storage.storage_dir = os.getenv("GITSOURCE_STORAGE_DIR")

        if os.getenv("GITSOURCE_GIT_EXECUTABLE"):
            config.ingestion.git_executable = os.getenv("GITSOURCE_GIT_EXECUTABLE")

        if os.getenv("GITSOURCE_GIT_TIMEOUT"):
            config.ingestion.git_timeout = int(os.getenv("GITSOURCE_GIT_TIMEOUT"))

        if os.getenv("GITSOURCE_MAX_WORKERS"):
            config.ingestion.max_workers = int(os.getenv("GITSOURCE_MAX_WORKERS"))

        if os.getenv("GITSOURCE_VERBOSE"):
            config.verbose = os.getenv("GITSOURCE_VERBOSE").lower() in ("true", "1", "yes")

        return config

    @staticmethod
    def _dict_to_config(data: dict) -> PipelineConfig:
        """Convert a dictionary to PipelineConfig."""
        config = PipelineConfig()

        if "ingestion" in data:
            config.ingestion = IngestionConfig(**data["ingestion"])

        if "storage" in data:
            config.storage = StorageConfig(**data["storage"])

        if "sources" in data:
            config.sources = [SourceConfig.from_dict(s) for s in data["sources"]]

        if "verbose" in data:
            config.verbose = data["verbose"]

        if "work_dir" in data:
            config.work_dir = data["work_dir"]

        if "cache_namespace" in data:
            config.cache_namespace = data["cache_namespace"]

        return config

    @classmethod
    def save_to_file(cls, config_path: str) -> None:
        """
        Save current configuration to a JSON file.

        Args:
            config_path: Path to save the configuration file.
        """
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        config = cls.get()
        data = cls._config_to_dict(config)

        with open(config_path, "w") as f:
            json.dump(data, f, indent=2)

    @staticmethod
    def _config_to_dict(config: PipelineConfig) -> dict:
        """Convert PipelineConfig to a dictionary."""
        return {
            "ingestion": {
                "git_executable": config.ingestion.git_executable,
                "git_timeout": config.ingestion.git_timeout,
                "max_workers": config.ingestion.max_workers,
            },
            "storage": {
                "storage_dir": config.storage.storage_dir,
            },
            "sources": [s.to_dict() for s in config.sources],
            "verbose": config.verbose,
            "work_dir": config.work_dir,
            "cache_namespace": config.cache_namespace,
        }
