"""
Custom exceptions for the git source ingestion engine.

Provides a hierarchy of exceptions for the synchronization, extraction
and storage stages, enabling precise error handling and clear failure
reporting.
"""

from typing import List, Optional


class PipelineError(Exception):
    """Base exception for all pipeline-related errors."""

    def __init__(self, message: str, stage: str = None, details: dict = None):
        super().__init__(message)
        self.stage = stage
        self.details = details or {}

    def __str__(self):
        base_msg = super().__str__()
        if self.stage:
            return f"[{self.stage}] {base_msg}"
        return base_msg


class IngestionError(PipelineError):
    """Raised when repository synchronization or ingestion fails."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="Ingestion", details=details)


class ConfigurationError(PipelineError):
    """Raised when a source configuration is invalid."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="Configuration", details=details)


class StorageError(PipelineError):
    """Raised when storage operations fail."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="Storage", details=details)


class SyncFatalError(IngestionError):
    """Raised when the local mirror exists but tracks a different remote."""

    def __init__(self, path: str, remote: str, reason: str = None):
        message = f"Can't clone to target destination: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(
            message,
            details={"path": path, "remote": remote, "reason": reason},
        )
        self.path = path
        self.remote = remote


class GitCommandError(IngestionError):
    """Raised when the git executable fails, times out, or is missing."""

    def __init__(
        self,
        command: List[str],
        returncode: Optional[int] = None,
        stderr: str = "",
        reason: str = None,
    ):
        if reason is None:
            reason = stderr.strip() or f"exit status {returncode}"
        super().__init__(
            f"Git command failed: {' '.join(command)}: {reason}",
            details={
                "command": command,
                "returncode": returncode,
                "stderr": stderr,
            },
        )
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class NoUpstreamError(IngestionError):
    """Raised when a branch has no tracking reference to reset against."""

    def __init__(self, branch: str, path: str = None):
        super().__init__(
            f"Branch '{branch}' has no upstream tracking reference",
            details={"branch": branch, "path": path},
        )
        self.branch = branch
