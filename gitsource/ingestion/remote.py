"""
Parsing of git remote URLs into descriptive metadata.
"""

import re
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from gitsource.core.exceptions import ConfigurationError

# user@host:owner/repo.git
SCP_PATTERN = re.compile(
    r"^(?:(?P<user>[^@/\s]+)@)?(?P<host>[^:/\s]+):(?P<path>[^/\\].*)$"
)

SCHEME_PROTOCOLS = {
    "http": "http",
    "https": "https",
    "ssh": "ssh",
    "git+ssh": "ssh",
    "ssh+git": "ssh",
    "git": "git",
    "file": "file",
}


@dataclass(frozen=True)
class RemoteDescriptor:
    """Parsed form of a remote URL plus the ref the mirror settled on."""

    source: str
    protocol: str
    resource: str
    owner: str
    name: str
    port: Optional[int] = None
    ref: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}" if self.owner else self.name

    @property
    def web_link(self) -> Optional[str]:
        """Browser-viewable https link, without the .git suffix."""
        if not self.resource:
            return None
        host = self.resource
        if self.port and self.protocol in ("http", "https"):
            host = f"{host}:{self.port}"
        return f"https://{host}/{self.full_name}"

    def with_ref(self, ref: str) -> "RemoteDescriptor":
        """Return a copy carrying the resolved ref."""
        return replace(self, ref=ref)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "source": self.source,
            "protocol": self.protocol,
            "resource": self.resource,
            "port": self.port,
            "owner": self.owner,
            "name": self.name,
            "full_name": self.full_name,
            "web_link": self.web_link,
            "ref": self.ref,
        }


def parse_remote(url: str) -> RemoteDescriptor:
    """
    Parse a git remote URL.

    Supports http(s), ssh, git and file URLs, scp-style
    ``user@host:owner/repo.git`` remotes and plain local paths. Local
    paths carry the ``file`` protocol and no resource, so they have no
    web link.

    Args:
        url: Remote URL as configured.

    Returns:
        RemoteDescriptor without a ref.

    Raises:
        ConfigurationError: If the URL cannot be parsed.
    """
    source = url.strip()
    port = None

    if "://" not in source:
        match = SCP_PATTERN.match(source)
        if match:
            protocol = "ssh"
            host = match.group("host")
            path = match.group("path")
        else:
            protocol = "file"
            host = ""
            path = source.replace("\\", "/")
    else:
        parsed = urlparse(source)
        protocol = SCHEME_PROTOCOLS.get(parsed.scheme.lower())
        if protocol is None:
            raise ConfigurationError(
                f"Unsupported repository URL scheme: {parsed.scheme}",
                details={"url": url},
            )
        host = parsed.hostname or ""
        try:
            port = parsed.port
        except ValueError:
            raise ConfigurationError(
                f"Invalid port in repository URL: {url}", details={"url": url}
            )
        path = parsed.path

    path = path.strip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]
    segments = [s for s in path.split("/") if s and s not in (".", "..")]
    if not segments:
        raise ConfigurationError(
            f"Repository URL has no repository path: {url}", details={"url": url}
        )

    return RemoteDescriptor(
        source=source,
        protocol=protocol,
        resource=host,
        owner="/".join(segments[:-1]),
        name=segments[-1],
        port=port,
    )
