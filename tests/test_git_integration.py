"""
Integration tests running the sync engine and extractors against real
git repositories served over file:// URLs.
"""

import shutil
import subprocess
import tempfile
import unittest
from pathlib import Path

from gitsource.core.config import LogOptions
from gitsource.core.exceptions import GitCommandError, SyncFatalError
from gitsource.ingestion.git_handler import GitHandler
from gitsource.ingestion.ingestor import IngestionOptions, RepositoryIngestor
from gitsource.ingestion.metadata import MetadataExtractor
from gitsource.ingestion.repository import SyncAction, SyncRequest
from gitsource.ingestion.sync import SyncEngine
from gitsource.storage.backend import MemoryStorageBackend

GIT_AVAILABLE = GitHandler().is_available()

ADA = "Ada Lovelace <ada@example.com>"
BOB = "Bob <bob@example.com>"


def git(cwd, *args):
    """Run git with a fixed identity, failing the test on error."""
    cmd = [
        "git",
        "-c", "user.name=Test",
        "-c", "user.email=test@example.com",
        "-c", "commit.gpgsign=false",
        *args,
    ]
    return subprocess.run(cmd, cwd=cwd, check=True, capture_output=True, text=True).stdout


def commit(repo, relative, content, author, message):
    path = repo / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    git(repo, "add", relative)
    git(repo, "commit", "-q", "-m", message, f"--author={author}")


@unittest.skipUnless(GIT_AVAILABLE, "git executable not available")
class TestGitIntegration(unittest.TestCase):
    """End-to-end tests against local repositories."""

    def setUp(self):
        self.tmpdir = Path(tempfile.mkdtemp())
        self.upstream = self.tmpdir / "upstream"
        self.upstream.mkdir()
        git(self.upstream, "init", "-q")
        git(self.upstream, "symbolic-ref", "HEAD", "refs/heads/main")
        commit(self.upstream, "README.md", "one\n", ADA, "Add readme")
        commit(self.upstream, "docs/intro.md", "intro\n", ADA, "Add intro")
        commit(self.upstream, "docs/intro.md", "intro v2\n", BOB, "Revise intro")
        commit(self.upstream, "README.md", "two\n", ADA, "Update readme")

        self.remote = self.upstream.as_uri()
        self.local = self.tmpdir / "cache" / "docs"
        self.git = GitHandler()
        self.engine = SyncEngine(self.git)

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def _request(self, **kwargs):
        params = {"name": "docs", "remote_url": self.remote, "local_path": self.local}
        params.update(kwargs)
        return SyncRequest(**params)

    def test_clone_then_update(self):
        first = self.engine.ensure_synced(self._request(depth=1))

        self.assertEqual(first.action, SyncAction.CLONED)
        self.assertEqual(first.resolved_ref, "main")
        self.assertEqual((self.local / "README.md").read_text(), "two\n")

        commit(self.upstream, "CHANGELOG.md", "v1\n", BOB, "Add changelog")
        second = self.engine.ensure_synced(self._request(depth=1))

        self.assertEqual(second.action, SyncAction.UPDATED)
        self.assertEqual(second.tracking_ref, "origin/main")
        self.assertEqual(second.resolved_ref, "main")
        self.assertTrue((self.local / "CHANGELOG.md").exists())

    def test_update_discards_local_changes(self):
        self.engine.ensure_synced(self._request(depth="all"))
        (self.local / "README.md").write_text("local edit\n")

        self.engine.ensure_synced(self._request(depth="all"))

        self.assertEqual((self.local / "README.md").read_text(), "two\n")

    def test_mismatched_remote_is_fatal(self):
        self.engine.ensure_synced(self._request())
        other = (self.tmpdir / "other").as_uri()

        with self.assertRaises(SyncFatalError):
            self.engine.ensure_synced(self._request(remote_url=other))

        self.assertEqual((self.local / "README.md").read_text(), "two\n")

    def test_detached_mirror_is_pinned(self):
        self.engine.ensure_synced(self._request(depth="all"))
        git(self.local, "checkout", "-q", "--detach", "HEAD~1")
        commit(self.upstream, "CHANGELOG.md", "v1\n", BOB, "Add changelog")

        result = self.engine.ensure_synced(self._request(depth="all"))

        self.assertEqual(result.action, SyncAction.PINNED)
        self.assertEqual(result.resolved_ref, "HEAD")
        self.assertEqual((self.local / "README.md").read_text(), "one\n")
        self.assertFalse((self.local / "CHANGELOG.md").exists())

    def test_contributors_and_log(self):
        self.engine.ensure_synced(self._request(depth="all"))
        extractor = MetadataExtractor(self.git, self.local)

        contributors = extractor.list_contributors()
        self.assertEqual(
            [(c.name, c.email, c.commit_count) for c in contributors],
            [("Ada Lovelace", "ada@example.com", 3), ("Bob", "bob@example.com", 1)],
        )

        intro = extractor.list_contributors(self.local / "docs" / "intro.md")
        self.assertEqual(sorted(c.commit_count for c in intro), [1, 1])

        latest = extractor.get_log("README.md", LogOptions(pretty="format:%s"))
        self.assertEqual(latest, "Update readme")

        history = extractor.get_log("README.md", LogOptions(pretty="format:%s", count=0))
        self.assertEqual(history.splitlines(), ["Update readme", "Add readme"])

    def test_uncommitted_path_has_empty_history(self):
        self.engine.ensure_synced(self._request(depth="all"))
        (self.local / "draft.md").write_text("draft\n")
        extractor = MetadataExtractor(self.git, self.local)

        self.assertEqual(extractor.list_contributors("draft.md"), [])
        self.assertEqual(extractor.get_log("draft.md"), "")

    def test_ingestion_pass(self):
        sink = MemoryStorageBackend()
        ingestor = RepositoryIngestor(self.git, sink, max_workers=2)

        summary = ingestor.run(
            self._request(depth="all"),
            ["**/*.md"],
            IngestionOptions(contributors="repo", log=LogOptions(pretty="format:%an")),
        )

        self.assertEqual(summary.repository.remote.ref, "main")
        self.assertEqual(
            [c.commit_count for c in sink.repositories[0].contributors], [3, 1]
        )
        by_path = {f.relative_path: f for f in sink.files}
        self.assertEqual(sorted(by_path), ["README.md", "docs/intro.md"])
        self.assertEqual(by_path["docs/intro.md"].log, "Bob")

    def test_clone_failure_raises_git_command_error(self):
        missing = (self.tmpdir / "missing").as_uri()

        with self.assertRaises(GitCommandError):
            self.engine.ensure_synced(self._request(remote_url=missing))


if __name__ == "__main__":
    unittest.main()
