"""
Tests for the command-line interface.
"""

import json
import logging
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from click.testing import CliRunner

from gitsource.cli import cli
from gitsource.core.config import Config

from git_fakes import FakeGitBackend

REMOTE = "https://example.com/org/repo.git"


class TestCLI(unittest.TestCase):
    """Tests for CLI commands."""

    def setUp(self):
        self.tmpdir = Path(tempfile.mkdtemp())
        self.runner = CliRunner()
        Config.reset()

    def tearDown(self):
        Config.reset()
        for handler in logging.root.handlers[:]:
            logging.root.removeHandler(handler)
        shutil.rmtree(self.tmpdir)

    def _fake_git(self, config):
        return FakeGitBackend(clone_files={"README.md": "# repo\n", "docs/intro.md": "intro\n"})

    def test_init_writes_config(self):
        output = self.tmpdir / "config.json"

        result = self.runner.invoke(cli, ["init", "-o", str(output)], obj={})

        self.assertEqual(result.exit_code, 0)
        data = json.loads(output.read_text())
        self.assertEqual(data["cache_namespace"], "gitsource")

    def test_sync_rejects_invalid_remote(self):
        result = self.runner.invoke(cli, ["sync", "docs", "ftp://example.com/repo.git"], obj={})

        self.assertEqual(result.exit_code, 1)
        self.assertIn("Error:", result.output)

    def test_sync_rejects_invalid_depth(self):
        result = self.runner.invoke(cli, ["sync", "docs", REMOTE, "--depth", "deep"], obj={})

        self.assertEqual(result.exit_code, 1)
        self.assertIn("Invalid depth", result.output)

    def test_sync_clones_into_work_dir(self):
        with mock.patch("gitsource.engine.GitHandler", self._fake_git):
            result = self.runner.invoke(
                cli, ["sync", "docs", REMOTE, "--work-dir", str(self.tmpdir)], obj={}
            )

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("cloned", result.output)
        self.assertTrue((self.tmpdir / ".cache" / "gitsource" / "docs" / "README.md").exists())

    def test_ingest_stores_records(self):
        storage = self.tmpdir / "records"

        with mock.patch("gitsource.engine.GitHandler", self._fake_git):
            result = self.runner.invoke(cli, [
                "ingest", "docs", REMOTE,
                "--work-dir", str(self.tmpdir),
                "--storage-dir", str(storage),
                "--pattern", "**/*.md",
                "--contributors", "path",
            ], obj={})

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Files:   2", result.output)
        repository = json.loads((storage / "docs" / "repository.json").read_text())
        self.assertEqual(repository["ref"], "main")
        lines = (storage / "docs" / "files.jsonl").read_text().splitlines()
        self.assertEqual(len(lines), 2)
        self.assertEqual(json.loads(lines[0])["contributors"], [])

    def test_run_ingests_configured_sources(self):
        config_path = self.tmpdir / "config.json"
        config_path.write_text(json.dumps({
            "work_dir": str(self.tmpdir),
            "storage": {"storage_dir": str(self.tmpdir / "records")},
            "sources": [{"name": "docs", "remote": REMOTE, "patterns": ["README.md"]}],
        }))

        with mock.patch("gitsource.engine.GitHandler", self._fake_git):
            result = self.runner.invoke(cli, ["run", str(config_path)], obj={})

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Files:   1", result.output)

    def test_run_reports_malformed_config(self):
        config_path = self.tmpdir / "config.json"
        for content in ("{not json", json.dumps({"sources": [{"name": "docs"}]})):
            config_path.write_text(content)

            result = self.runner.invoke(cli, ["run", str(config_path)], obj={})

            self.assertEqual(result.exit_code, 1, result.output)
            self.assertIn("Error:", result.output)
            self.assertNotIsInstance(result.exception, (TypeError, ValueError))


if __name__ == "__main__":
    unittest.main()
