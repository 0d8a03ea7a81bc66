"""
Unit tests for contributor and commit-log extraction.
"""

import unittest
from pathlib import Path

from gitsource.core.config import LogOptions
from gitsource.ingestion.metadata import MetadataExtractor, parse_contributors
from gitsource.ingestion.repository import ContributorEntry

from git_fakes import FakeGitBackend

SHORTLOG = (
    "     3\tJane Q. Doe <jane@example.com>\n"
    "     1\tbot <bot@ci.example.com>\n"
)


class TestParseContributors(unittest.TestCase):
    """Tests for shortlog parsing."""

    def test_parses_counts_names_and_emails(self):
        contributors = parse_contributors(SHORTLOG)

        self.assertEqual(contributors, [
            ContributorEntry(name="Jane Q. Doe", email="jane@example.com", commit_count=3),
            ContributorEntry(name="bot", email="bot@ci.example.com", commit_count=1),
        ])

    def test_preserves_emitted_order(self):
        output = "     1\tA <a@x>\n    12\tB <b@x>\n"

        counts = [c.commit_count for c in parse_contributors(output)]

        self.assertEqual(counts, [1, 12])

    def test_empty_output_means_no_contributors(self):
        self.assertEqual(parse_contributors(""), [])
        self.assertEqual(parse_contributors(None), [])
        self.assertEqual(parse_contributors("\n  \n"), [])

    def test_same_name_different_emails_kept_separate(self):
        output = "     2\tSam <sam@work>\n     2\tSam <sam@home>\n"

        self.assertEqual(len(parse_contributors(output)), 2)

    def test_unparseable_lines_are_skipped(self):
        output = "garbage line\n     4\tAlex <alex@x>\n"

        contributors = parse_contributors(output)

        self.assertEqual(len(contributors), 1)
        self.assertEqual(contributors[0].name, "Alex")


class TestMetadataExtractor(unittest.TestCase):
    """Tests for history queries against a mirror."""

    def setUp(self):
        self.root = Path("/mirror")
        self.git = FakeGitBackend(
            shortlog={None: SHORTLOG, "docs/intro.md": "     2\tJane Q. Doe <jane@example.com>\n"},
            logs={"docs/intro.md": ["commit c3", "commit c2", "commit c1"]},
        )
        self.extractor = MetadataExtractor(self.git, self.root)

    def test_repository_contributors(self):
        contributors = self.extractor.list_contributors()

        self.assertEqual([c.commit_count for c in contributors], [3, 1])
        self.assertEqual(
            self.git.raw_calls("shortlog"), [["shortlog", "-n", "-s", "-e", "HEAD"]]
        )

    def test_path_contributors_use_relative_pathspec(self):
        contributors = self.extractor.list_contributors(self.root / "docs" / "intro.md")

        self.assertEqual(len(contributors), 1)
        self.assertEqual(
            self.git.raw_calls("shortlog"),
            [["shortlog", "-n", "-s", "-e", "HEAD", "--", "docs/intro.md"]],
        )

    def test_uncommitted_path_has_no_contributors(self):
        self.assertEqual(self.extractor.list_contributors("drafts/new.md"), [])

    def test_log_defaults_to_one_commit(self):
        log = self.extractor.get_log("docs/intro.md")

        self.assertEqual(log, "commit c3")
        self.assertEqual(self.git.raw_calls("log"), [["log", "-1", "--", "docs/intro.md"]])

    def test_log_zero_count_is_unbounded(self):
        log = self.extractor.get_log("docs/intro.md", LogOptions(count=0))

        self.assertEqual(log, "commit c3\ncommit c2\ncommit c1")
        self.assertEqual(self.git.raw_calls("log"), [["log", "--", "docs/intro.md"]])

    def test_log_negative_count_is_unbounded(self):
        self.extractor.get_log("docs/intro.md", LogOptions(count=-1))

        self.assertEqual(self.git.raw_calls("log"), [["log", "--", "docs/intro.md"]])

    def test_log_pretty_forwarded_verbatim(self):
        self.extractor.get_log("docs/intro.md", LogOptions(pretty="format:%H %an", count=2))

        self.assertEqual(
            self.git.raw_calls("log"),
            [["log", "-2", "--pretty=format:%H %an", "--", "docs/intro.md"]],
        )

    def test_log_for_uncommitted_path_is_empty(self):
        self.assertEqual(self.extractor.get_log("drafts/new.md"), "")


if __name__ == "__main__":
    unittest.main()
