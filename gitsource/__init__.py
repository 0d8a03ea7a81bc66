"""
Git source ingestion.

Mirrors remote git repositories onto local disk, keeps the mirrors
current across runs, and extracts contributor and commit-log metadata
for every file for downstream ingestion.
"""

__version__ = "1.0.0"
__author__ = "gitsource contributors"
