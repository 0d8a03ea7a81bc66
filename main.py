#!/usr/bin/env python3
"""
Git Source Ingestion - Main Entry Point

Mirrors remote git repositories and extracts per-file contributor
and commit-log metadata.
"""

from gitsource.cli import main

if __name__ == "__main__":
    main()
