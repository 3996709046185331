"""Command line interface for release-version."""

from __future__ import annotations

from release_version.cli.app import app, main

__all__ = ["app", "main"]
