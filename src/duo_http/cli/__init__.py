"""
CLI module for duo-http.

Provides the `duo-http` command-line interface.
"""

from __future__ import annotations

from duo_http.cli.main import app, cli

__all__ = ["app", "cli"]
