"""
CLI command modules for duo-http.
"""

from __future__ import annotations

from duo_http.cli.commands import api, config

__all__ = ["api", "config"]
