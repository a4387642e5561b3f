"""
CLI utility modules for shared functionality.

Provides common utilities used across CLI commands:
- client: Authentication and API client access
- helpers: Parameter parsing
"""

from duo_http.cli.utils.client import get_client
from duo_http.cli.utils.helpers import parse_params

__all__ = [
    "get_client",
    "parse_params",
]
