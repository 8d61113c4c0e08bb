"""
LSP server for `[CB]:` annotations.

This module provides:
- Diagnostics for undeclared values
- Toggle code lenses and set-value commands
- Hover information with the declared cycle
- Workspace explorer tree on request
"""

from .server import create_server, start_server

__all__ = ["create_server", "start_server"]
