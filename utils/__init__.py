"""Shared utilities package for Penn Labs Platform Login"""

from .storage import RefreshTokenStorage
from .debug_console import (
    DebugCapturingConsole,
    create_debug_console,
    setup_debug_logger,
)

__all__ = [
    "RefreshTokenStorage",
    "DebugCapturingConsole",
    "create_debug_console",
    "setup_debug_logger",
]
