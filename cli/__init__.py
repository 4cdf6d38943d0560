"""CLI package for Penn Labs Platform Login

Command-line stand-in for the login UI: drives the browser login and
manages the stored credentials.
"""

from cli.main import main

__all__ = [
    "main",
]
