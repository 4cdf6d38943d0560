"""Logging setup and a Rich console that mirrors its output into the debug log.

With ``--debug`` every message printed to the terminal is also written, as
plain text, to the same file as the library's log records so a login session
can be replayed from one file.
"""

import io
import logging
import os
import re
from typing import Optional
from rich.console import Console as RichConsole

_ANSI_ESCAPE = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')
_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class DebugCapturingConsole(RichConsole):
    """Rich Console that also logs a plain-text copy of everything it prints

    The terminal keeps its colours and markup. The log gets the same line
    stripped of styling and prefixed with ``[CONSOLE]``, so prompts such as
    the login steps appear in order next to the HTTP log records.
    """

    def __init__(self, debug_logger: Optional[logging.Logger] = None, *args, **kwargs):
        """
        Args:
            debug_logger: Logger receiving the captured lines; capture is off if None
            *args, **kwargs: Passed through to the Rich Console
        """
        super().__init__(*args, **kwargs)
        self.debug_logger = debug_logger
        self._log_prefix = "[CONSOLE] "

    def print(self, *objects, **kwargs):
        """Print as usual, then log the plain-text rendering if it is not blank"""
        super().print(*objects, **kwargs)

        if self.debug_logger and self.debug_logger.isEnabledFor(logging.DEBUG):
            plain_text = self._render_to_plain_text(*objects, **kwargs)
            if plain_text.strip():
                self.debug_logger.debug(f"{self._log_prefix}{plain_text}")

    def _render_to_plain_text(self, *objects, **kwargs) -> str:
        """Render ``objects`` at this console's width with markup and ANSI codes removed"""
        buffer = io.StringIO()
        temp_console = RichConsole(
            file=buffer,
            force_terminal=False,
            width=self.width,
            legacy_windows=False
        )
        temp_console.print(*objects, **kwargs)
        return _ANSI_ESCAPE.sub('', buffer.getvalue()).rstrip()


def create_debug_console(debug_enabled: bool = False,
                         debug_logger: Optional[logging.Logger] = None) -> RichConsole:
    """
    Create the console platform-login prints to.

    Args:
        debug_enabled: Whether ``--debug`` was given
        debug_logger: Console-capture logger from :func:`configure_logging`

    Returns:
        DebugCapturingConsole when debugging with a logger, a plain Console otherwise
    """
    if debug_enabled and debug_logger:
        return DebugCapturingConsole(debug_logger=debug_logger)
    return RichConsole()


def setup_debug_logger(log_file: str) -> logging.Logger:
    """
    Set up the ``debug_console`` logger that records captured console output.

    The logger does not propagate, so captured lines land in ``log_file``
    once and never reach the stderr handler.

    Args:
        log_file: Debug log to append to

    Returns:
        The configured logger
    """
    logger = logging.getLogger("debug_console")
    logger.setLevel(logging.DEBUG)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter('%(asctime)s - %(message)s'))
    logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def configure_logging(level: str = "warning", debug: bool = False,
                      log_file: Optional[str] = None) -> Optional[logging.Logger]:
    """
    Configure the root logger for a CLI run.

    Without ``debug`` records at ``level`` and above go to stderr. With
    ``debug`` everything is logged at DEBUG to stderr and appended to
    ``log_file``, and a console-capture logger writing to the same file is
    returned for use with :func:`create_debug_console`.
    """
    root_logger = logging.getLogger()

    # Clear existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(_LOG_FORMAT)
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if not debug:
        root_logger.setLevel(getattr(logging, str(level).upper(), logging.WARNING))
        return None

    root_logger.setLevel(logging.DEBUG)
    log_file = os.path.abspath(log_file or "platform_login_debug.log")
    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    logging.getLogger(__name__).info(f"Debug logging enabled - appending to {log_file}")
    return setup_debug_logger(log_file)
