"""Logging and console setup for CLI"""

from rich.console import Console

import settings
from utils.debug_console import configure_logging, create_debug_console


def setup_console(debug: bool, command: str) -> Console:
    """
    Configure logging and return the console for this CLI run

    Args:
        debug: Whether debug mode is enabled
        command: The subcommand being run, recorded in the debug log

    Returns:
        Console instance (either regular or debug-capturing)
    """
    debug_logger = configure_logging(
        level=settings.LOG_LEVEL,
        debug=debug,
        log_file=settings.DEBUG_LOG_FILE,
    )

    console = create_debug_console(debug_enabled=debug, debug_logger=debug_logger)
    if debug_logger:
        debug_logger.debug("[CLI] ===== CLI SESSION STARTED =====")
        debug_logger.debug(f"[CLI] Command: {command}")
    return console
