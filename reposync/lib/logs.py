"""
Logging configuration for the reposync CLI.

Library modules only create loggers; handlers are installed here, once,
by the command-line entry point.
"""

import logging
import sys

CONSOLE_FORMAT = "[%(asctime)s] %(levelname)-7s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbose: bool = False) -> None:
    """
    Configure the root logger to write timestamped lines to stderr.

    Idempotent: repeated calls won't create duplicate handlers.
    """
    root_logger = logging.getLogger()
    level = logging.DEBUG if verbose else logging.INFO
    root_logger.setLevel(level)

    for handler in root_logger.handlers:
        if getattr(handler, "_reposync", False):
            handler.setLevel(level)
            return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, DATE_FORMAT))
    handler.setLevel(level)
    handler._reposync = True
    root_logger.addHandler(handler)

    # The state machine library logs every transition at INFO
    logging.getLogger("transitions").setLevel(logging.WARNING)
