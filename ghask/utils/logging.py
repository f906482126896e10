# The MIT License (MIT)
# Copyright © 2025 Entrius

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = 'ghask'

logger = logging.getLogger(LOGGER_NAME)

_handler: Optional[logging.Handler] = None


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> logging.Logger:
    """Send ghask log records to stderr through rich.

    WARNING and above by default, DEBUG with ``verbose``. Calling it again
    replaces the handler installed by the previous call.
    """
    global _handler

    level = logging.DEBUG if verbose else logging.WARNING

    if _handler is not None:
        logger.removeHandler(_handler)

    _handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=verbose,
        show_path=False,
        markup=False,
    )
    _handler.setFormatter(logging.Formatter('%(message)s'))
    _handler.setLevel(level)

    logger.addHandler(_handler)
    logger.setLevel(level)
    logger.propagate = False

    return logger
