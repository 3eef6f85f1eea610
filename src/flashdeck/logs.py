"""Console logging setup."""
import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "flashdeck"


def setup_logging(level: str = "INFO", console: Console | None = None) -> logging.Logger:
    """Attach a rich console handler to the package logger.

    Calling it again replaces the previous handler instead of adding another.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper()))
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(console=console, show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger
