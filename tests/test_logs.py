import io
import logging

import pytest
from rich.console import Console
from rich.logging import RichHandler

from flashdeck.logs import LOGGER_NAME, setup_logging


@pytest.fixture(autouse=True)
def restore_package_logger():
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


def quiet_console():
    return Console(file=io.StringIO(), width=200)


def test_setup_logging_writes_to_console():
    console = quiet_console()
    setup_logging("INFO", console=console)
    logging.getLogger("flashdeck.reviews").info("item 1 graded 5")
    assert "item 1 graded 5" in console.file.getvalue()


def test_setup_logging_respects_level():
    console = quiet_console()
    setup_logging("WARNING", console=console)
    logging.getLogger("flashdeck.sm2").debug("transition")
    assert "transition" not in console.file.getvalue()


def test_setup_logging_is_idempotent():
    setup_logging(console=quiet_console())
    logger = setup_logging("debug", console=quiet_console())
    rich_handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
    assert len(rich_handlers) == 1
    assert logger.level == logging.DEBUG
