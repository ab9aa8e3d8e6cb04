import logging

import pytest

from fidoadapter.utils.logger import get_logger, setup_logging


@pytest.fixture
def package_logger():
    logger = get_logger("fidoadapter")
    level = logger.level
    yield logger
    setup_logging()
    logger.setLevel(level)


def file_handlers(logger):
    return [h for h in logger.handlers if isinstance(h, logging.FileHandler)]


def test_levels_are_reset_between_calls(package_logger):
    setup_logging(verbose=True)
    assert package_logger.level == logging.DEBUG

    setup_logging(quiet=True)
    assert package_logger.level == logging.WARNING

    setup_logging()
    assert package_logger.level == logging.INFO


def test_log_file_handler_is_replaced(package_logger, tmp_path):
    first, second = tmp_path / "first.log", tmp_path / "second.log"

    setup_logging(log_file=str(first))
    (old_handler,) = file_handlers(package_logger)
    setup_logging(log_file=str(second))
    (handler,) = file_handlers(package_logger)

    assert handler is not old_handler
    assert old_handler.stream is None
    get_logger("fidoadapter.test").info("written to the second file")
    handler.flush()
    assert "written to the second file" in second.read_text()
    assert "written to the second file" not in first.read_text()


def test_log_file_handler_is_removed_without_log_file(package_logger, tmp_path):
    setup_logging(log_file=str(tmp_path / "run.log"))
    setup_logging()
    assert file_handlers(package_logger) == []
