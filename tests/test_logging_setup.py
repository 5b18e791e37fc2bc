import logging
from logging.handlers import RotatingFileHandler

from seocheck.logging_setup import get_logger, setup_logging


def test_setup_is_idempotent():
    logger = setup_logging("seocheck.test.idempotent", "debug")
    setup_logging("seocheck.test.idempotent", "debug")
    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG


def test_unknown_level_falls_back_to_warning():
    logger = setup_logging("seocheck.test.level", "chatty")
    assert logger.level == logging.WARNING


def test_log_file_adds_rotating_handler(tmp_path):
    log_file = tmp_path / "logs" / "seocheck.log"
    logger = setup_logging("seocheck.test.file", "info", log_file)
    try:
        assert any(isinstance(h, RotatingFileHandler) for h in logger.handlers)
        logger.info("audit started")
        for h in logger.handlers:
            h.flush()
        assert "audit started" in log_file.read_text(encoding="utf-8")
    finally:
        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()


def test_get_logger_returns_child():
    assert get_logger("seocheck.runner").name == "seocheck.runner"
