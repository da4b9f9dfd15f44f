"""
Tests for logging setup
"""

import logging
import sys

import pytest

from tebpaper.utils.config import Config, LoggingConfig
from tebpaper.utils.logger import logger, setup_logging


@pytest.fixture
def restore_loguru():
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_standard_logging_is_routed_to_file(tmp_path, monkeypatch, restore_loguru):
    log_file = tmp_path / "logs" / "tebpaper.log"
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    monkeypatch.setenv("LOG_FILE", str(log_file))

    setup_logging(Config().logging)
    logging.getLogger("tebpaper.services.generation_service").warning("digest 3 failed")
    logger.info("fetched 12 articles")
    logger.debug("not at this level")
    logger.remove()

    content = log_file.read_text()
    assert "digest 3 failed" in content
    assert "fetched 12 articles" in content
    assert "not at this level" not in content


def test_defaults_come_from_environment(tmp_path, monkeypatch, restore_loguru):
    log_file = tmp_path / "env" / "debug.log"
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("LOG_FILE", str(log_file))

    setup_logging()
    logger.debug("window starts at watermark")
    logger.remove()

    assert "window starts at watermark" in log_file.read_text()


def test_explicit_config(tmp_path, restore_loguru):
    log_file = tmp_path / "custom.log"

    setup_logging(LoggingConfig(level="ERROR", file=str(log_file)))
    logger.warning("feed slow")
    logger.error("curation unavailable")
    logger.remove()

    content = log_file.read_text()
    assert "curation unavailable" in content
    assert "feed slow" not in content
