"""
Logging configuration
"""
import logging
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from tebpaper.utils.config import LoggingConfig


CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


class InterceptHandler(logging.Handler):
    """Forwards standard library records (service modules, SQLAlchemy) to loguru"""

    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(logging_config: Optional[LoggingConfig] = None):
    """
    Configure console and rotating file sinks from ``Config().logging``.

    LOG_LEVEL and LOG_FILE in the environment feed the defaults.
    """
    logging_config = logging_config or LoggingConfig()

    logger.remove()
    logger.add(sys.stdout, level=logging_config.level, format=CONSOLE_FORMAT, colorize=True)

    Path(logging_config.file).parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        logging_config.file,
        level=logging_config.level,
        format=FILE_FORMAT,
        rotation="10 MB",
        retention="30 days",
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
