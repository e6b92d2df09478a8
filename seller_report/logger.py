import logging
import sys
from logging.handlers import RotatingFileHandler
from . import settings

def setup_logger(name: str = None, log_level: int | str = None) -> logging.Logger:
    """
    Sets up a logger (the root one by default, so every seller_report module
    propagates to it) with console and rotating-file output.
    Level and file location come from settings unless given.
    """
    logger = logging.getLogger(name)
    log_level = log_level if log_level is not None else settings.LOG_LEVEL
    logger.setLevel(log_level)

    # Only our own handlers count; test runners attach theirs to the root logger
    if logger.handlers:
        return logger

    # Console stays minimal, the file keeps the full context
    console_format = logging.Formatter("%(message)s")
    file_format = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    settings.LOG_DIR.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        settings.LOG_DIR / settings.LOG_FILENAME,
        maxBytes=settings.LOG_MAX_BYTES,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(file_format)
    logger.addHandler(file_handler)

    return logger
