"""Logging setup for match scoring runs."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

MATCH_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
CONSOLE_FORMAT = '%(levelname)s: %(message)s'


def setup_logging(
    log_dir: Optional[Path] = None,
    level: int = logging.INFO,
    log_to_file: bool = True,
    log_to_console: bool = True,
) -> logging.Logger:
    """
    Route ``qbscore.*`` log records to a match log file and/or stderr.

    Calling it again replaces the handlers from the previous call, so a
    session that scores several matches gets one log file per call.

    Args:
        log_dir: Where match_<timestamp>.log is written (default: ./logs)
        level: Minimum level for both handlers
        log_to_file: Write the match log file
        log_to_console: Echo records to stderr

    Returns:
        The ``qbscore`` logger
    """
    logger = logging.getLogger('qbscore')
    logger.setLevel(level)
    logger.handlers = []

    handlers: list[logging.Handler] = []
    if log_to_file:
        log_dir = log_dir if log_dir is not None else Path('logs')
        log_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        file_handler = logging.FileHandler(log_dir / f'match_{stamp}.log')
        file_handler.setFormatter(logging.Formatter(MATCH_LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        handlers.append(file_handler)

    if log_to_console:
        # stdout carries the score report
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        handlers.append(console_handler)

    for handler in handlers:
        handler.setLevel(level)
        logger.addHandler(handler)

    return logger
