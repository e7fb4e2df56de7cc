import logging
import os
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional, Union


def setup_logger(name: str = __name__,
                 level: Union[int, str] = logging.INFO,
                 log_dir: Optional[str] = None) -> logging.Logger:
    """
    Set up logger with console and (optionally) file handlers.

    Calling again for the same name updates the logger and console levels,
    and adds file handlers for a log_dir that has none yet.
    """

    # Create logger
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Format
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Console handler (file handlers are StreamHandlers too)
    console_handlers = [h for h in logger.handlers
                        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)]
    if console_handlers:
        for handler in console_handlers:
            handler.setLevel(level)
    else:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if not log_dir:
        return logger

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    # Avoid adding file handlers for the same directory twice
    existing_files = {Path(h.baseFilename) for h in logger.handlers
                      if isinstance(h, logging.FileHandler)}
    if Path(os.path.abspath(log_path / 'black_litterman.log')) in existing_files:
        return logger

    # File handler - rotating by size
    file_handler = RotatingFileHandler(
        log_path / 'black_litterman.log',
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=10
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    # Error file handler
    error_handler = RotatingFileHandler(
        log_path / 'errors.log',
        maxBytes=5 * 1024 * 1024,  # 5MB
        backupCount=5
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(formatter)
    logger.addHandler(error_handler)

    return logger
