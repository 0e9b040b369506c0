"""
logger.py - Centralized logging configuration for portsweep.

The console handler writes to stderr so log lines never interleave with
the port listing on stdout.  A file handler is attached only when the
operator asks for one.
"""

import logging
from typing import Optional

LOGGER_NAME = "portsweep"


def setup_logger(
    name: str = LOGGER_NAME,
    verbose: bool = False,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Create and return a configured logger instance.

    - Console output uses WARNING level (DEBUG when *verbose*)
    - File output, when *log_file* is given, uses DEBUG level

    Args:
        name:     Logger name identifier.
        verbose:  Lower the console threshold to DEBUG.
        log_file: Optional path of a log file to append to.

    Returns:
        Configured logging.Logger instance.
    """
    logger = logging.getLogger(name)

    # Prevent duplicate handlers if setup_logger is called multiple times
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)

    # ---------- Console handler ----------
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_fmt = logging.Formatter(
        "[%(asctime)s] %(levelname)-8s  %(message)s",
        datefmt="%H:%M:%S",
    )
    console_handler.setFormatter(console_fmt)
    logger.addHandler(console_handler)

    # ---------- File handler (DEBUG and above) ----------
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_fmt = logging.Formatter(
            "[%(asctime)s] [%(levelname)-8s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        file_handler.setFormatter(file_fmt)
        logger.addHandler(file_handler)
        logger.debug("Logger initialised - log file: %s", log_file)

    return logger
