"""
utils.py
--------
Logging, timing decorators, and shared helper functions.
"""

import os
import logging
import random
import time
import functools
from datetime import datetime
from pathlib import Path
from typing import Any, Hashable, Iterable, List, Optional

import numpy as np

PACKAGE_LOGGER = "textmining"


def get_logger(name: str, log_dir: Optional[str] = None,
               level: Optional[str] = None) -> logging.Logger:
    """
    Return a named logger writing to the console and, optionally, a daily file.

    Module loggers below the package logger (``textmining.*``) get no
    handlers or level of their own: they propagate to the package logger,
    which alone prints, so each record is emitted once.

    Parameters
    ----------
    name    : Logger name (typically the module __name__).
    log_dir : Directory for log files. Defaults to $TEXTMINING_LOG_DIR;
              no file handler when unset.
    level   : Logging level string ("DEBUG", "INFO", "WARNING", "ERROR").
              Defaults to $TEXTMINING_LOG_LEVEL or "INFO".

    Returns
    -------
    logging.Logger
    """
    logger = logging.getLogger(name)

    if name.startswith(PACKAGE_LOGGER + "."):
        return logger
    if logger.handlers:          # avoid duplicate handlers on re-import
        return logger

    level = level or os.getenv("TEXTMINING_LOG_LEVEL", "INFO")
    log_dir = log_dir or os.getenv("TEXTMINING_LOG_DIR")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Console handler
    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    # File handler
    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        log_file = os.path.join(
            log_dir, f"textmining_{datetime.now().strftime('%Y%m%d')}.log"
        )
        fh = logging.FileHandler(log_file)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    return logger


def setup_logging(level: str = "INFO", log_dir: Optional[str] = None) -> logging.Logger:
    """
    (Re)configure the package logger; module loggers propagate to it.

    Calling it again replaces the previous handlers and level.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    return get_logger(PACKAGE_LOGGER, log_dir=log_dir, level=level)


def timeit(func):
    """Decorator that logs the execution time of any function."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__)
        t0 = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed = time.perf_counter() - t0
        logger.debug("%s completed in %.3f s", func.__qualname__, elapsed)
        return result
    return wrapper


def set_random_seed(seed: int = 42) -> None:
    """Seed the stdlib and numpy generators."""
    random.seed(seed)
    np.random.seed(seed)


def sorted_ids(ids: Iterable[Hashable]) -> List[Any]:
    """
    Sort document/group ids deterministically.

    Natural ordering when the ids are mutually comparable, otherwise by
    (type name, repr) so mixed id types still sort the same way every run.
    """
    ids = list(ids)
    try:
        return sorted(ids)
    except TypeError:
        return sorted(ids, key=lambda x: (type(x).__name__, repr(x)))
