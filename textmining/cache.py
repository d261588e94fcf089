"""
cache.py
--------
Optional on-disk memoization for the expensive collaborators (corpus
loading, topic-model fits). Results are keyed by a content hash of the
function name and its arguments; the core never caches implicitly.
"""

import os
from typing import Any, Callable

import joblib

from textmining.utils import get_logger

log = get_logger(__name__)


def cache_key(func: Callable, *args, **kwargs) -> str:
    """Content hash of a call."""
    name = f"{func.__module__}.{getattr(func, '__qualname__', repr(func))}"
    return joblib.hash((name, args, sorted(kwargs.items())))


def memoize(cache_dir: str, func: Callable, *args, **kwargs) -> Any:
    """
    Return ``func(*args, **kwargs)``, reusing a stored result when present.

    Parameters
    ----------
    cache_dir : directory holding one .pkl file per distinct call
    func : the expensive function
    """
    os.makedirs(cache_dir, exist_ok=True)
    path = os.path.join(cache_dir, f"{cache_key(func, *args, **kwargs)}.pkl")
    if os.path.exists(path):
        log.info("no need to recompute %s: loading %s", func.__name__, path)
        return joblib.load(path)
    result = func(*args, **kwargs)
    joblib.dump(result, path)
    log.debug("cached %s result to %s", func.__name__, path)
    return result
