import logging
import os

from .errors import ConfigurationError


logger = logging.getLogger(__name__)

SAFE_SEARCH_LEVELS = range(0, 5)
DEFAULT_SAFE_SEARCH = 1
MIN_CACHE_EXPIRY_TIME = 60
MAX_THREADS = 255


def available_parallelism() -> int:
    """Number of CPUs this process may run on."""
    if hasattr(os, "sched_getaffinity"):
        count = len(os.sched_getaffinity(0))
    else:
        count = os.cpu_count() or 0
    if count < 1:
        raise ConfigurationError("Config Error: unable to detect the number of available CPUs")
    return count


def validate_threads(parsed: int, parallelism: int) -> int:
    if parsed != 0:
        return parsed

    threads = min(parallelism // 2, MAX_THREADS)
    logger.error("Config Error: The value of `threads` option should be a non-zero positive integer")
    logger.error(f"Falling back to using {threads} threads")
    return threads


def validate_safe_search(parsed: int) -> int:
    if parsed in SAFE_SEARCH_LEVELS:
        return parsed

    logger.error(
        "Config Error: The value of `safe_search` option should be a non-zero positive integer from 0 to 4."
    )
    logger.error(f"Falling back to using the value `{DEFAULT_SAFE_SEARCH}` for the option")
    return DEFAULT_SAFE_SEARCH


def validate_cache_expiry_time(parsed: int) -> int:
    if parsed >= MIN_CACHE_EXPIRY_TIME:
        return parsed

    logger.error(
        f"Config Error: The value of `cache_expiry_time` must be greater than {MIN_CACHE_EXPIRY_TIME}"
    )
    logger.error(f"Falling back to using the value `{MIN_CACHE_EXPIRY_TIME}` for the option")
    return MIN_CACHE_EXPIRY_TIME
