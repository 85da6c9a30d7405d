"""
Thread-safe rate-limited logging utilities.

A document with many failing call sites, rendered repeatedly, would otherwise
log the same failure on every render. Messages are suppressed for ``interval``
seconds after they were last emitted.
"""
import logging
import threading
from typing import Dict, Optional

from cachetools import TTLCache

# Configure logger
logger = logging.getLogger(__name__)

_MAX_TRACKED_MESSAGES = 256

# One TTL cache per interval, the TTL doing the expiry
_log_caches: Dict[int, TTLCache] = {}
_log_cache_lock = threading.RLock()


def _cache_for(interval: int) -> TTLCache:
    cache = _log_caches.get(interval)
    if cache is None:
        cache = TTLCache(maxsize=_MAX_TRACKED_MESSAGES, ttl=interval)
        _log_caches[interval] = cache
    return cache


def rate_limited_log(
    message: str,
    level: str = "warning",
    interval: int = 60,
    logger_instance: Optional[logging.Logger] = None
) -> bool:
    """
    Log a message with rate limiting, in a thread-safe manner.

    Args:
        message: Message to log
        level: Log level (debug, info, warning, error, critical)
        interval: Minimum interval between identical logs in seconds
        logger_instance: Logger to use (defaults to module logger)

    Returns:
        True if the message was emitted, False if it was suppressed
    """
    log_instance = logger_instance or logger
    log_method = getattr(log_instance, level.lower(), log_instance.warning)

    key = f"{level}:{message}"

    with _log_cache_lock:
        cache = _cache_for(interval)
        if key in cache:
            return False
        log_method(message)
        cache[key] = True
        return True


def reset_rate_limits() -> None:
    """Forget every suppressed message."""
    with _log_cache_lock:
        _log_caches.clear()
