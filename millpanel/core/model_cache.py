"""
Caching for the small, hot lookup lists: parties, qualities and mills.

Each list family carries a generation counter in the key; invalidation bumps
the counter so every cached variant (search term, page, ...) goes stale at once
on any cache backend.
"""
import hashlib
import logging

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

# Cache key prefixes
PARTY_LIST_KEY_PREFIX = 'party_list:'
QUALITY_LIST_KEY_PREFIX = 'quality_list:'
MILL_LIST_KEY_PREFIX = 'mill_list:'

GENERATION_SUFFIX = 'generation'


def list_cache_ttl() -> int:
    return getattr(settings, 'LIST_CACHE_TTL', 300)


def _generation(prefix: str) -> int:
    key = f"{prefix}{GENERATION_SUFFIX}"
    generation = cache.get(key)
    if generation is None:
        generation = 1
        cache.set(key, generation, None)
    return generation


def get_list_cache_key(prefix: str, *parts) -> str:
    """Build the cache key for one variant of a list (e.g. one search term and page)"""
    digest = hashlib.md5(':'.join(str(p) for p in parts).encode()).hexdigest()
    return f"{prefix}{_generation(prefix)}:{digest}"


def get_cached_list(prefix: str, *parts):
    try:
        cached_data = cache.get(get_list_cache_key(prefix, *parts))
    except Exception as e:
        logger.warning(f"Cache read failed for {prefix}: {e}")
        return None
    if cached_data is not None:
        logger.debug(f"Cache hit for {prefix} {parts}")
    return cached_data


def cache_list(prefix: str, data, *parts, ttl: int = None):
    try:
        cache.set(get_list_cache_key(prefix, *parts), data, ttl or list_cache_ttl())
    except Exception as e:
        logger.warning(f"Cache write failed for {prefix}: {e}")


def invalidate_list_cache(prefix: str):
    key = f"{prefix}{GENERATION_SUFFIX}"
    try:
        cache.incr(key)
    except ValueError:
        # Counter expired or never set
        cache.set(key, 2, None)
    except Exception as e:
        logger.warning(f"Cache invalidation failed for {prefix}: {e}")
        return
    logger.debug(f"Invalidated list cache {prefix}")
