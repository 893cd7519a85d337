"""Disk-based response caching for econops.

This package provides :class:`ResponseCache`, a best-effort store that maps
request signatures (see :mod:`econops.signature`) to previously observed
API responses using :mod:`diskcache`.

The cache is consumed by :class:`~econops.client.Client` and is controlled
by the ``cache`` section of the global configuration
(:class:`~econops.models.CacheConfig`).
"""

from econops.cache.cache import CacheResult, ResponseCache, storage_key

__all__ = ["CacheResult", "ResponseCache", "storage_key"]
