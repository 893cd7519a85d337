"""Disk-based response cache keyed by request signature.

Uses :mod:`diskcache` to persist successful API responses on the filesystem.
Each signature maps to exactly one record, stored as JSON text of the form
``{"status_code": ..., "data": ..., "headers": ...}``. Entries never expire;
they live until :meth:`ResponseCache.clear` is called or the operating
system reclaims the (by default temporary) cache directory.

The cache is strictly best-effort. :meth:`ResponseCache.lookup` and
:meth:`ResponseCache.store` report failures as a :class:`CacheResult` instead
of raising, and :meth:`~ResponseCache.get` / :meth:`~ResponseCache.put`
discard them entirely. Concurrent processes may share a directory; a race
costs at most one redundant network call.

See Also:
    :class:`~econops.client.Client` -- the only writer in normal use.
"""

from __future__ import annotations

import json
import logging
import re
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import diskcache
from pydantic import ValidationError

from econops.exceptions import CacheError
from econops.models import CacheEntry, CacheStats

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9]")

_CACHE_FAILURES = (OSError, sqlite3.Error, diskcache.Timeout, ValueError, TypeError)
"""Exceptions that degrade to a cache miss or a dropped write."""


def storage_key(signature: str) -> str:
    """Return the filesystem-safe storage key for *signature*.

    Every character outside ``[A-Za-z0-9]`` becomes ``_``. Signatures end in
    a 64-character hex digest, so two distinct signatures only share a key
    when their routes differ solely in punctuation and their payloads are
    identical.
    """
    return _UNSAFE_CHARS.sub("_", signature)


@dataclass
class CacheResult:
    """Outcome of a cache read or write.

    Attributes:
        entry: The entry that was read (or written), if any.
        error: The failure that occurred, if any. A result with neither an
            entry nor an error is a plain miss.
    """

    entry: Optional[CacheEntry] = None
    error: Optional[CacheError] = None

    @property
    def hit(self) -> bool:
        return self.entry is not None

    @property
    def ok(self) -> bool:
        return self.error is None


class ResponseCache:
    """Disk-backed store of :class:`~econops.models.CacheEntry` records.

    The underlying :class:`diskcache.Cache` (and therefore the directory) is
    created lazily on first use and reused for the lifetime of the instance.

    Args:
        directory: Directory holding the cache database and any large
            values spilled to files.

    Example::

        from econops.cache import ResponseCache
        from econops.models import CacheEntry

        cache = ResponseCache("/tmp/econops_cache")
        cache.put("/compute/pca3f2a...", CacheEntry(status_code=200, data={"ok": True}))
        hit = cache.get("/compute/pca3f2a...")
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)
        self._cache: Optional[diskcache.Cache] = None

    @property
    def directory(self) -> Path:
        """The cache directory (may not exist yet)."""
        return self._directory

    # ------------------------------------------------------------------ #
    # Result-style API
    # ------------------------------------------------------------------ #

    def lookup(self, signature: str) -> CacheResult:
        """Read the entry stored for *signature*.

        Never raises. A missing record gives an empty result; an unreadable
        or malformed record gives a result carrying a :class:`CacheError`.
        """
        key = storage_key(signature)
        try:
            raw = self._open().get(key)
            if raw is None:
                return CacheResult()
            entry = CacheEntry.model_validate(json.loads(raw))
        except ValidationError as exc:
            return CacheResult(error=CacheError(f"Malformed cache record {key}: {exc}"))
        except _CACHE_FAILURES as exc:
            return CacheResult(error=CacheError(f"Cannot read cache record {key}: {exc}"))
        return CacheResult(entry=entry)

    def store(self, signature: str, entry: CacheEntry) -> CacheResult:
        """Persist *entry* under *signature*, overwriting any previous record.

        Never raises; a failed write is reported in the returned result.
        """
        key = storage_key(signature)
        try:
            record = json.dumps(entry.model_dump(mode="json"), ensure_ascii=False)
            self._open().set(key, record)
        except _CACHE_FAILURES as exc:
            return CacheResult(error=CacheError(f"Cannot write cache record {key}: {exc}"))
        return CacheResult(entry=entry)

    # ------------------------------------------------------------------ #
    # Best-effort API
    # ------------------------------------------------------------------ #

    def get(self, signature: str) -> Optional[CacheEntry]:
        """Return the cached entry for *signature*, or ``None`` on a miss or any failure."""
        return self.lookup(signature).entry

    def put(self, signature: str, entry: CacheEntry) -> None:
        """Store *entry* under *signature*; failures are logged and dropped."""
        result = self.store(signature, entry)
        if not result.ok:
            logger.debug("%s", result.error)

    def clear(self) -> int:
        """Remove every cached record.

        Returns:
            The number of records removed. Clearing an empty cache returns
            ``0``; so does a failed clear, which is logged.
        """
        try:
            return self._open().clear()
        except _CACHE_FAILURES as exc:
            logger.debug("Cannot clear cache at %s: %s", self._directory, exc)
            return 0

    def stats(self) -> CacheStats:
        """Return the directory, record count and total record size in bytes.

        Never raises. On failure the directory is reported as
        ``"Not available"`` with zero counts.
        """
        try:
            cache = self._open()
            count = 0
            total_bytes = 0
            for key in cache.iterkeys():
                raw = cache.get(key)
                if raw is None:
                    continue
                count += 1
                total_bytes += len(raw.encode("utf-8")) if isinstance(raw, str) else len(raw)
        except _CACHE_FAILURES as exc:
            logger.debug("Cannot read cache stats at %s: %s", self._directory, exc)
            return CacheStats(directory="Not available")
        return CacheStats(directory=str(self._directory), count=count, total_bytes=total_bytes)

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache` and release resources."""
        if self._cache is not None:
            self._cache.close()
            self._cache = None

    def _open(self) -> diskcache.Cache:
        """Open the store, creating the directory on first use."""
        if self._cache is None:
            self._cache = diskcache.Cache(str(self._directory), eviction_policy="none")
        return self._cache
