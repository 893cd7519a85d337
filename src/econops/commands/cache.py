"""Cache commands -- inspect and clear the local response cache.

These commands operate on the cache directory directly and therefore work
without an API token.
"""

from __future__ import annotations

import typer

from econops.cache import ResponseCache
from econops.commands.shared import fail
from econops.config import resolve_config
from econops.exceptions import EconopsError
from econops.output import format_response, success


cache_app = typer.Typer(no_args_is_help=True)


def _open_cache() -> ResponseCache:
    try:
        config = resolve_config()
    except EconopsError as exc:
        fail(exc)
    assert config.cache.directory is not None
    return ResponseCache(config.cache.directory)


@cache_app.command("info")
def cache_info() -> None:
    """Show the cache directory, number of cached responses and their size.

    Example::

        econops cache info
    """
    cache = _open_cache()
    try:
        stats = cache.stats()
    finally:
        cache.close()
    format_response(stats.model_dump(mode="json"))


@cache_app.command("clear")
def cache_clear() -> None:
    """Remove every cached response.

    Example::

        econops cache clear
    """
    cache = _open_cache()
    try:
        removed = cache.clear()
    finally:
        cache.close()
    success(f"Removed {removed} cached response(s).")
