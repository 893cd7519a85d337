"""Helpers shared by the CLI commands."""

from __future__ import annotations

import json
from typing import Any, NoReturn, Optional

import typer

from econops.client import Client
from econops.config import resolve_config, resolve_credential
from econops.exceptions import EconopsError, InvalidUsageError
from econops.output import error


def create_client(ctx: typer.Context) -> Client:
    """Build a :class:`~econops.client.Client` from global CLI options and config.

    Token precedence: ``--token``, the config file's ``token_source``, then
    ``$ECONOPS_TOKEN`` (resolved by the client itself).
    """
    obj = ctx.obj or {}
    config = resolve_config(
        cli_base_url=obj.get("base_url"),
        cli_no_cache=obj.get("no_cache", False),
    )
    token: Optional[str] = obj.get("token")
    if not token and config.token_source:
        token = resolve_credential(config.token_source)

    return Client(
        token=token,
        base_url=config.base_url,
        use_cache=config.cache.enabled,
        cache_dir=config.cache.directory,
        timeout=config.request.timeout,
        verify_ssl=config.request.verify_ssl,
    )


def parse_payload(text: Optional[str]) -> Any:
    """Parse a JSON payload argument; empty input means no payload.

    Raises:
        InvalidUsageError: If *text* is not valid JSON.
    """
    if text is None or not text.strip():
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidUsageError(f"Invalid JSON data: {exc}") from exc


def fail(exc: EconopsError) -> NoReturn:
    """Report *exc* on stderr and exit with its exit code."""
    error(str(exc))
    raise typer.Exit(code=exc.exit_code)
