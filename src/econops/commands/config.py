"""``econops config`` -- read and edit the global config file.

The file holds a :class:`~econops.models.GlobalConfig`: default base URL,
token source, cache and request settings. Environment variables and global
CLI flags still override it at run time (see
:func:`econops.config.resolve_config`).
"""

from __future__ import annotations

from typing import Any

import typer
from pydantic import ValidationError

from econops.commands.shared import fail
from econops.config import get_config_dir, global_config_path, load_global_config, save_global_config
from econops.exceptions import EconopsError, InvalidUsageError
from econops.models import GlobalConfig
from econops.output import format_response, info, print_data, success

config_app = typer.Typer(no_args_is_help=True)

_TRUE_WORDS = ("true", "1", "yes", "on")
_FALSE_WORDS = ("false", "0", "no", "off")


@config_app.command("show")
def config_show() -> None:
    """Print the stored configuration as JSON."""
    try:
        config = load_global_config()
    except EconopsError as exc:
        fail(exc)
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("path")
def config_path() -> None:
    """Print the location of the config file."""
    print_data(str(global_config_path()))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Dotted key, e.g. 'cache.enabled' or 'base_url'."),
    value: str = typer.Argument(help="New value."),
) -> None:
    """Change one setting and save the file.

    The value is converted to the type of the current setting. Unknown keys,
    section names and values of the wrong type exit with code 2.

    Example::

        econops config set base_url https://staging.econops.com
        econops config set token_source env:MY_ECONOPS_TOKEN
        econops config set request.timeout 60
    """
    try:
        data = load_global_config().model_dump(mode="json")
        section, leaf = _locate(data, key)
        section[leaf] = _coerce(section[leaf], value, key)
        config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        fail(InvalidUsageError(f"Validation error: {exc}"))
    except EconopsError as exc:
        fail(exc)

    save_global_config(config)
    success(f"Set {key} = {section[leaf]}")


def _locate(data: dict[str, Any], key: str) -> tuple[dict[str, Any], str]:
    """Return the dict holding *key* and the last key segment."""
    *parents, leaf = key.split(".")
    section = data
    for part in parents:
        child = section.get(part)
        if not isinstance(child, dict):
            raise InvalidUsageError(f"Invalid config key: {key}")
        section = child
    if leaf not in section or isinstance(section[leaf], dict):
        raise InvalidUsageError(f"Unknown config key: {key}")
    return section, leaf


def _coerce(current: Any, raw: str, key: str) -> Any:
    if isinstance(current, bool):
        word = raw.lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        raise InvalidUsageError(f"Expected true or false for {key}, got: {raw}")
    if isinstance(current, (int, float)):
        try:
            return type(current)(raw)
        except ValueError:
            raise InvalidUsageError(
                f"Expected {type(current).__name__} for {key}, got: {raw}"
            ) from None
    return raw
