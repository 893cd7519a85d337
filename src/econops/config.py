"""User configuration: directories, the config file and value resolution.

Directories follow the XDG Base Directory layout on Linux and BSD
(``~/.config/econops``, ``~/.local/share/econops``) and live under
``~/.econops`` elsewhere. The response cache defaults to the system
temporary directory instead, so the OS may reclaim it.

Settings are read from ``config.json`` as a
:class:`~econops.models.GlobalConfig` and merged with environment variables
and CLI flags by :func:`resolve_config`. The API token is picked by
:func:`resolve_token`; a ``token_source`` from the config file is read with
:func:`resolve_credential`.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from econops.exceptions import ConfigurationError
from econops.models import GlobalConfig

_APP_NAME = "econops"
_CONFIG_FILENAME = "config.json"
_CACHE_DIRNAME = "econops_cache"

TOKEN_ENV_VAR = "ECONOPS_TOKEN"
BASE_URL_ENV_VAR = "ECONOPS_BASE_URL"
CACHE_DIR_ENV_VAR = "ECONOPS_CACHE_DIR"

# kind -> (XDG variable, default location under $HOME, subdirectory of ~/.econops)
_USER_DIRS = {
    "config": ("XDG_CONFIG_HOME", (".config",), None),
    "data": ("XDG_DATA_HOME", (".local", "share"), "logs"),
}


# --- Directories ---


def _is_xdg_platform() -> bool:
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _user_dir(kind: str) -> Path:
    """Resolve and create the per-user directory of the given *kind*."""
    env_var, home_parts, legacy_sub = _USER_DIRS[kind]
    if _is_xdg_platform():
        root = os.environ.get(env_var) or str(Path.home().joinpath(*home_parts))
        path = Path(root) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
        if legacy_sub:
            path = path / legacy_sub
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Directory holding ``config.json``; created on demand."""
    return _user_dir("config")


def get_data_dir() -> Path:
    """Directory for crash logs; created on demand."""
    return _user_dir("data")


def get_cache_dir() -> Path:
    """Default response cache directory.

    ``$ECONOPS_CACHE_DIR`` when set, otherwise ``<system tmp>/econops_cache``.
    Not created here; :class:`~econops.cache.ResponseCache` creates it on
    first use.
    """
    override = os.environ.get(CACHE_DIR_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path(tempfile.gettempdir()) / _CACHE_DIRNAME


# --- Config file ---


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* so readers never see a partial file.

    Writes to a sibling temp file, fsyncs it and renames it over *path*.
    The temp file is removed if anything fails.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Read ``config.json``, or return defaults when it does not exist.

    Raises:
        ConfigurationError: If the file is not valid JSON or does not match
            :class:`~econops.models.GlobalConfig`.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        return GlobalConfig.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except ValueError as exc:
        raise ConfigurationError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    text = json.dumps(config.model_dump(mode="json"), indent=2) + "\n"
    _atomic_write(global_config_path(), text)


# --- Precedence resolution ---


def resolve_config(
    cli_base_url: Optional[str] = None,
    cli_no_cache: bool = False,
) -> GlobalConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``cli_base_url``, ``cli_no_cache``)
        2. Environment variables (``ECONOPS_BASE_URL``, ``ECONOPS_CACHE_DIR``)
        3. User config (``~/.config/econops/config.json``)
        4. Defaults

    Returns:
        A :class:`~econops.models.GlobalConfig` with all overrides applied.
    """
    config = load_global_config()

    env_base_url = os.environ.get(BASE_URL_ENV_VAR)
    if cli_base_url:
        config.base_url = cli_base_url
    elif env_base_url:
        config.base_url = env_base_url

    if os.environ.get(CACHE_DIR_ENV_VAR) or not config.cache.directory:
        config.cache.directory = str(get_cache_dir())

    if cli_no_cache:
        config.cache.enabled = False

    return config


# --- Token resolution ---


def resolve_token(token: Optional[str] = None, fallback: Optional[str] = None) -> str:
    """Pick the API token.

    Order: explicit *token*, then ``$ECONOPS_TOKEN``, then *fallback*. Empty
    strings count as unset.

    Raises:
        ConfigurationError: If no token is available.
    """
    for candidate in (token, os.environ.get(TOKEN_ENV_VAR), fallback):
        if candidate:
            return candidate
    raise ConfigurationError(
        f"Token not provided and '{TOKEN_ENV_VAR}' environment variable not found"
    )


def resolve_credential(source: str) -> str:
    """Read a token from a ``token_source`` setting.

    ``env:NAME`` reads the environment variable ``NAME``; ``file:PATH`` reads
    the file at ``PATH`` with surrounding whitespace removed.

    Raises:
        ConfigurationError: If the variable or file is missing or unreadable,
            or the source uses another scheme.
    """
    scheme, _, target = source.partition(":")
    if scheme == "env":
        try:
            return os.environ[target]
        except KeyError:
            raise ConfigurationError(
                f"Environment variable '{target}' is not set (source: {source})"
            ) from None
    if scheme == "file":
        path = Path(target).expanduser()
        try:
            return path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            raise ConfigurationError(f"Credential file not found: {path}") from None
        except OSError as exc:
            raise ConfigurationError(f"Cannot read credential file {path}: {exc}") from exc
    raise ConfigurationError(f"Unknown credential source format: {source}")
