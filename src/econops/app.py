"""Typer application and CLI entry point for econops.

This module wires together the top-level Typer application and registers the
built-in sub-commands (``call``, ``interactive``, ``cache``, ``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs a SIGINT handler and invokes the Typer app.
Unexpected exceptions are written to a crash log in the data directory.

See Also:
    :mod:`econops.config`: Configuration and token resolution.
    :mod:`econops.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import os
import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import typer

from econops import __version__
from econops.commands.cache import cache_app
from econops.commands.call import call_command, interactive_command
from econops.commands.config import config_app
from econops.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED


app = typer.Typer(
    name="econops",
    help="Command-line client for the EconOps statistical-computation API.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("call")(call_command)
app.command("interactive")(interactive_command)
app.add_typer(cache_app, name="cache", help="Inspect or clear the response cache.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"econops {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    token: Optional[str] = typer.Option(
        None, "--token", "-t", help="API token (default: $ECONOPS_TOKEN)."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="API base URL (default: $ECONOPS_BASE_URL or config)."
    ),
    no_cache: bool = typer.Option(
        False, "--no-cache", help="Bypass the response cache."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Plain JSON output, no highlighting."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~econops.output.OutputManager` from CLI
    flags, falling back to ``output.format`` from the config file, and stores the connection options in ``ctx.obj`` for the
    sub-commands.
    """
    from econops.config import load_global_config
    from econops.exceptions import EconopsError
    from econops.output import OutputFormat, OutputManager, set_output

    if json_output:
        fmt = OutputFormat.JSON
    else:
        try:
            fmt = OutputFormat(load_global_config().output.format)
        except EconopsError:
            fmt = OutputFormat.AUTO
    set_output(
        OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    )

    ctx.obj = {
        "token": token,
        "base_url": base_url,
        "no_cache": no_cache,
        "verbose": verbose,
    }


def _cancel(signum: int, frame: Any) -> None:  # noqa: ANN401
    sys.stderr.write("\nCancelled.\n")
    sys.exit(EXIT_INTERRUPTED)


def _write_crash_log() -> Path:
    """Save the current traceback with version and argv; return the file path."""
    from econops.config import get_data_dir

    log_path = get_data_dir() / f"crash-{datetime.now():%Y%m%d-%H%M%S}-{os.getpid()}.log"
    header = f"econops {__version__}\nargv: {' '.join(sys.argv)}\n\n"
    log_path.write_text(header + traceback.format_exc(), encoding="utf-8")
    return log_path


def main() -> None:
    """Console-script entry point.

    An :class:`~econops.exceptions.EconopsError` that escapes a command
    exits with its own code. Any other exception is written to a crash log
    and exits with :data:`~econops.exit_codes.EXIT_GENERIC_FAILURE`.
    """
    from econops.exceptions import EconopsError
    from econops.output import error

    signal.signal(signal.SIGINT, _cancel)
    try:
        app()
    except KeyboardInterrupt:
        _cancel(signal.SIGINT, None)
    except EconopsError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception:
        error(f"Unexpected error. Debug log: {_write_crash_log()}")
        sys.exit(EXIT_GENERIC_FAILURE)


if __name__ == "__main__":
    main()
