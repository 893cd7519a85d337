"""Built-in CLI commands for econops.

Each module exposes a Typer command or sub-application that is registered
on the root app by :mod:`econops.app`:

* :mod:`~econops.commands.call` -- ``call`` and ``interactive``.
* :mod:`~econops.commands.cache` -- ``cache info`` / ``cache clear``.
* :mod:`~econops.commands.config` -- ``config show`` / ``config set`` / ``config path``.
"""
