"""Typer application and CLI entry point for webber.

The CLI is a thin shell over :class:`~webber.client.Webber` and
:class:`~webber.client.AsyncWebber`, handy for priming the offline cache
from scripts and for checking what an application would see offline::

    webber --server https://api.example.com get users --array
    webber --offline get users --array      # served from the cache
    webber watch news                       # cached value, then fresh value

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Unhandled exceptions are written to a crash log under
the data directory.
"""

from __future__ import annotations

import asyncio
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from webber import __version__
from webber.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_URL,
    EXIT_NO_DATA,
)
from webber.models import FetchResult, FetchStatus, OperationKind, WebberConfig


app = typer.Typer(
    name="webber",
    help="Offline-first HTTP GET with a persistent response cache.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

_STATUS_EXIT_CODES = {
    FetchStatus.INVALID_URL: EXIT_INVALID_URL,
    FetchStatus.NETWORK_ERROR: EXIT_CONNECTION_ERROR,
    FetchStatus.DECODE_ERROR: EXIT_NO_DATA,
    FetchStatus.CACHE_MISS: EXIT_NO_DATA,
}


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"webber {__version__}")
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
    server: Optional[str] = typer.Option(
        None, "--server", "-s", help="Server base address (overrides config and WEBBER_SERVER)."
    ),
    offline: bool = typer.Option(
        False, "--offline", help="Act as if the network were unreachable."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmations."),
) -> None:
    """Install the global output manager and stash shared options in ``ctx.obj``."""
    from webber.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["server"] = server
    ctx.obj["offline"] = offline
    ctx.obj["force"] = force


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


def _resolve(ctx: typer.Context) -> WebberConfig:
    from webber.config import resolve_config

    obj = ctx.obj or {}
    return resolve_config(cli_server=obj.get("server"))


def _probe(ctx: typer.Context) -> Any:
    """StaticProbe(False) under ``--offline``; ``None`` selects the default probe."""
    from webber.reachability import StaticProbe

    obj = ctx.obj or {}
    return StaticProbe(False) if obj.get("offline") else None


def _kind(array: bool) -> OperationKind:
    return OperationKind.JSON_ARRAY if array else OperationKind.RAW


def _emit(result: FetchResult[Any], path: str, config: WebberConfig) -> None:
    """Print a result's value or exit with the code matching its status."""
    from webber.output import format_response, info, suggest

    if result.ok:
        format_response(result.value)
        return

    if result.status is FetchStatus.CACHE_MISS:
        info(f"No data for '{path}'.")
    if not config.server:
        suggest("Set a server: webber config set server https://api.example.com")
    raise typer.Exit(code=_STATUS_EXIT_CODES.get(result.status, EXIT_NO_DATA))


# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #


@app.command("get")
def get_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="Path relative to the server, without a leading slash."),
    array: bool = typer.Option(False, "--array", "-a", help="Decode the body as a JSON array."),
    no_cache: bool = typer.Option(
        False, "--no-cache", help="Neither write the result to nor read it from the cache."
    ),
) -> None:
    """Fetch PATH, caching it for offline use.

    Exit codes: 4 when no value is available, 5 for an invalid URL, 6 for a
    network error.
    """
    from webber.client import Webber

    config = _resolve(ctx)
    with Webber(config, probe=_probe(ctx)) as webber:
        result = webber.fetch_result(path, _kind(array), cache=not no_cache)
    _emit(result, path, config)


@app.command("cached")
def cached_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="Path relative to the server."),
    array: bool = typer.Option(False, "--array", "-a", help="Decode the entry as a JSON array."),
) -> None:
    """Print the cached value for PATH without touching the network."""
    from webber.client import Webber

    config = _resolve(ctx)
    with Webber(config, probe=_probe(ctx)) as webber:
        result = webber.cache_result(path, _kind(array))
    _emit(result, path, config)


@app.command("watch")
def watch_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="Path relative to the server."),
    array: bool = typer.Option(False, "--array", "-a", help="Decode the body as a JSON array."),
    no_offline: bool = typer.Option(
        False, "--no-offline", help="Skip the immediate cached delivery."
    ),
    no_cache: bool = typer.Option(False, "--no-cache", help="Do not cache the fetched value."),
) -> None:
    """Deliver the cached value for PATH at once, then the freshly fetched one."""
    from webber.client import AsyncWebber
    from webber.output import format_response, info

    config = _resolve(ctx)

    async def _watch() -> bool:
        delivered = False
        async with AsyncWebber(config, probe=_probe(ctx)) as webber:
            if array:
                pending = webber.fetch_json_array(path, cache=not no_cache, offline=not no_offline)
            else:
                pending = webber.fetch(path, cache=not no_cache, offline=not no_offline)
            async for delivery in pending:
                info(f"[{delivery.source.value}]")
                if delivery.value is None:
                    info("(no value)")
                    continue
                delivered = True
                format_response(delivery.value)
        return delivered

    if not asyncio.run(_watch()):
        raise typer.Exit(code=EXIT_NO_DATA)


@app.command("reachable")
def reachable_command(ctx: typer.Context) -> None:
    """Report whether the network is reachable (exit 6 when it is not)."""
    from webber.output import print_data
    from webber.reachability import DefaultRouteProbe

    probe = _probe(ctx) or DefaultRouteProbe.from_config(_resolve(ctx).reachability)
    if probe.is_reachable():
        print_data("reachable")
        return
    print_data("unreachable")
    raise typer.Exit(code=EXIT_CONNECTION_ERROR)


# ------------------------------------------------------------------ #
# Entry point
# ------------------------------------------------------------------ #


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from webber.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def _register_commands() -> None:
    from webber.commands.cache import cache_app
    from webber.commands.config import config_app

    app.add_typer(config_app, name="config", help="Configuration management.")
    app.add_typer(cache_app, name="cache", help="Offline cache inspection.")


_register_commands()


def main() -> None:
    """CLI entry point invoked by the ``webber`` console script.

    :class:`~webber.exceptions.WebberError` exits with its ``exit_code``;
    any other exception produces a crash log and a generic failure exit.
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from webber.exceptions import WebberError
        from webber.output import error

        if isinstance(exc, WebberError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
