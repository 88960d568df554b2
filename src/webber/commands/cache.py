"""Cache commands -- inspect the offline store."""

from __future__ import annotations

import typer

from webber.output import format_response


cache_app = typer.Typer(no_args_is_help=True)


@cache_app.command("stats")
def cache_stats(ctx: typer.Context) -> None:
    """Show the offline store's backend, entry count, and location."""
    from webber.client.base import default_store
    from webber.config import resolve_config

    obj = ctx.obj or {}
    config = resolve_config(cli_server=obj.get("server"))
    with default_store(config) as store:
        format_response(store.stats())
