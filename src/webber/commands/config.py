"""Config commands -- view and modify global configuration.

Provides the ``webber config`` sub-command group for reading, updating,
and resetting the user's :class:`~webber.models.WebberConfig`.
"""

from __future__ import annotations

import typer

from webber.exit_codes import EXIT_INVALID_USAGE
from webber.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)

_NULL_VALUES = ("none", "null")


@config_app.command("show")
def config_show() -> None:
    """Show the global configuration.

    Example::

        webber config show
        webber --json config show
    """
    from webber.config import get_config_dir, load_global_config

    config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key (dot notation, e.g. 'request.timeout')."),
    value: str = typer.Argument(help="Value to set ('none' clears optional fields)."),
) -> None:
    """Set a configuration value.

    The string is handed to Pydantic, which coerces it to the field's type
    (``"30"`` becomes ``30.0`` for ``request.timeout``, ``"false"`` becomes
    ``False`` for ``cache.enabled``).

    Example::

        webber config set server https://api.example.com
        webber config set request.timeout 10
        webber config set cache.directory none
    """
    from webber.config import load_global_config, save_global_config
    from webber.models import WebberConfig

    data = load_global_config().model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    target[final_key] = None if value.lower() in _NULL_VALUES else value

    try:
        new_config = WebberConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    save_global_config(new_config)
    success(f"Set {key} = {target[final_key]}")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Reset configuration to defaults.

    Asks for confirmation unless ``--force`` is active.
    """
    from webber.config import save_global_config
    from webber.models import WebberConfig

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    save_global_config(WebberConfig())
    success("Configuration reset to defaults.")
