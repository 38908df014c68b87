"""Config commands -- view and modify global configuration.

Provides the ``swagts config`` sub-command group for reading, updating, and
resetting the user's global configuration file
(:class:`~swagts.models.GlobalConfig`). Settings control defaults such as
the ignored path segments and the output format.
"""

from __future__ import annotations

from typing import Any

import typer

from swagts.output import error, info, print_json, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration.

    Prints the config directory, then the configuration after applying
    project config and environment overrides.

    Example::

        swagts config show
        swagts config show --json
    """
    from swagts.config import get_config_dir, resolve_config
    from swagts.exceptions import ConfigError

    try:
        config = resolve_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"Config directory: {get_config_dir()}")
    print_json(config.model_dump(mode="json"))


def _coerce(current: Any, value: str, key: str) -> Any:
    """Coerce the string *value* to the type of the existing field."""
    from swagts.config import parse_segment_list

    if isinstance(current, bool):
        return value.lower() in ("true", "1", "yes")
    if isinstance(current, int):
        try:
            return int(value)
        except ValueError:
            error(f"Expected integer for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    if isinstance(current, list):
        return parse_segment_list(value)
    return value


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'naming.ignored_segments')."
    ),
    value: str = typer.Argument(help="Value to set (comma-separated for lists)."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. The value is coerced to match the
    existing field's type (bool, int, list or str) and validated against
    :class:`~swagts.models.GlobalConfig` before saving.

    Example::

        swagts config set naming.ignored_segments api,acme
        swagts config set output.format json
        swagts config set output.by_alias false
    """
    from swagts.config import load_global_config, save_global_config
    from swagts.exceptions import ConfigError
    from swagts.models import GlobalConfig

    try:
        config = load_global_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    coerced = _coerce(target[final_key], value, key)
    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Reset configuration to defaults.

    Asks for confirmation unless ``--force`` is active.

    Example::

        swagts config reset
        swagts --force config reset
    """
    from swagts.config import save_global_config
    from swagts.models import GlobalConfig

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
