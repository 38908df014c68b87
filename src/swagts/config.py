"""User and project configuration for swagts.

Effective settings are layered, highest first: CLI flags, the
``SWAGTS_IGNORED_SEGMENTS`` environment variable, ``./swagts.json`` in the
working directory, the user file ``<config dir>/config.json``, and the
:class:`~swagts.models.GlobalConfig` defaults (see :func:`resolve_config`).

The config dir is ``$XDG_CONFIG_HOME/swagts`` on Linux/BSD and
``~/.swagts`` elsewhere; crash logs live under the matching data dir.
"""

from __future__ import annotations

import contextlib
import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from swagts.exceptions import ConfigError
from swagts.models import GlobalConfig

_APP_NAME = "swagts"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "swagts.json"

ENV_IGNORED_SEGMENTS = "SWAGTS_IGNORED_SEGMENTS"

# XDG variable and its default location relative to $HOME.
_XDG_DIRS: dict[str, tuple[str, tuple[str, ...]]] = {
    "config": ("XDG_CONFIG_HOME", (".config",)),
    "data": ("XDG_DATA_HOME", (".local", "share")),
}


# --- Directories ---


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(kind: str) -> Path:
    if _is_xdg_platform():
        env_var, default = _XDG_DIRS[kind]
        base = os.environ.get(env_var) or Path.home().joinpath(*default)
        path = Path(base) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Directory holding ``config.json``; created on first use."""
    return _app_dir("config")


def get_data_dir() -> Path:
    """Directory holding ``logs/``; created on first use.

    Shares ``~/.swagts`` with the config dir on macOS and Windows.
    """
    return _app_dir("data")


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* through a synced temp file beside it."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp)
        raise


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~swagts.models.GlobalConfig`, or a default
        instance when no file exists.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./swagts.json``.

    The file uses the same shape as the global config and may set any subset
    of its keys, e.g. ``{"naming": {"ignored_segments": ["api", "acme"]}}``.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Project config at {path} must be a JSON object")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def parse_segment_list(value: str) -> list[str]:
    """Split a comma-separated segment list, dropping blanks.

    Example::

        parse_segment_list("api, acme,,v1")  # ["api", "acme", "v1"]
    """
    return [part.strip() for part in value.split(",") if part.strip()]


# --- Precedence resolution ---


def resolve_config(cli_ignored_segments: Optional[list[str]] = None) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_ignored_segments``)
        2. Environment variables (``SWAGTS_IGNORED_SEGMENTS``)
        3. Project config (``./swagts.json``)
        4. User config (``~/.config/swagts/config.json``)
        5. Defaults

    Raises:
        ConfigError: If any layer is invalid.
    """
    config = load_global_config()

    project = load_project_config()
    if project is not None:
        try:
            config = GlobalConfig.model_validate(
                _deep_merge(config.model_dump(mode="json"), project)
            )
        except ValueError as exc:
            raise ConfigError(f"Invalid project config: {exc}") from exc

    env_segments = os.environ.get(ENV_IGNORED_SEGMENTS)
    if env_segments is not None:
        config.naming.ignored_segments = parse_segment_list(env_segments)

    if cli_ignored_segments is not None:
        config.naming.ignored_segments = list(cli_ignored_segments)

    return config
