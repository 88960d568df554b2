"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for webber:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.webber/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_cache_dir`, :func:`get_data_dir`.
* **Global config** -- A single :class:`~webber.models.WebberConfig`
  JSON file storing the server address and cache/request settings.
* **Precedence resolution** -- :func:`resolve_config` merges the CLI flag,
  the ``WEBBER_SERVER`` environment variable, project-local config, and
  global config into the effective configuration.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) so a crash never leaves a truncated config behind.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from webber.exceptions import ConfigError
from webber.models import WebberConfig

_APP_NAME = "webber"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "webber.json"
_SERVER_ENV_VAR = "WEBBER_SERVER"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/webber/`` (default ``~/.config/webber/``).
    On macOS/Windows: ``~/.webber/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the cache directory, creating it if necessary.

    Holds the offline response store. Unlike a TTL cache this is the only
    copy of data served while offline, so deleting it loses offline access.

    On Linux/BSD: ``$XDG_CACHE_HOME/webber/`` (default ``~/.cache/webber/``).
    On macOS/Windows: ``~/.webber/cache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    else:
        path = _fallback_base_dir() / "cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/webber/`` (default ``~/.local/share/webber/``).
    On macOS/Windows: ``~/.webber/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is removed and the error re-raised.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> WebberConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~webber.models.WebberConfig`, or a default
        instance when no file exists yet.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return WebberConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return WebberConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: WebberConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./webber.json``.

    A repository can pin the server it talks to by committing this file
    with a ``server`` key.

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


# --- Precedence resolution ---


def resolve_config(cli_server: Optional[str] = None) -> WebberConfig:
    """Resolve the effective config with the full precedence chain.

    Precedence for ``server`` (high to low):
        1. CLI flag (``cli_server``)
        2. Environment variable ``WEBBER_SERVER``
        3. Project config (``./webber.json``)
        4. User config (``~/.config/webber/config.json``)
        5. Default (empty string)

    Returns:
        The merged :class:`~webber.models.WebberConfig`.
    """
    config = load_global_config()

    project = load_project_config()
    if project is not None and project.get("server") is not None:
        config.server = str(project["server"])

    env_server = os.environ.get(_SERVER_ENV_VAR)
    if env_server:
        config.server = env_server

    if cli_server is not None:
        config.server = cli_server

    return config
