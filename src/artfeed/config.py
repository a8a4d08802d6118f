"""Where artfeed keeps its files, and which settings are in effect.

Three directories are used, all created on first access:

==========  =============================  ==========================
Purpose     Linux / BSD (XDG)              macOS / Windows
==========  =============================  ==========================
config      ``$XDG_CONFIG_HOME/artfeed``   ``~/.artfeed``
cache       ``$XDG_CACHE_HOME/artfeed``    ``~/.artfeed/cache``
data        ``$XDG_DATA_HOME/artfeed``     ``~/.artfeed/logs``
==========  =============================  ==========================

The cache directory holds the feed store file and the image cache; it can
be wiped at any time. The config directory holds ``config.json``, a
serialised :class:`~artfeed.models.GlobalConfig`.

:func:`resolve_config` layers CLI flags over ``ARTFEED_URL`` /
``ARTFEED_MAX_AGE`` over the config file over defaults.

Every write, the feed store's included, goes through :func:`atomic_write`
so a reader never sees a half-written file.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional, Union

from artfeed.exceptions import ConfigError
from artfeed.models import GlobalConfig

_APP_NAME = "artfeed"
_CONFIG_FILENAME = "config.json"

ENV_FEED_URL = "ARTFEED_URL"
ENV_MAX_AGE = "ARTFEED_MAX_AGE"

# kind -> (XDG variable, default under $HOME, subdirectory of ~/.artfeed)
_DIRS: dict[str, tuple[str, tuple[str, ...], Optional[str]]] = {
    "config": ("XDG_CONFIG_HOME", (".config",), None),
    "cache": ("XDG_CACHE_HOME", (".cache",), "cache"),
    "data": ("XDG_DATA_HOME", (".local", "share"), "logs"),
}


# --- Directories ---


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(kind: str) -> Path:
    env_var, home_default, fallback_sub = _DIRS[kind]
    if _is_xdg_platform():
        base = os.environ.get(env_var) or Path.home().joinpath(*home_default)
        path = Path(base) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
        if fallback_sub:
            path = path / fallback_sub
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Directory holding ``config.json``."""
    return _app_dir("config")


def get_cache_dir() -> Path:
    """Directory holding the feed store and the image cache."""
    return _app_dir("cache")


def get_data_dir() -> Path:
    """Directory holding crash logs."""
    return _app_dir("data")


# --- Atomic writes ---


def atomic_write(path: Path, data: Union[str, bytes]) -> None:
    """Replace *path* with *data* (text is UTF-8 encoded) in one rename.

    The bytes go to a temporary sibling of *path*, are fsynced, and then
    ``os.replace`` swaps the file in. If anything fails the temporary file
    is removed and *path* keeps its previous content.

    Raises:
        OSError: The directory cannot be created or the write fails.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = data.encode("utf-8") if isinstance(data, str) else data

    tmp = tempfile.NamedTemporaryFile(
        mode="wb", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
    )
    try:
        with tmp:
            tmp.write(payload)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp.name, path)
    except BaseException:
        # also on KeyboardInterrupt
        Path(tmp.name).unlink(missing_ok=True)
        raise


# --- Global config ---


def _global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~artfeed.models.GlobalConfig`, or a default
        instance when the file does not exist.

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
    atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def resolve_config(
    cli_url: Optional[str] = None,
    cli_max_age: Optional[int] = None,
    cli_format: Optional[str] = None,
) -> GlobalConfig:
    """Resolve config with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_url``, ``cli_max_age``, ``cli_format``)
        2. Environment variables (``ARTFEED_URL``, ``ARTFEED_MAX_AGE``)
        3. User config (``~/.config/artfeed/config.json``)
        4. Defaults

    Raises:
        ConfigError: If ``ARTFEED_MAX_AGE`` is not a non-negative integer,
            or the config file is invalid.
    """
    config = load_global_config()

    env_url = os.environ.get(ENV_FEED_URL)
    if env_url:
        config.feed.url = env_url

    env_max_age = os.environ.get(ENV_MAX_AGE)
    if env_max_age:
        try:
            max_age = int(env_max_age)
        except ValueError as exc:
            raise ConfigError(
                f"{ENV_MAX_AGE} must be an integer number of seconds, got {env_max_age!r}"
            ) from exc
        if max_age < 0:
            raise ConfigError(f"{ENV_MAX_AGE} must not be negative, got {max_age}")
        config.feed.max_age_seconds = max_age

    if cli_url is not None:
        config.feed.url = cli_url
    if cli_max_age is not None:
        config.feed.max_age_seconds = cli_max_age
    if cli_format is not None:
        config.output.format = cli_format

    return config


def get_store_path(config: GlobalConfig) -> Path:
    """Return the feed store file for *config*.

    A relative ``feed.store_file`` is placed under :func:`get_cache_dir`;
    an absolute one is used as is.
    """
    store_file = Path(config.feed.store_file).expanduser()
    if store_file.is_absolute():
        return store_file
    return get_cache_dir() / store_file
