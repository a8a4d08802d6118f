"""``artfeed config`` -- inspect and edit ``config.json``.

Keys use dot notation over the :class:`~artfeed.models.GlobalConfig`
sections, e.g. ``feed.max_age_seconds`` or ``images.enabled``.
"""

from __future__ import annotations

from typing import Any

import typer
from pydantic import ValidationError

from artfeed.exceptions import ArtfeedError, InvalidUsageError
from artfeed.models import GlobalConfig
from artfeed.output import error, format_response, info, success, suggest


config_app = typer.Typer(no_args_is_help=True)

_TRUE_WORDS = frozenset({"true", "1", "yes", "on"})


def _load() -> GlobalConfig:
    from artfeed.config import load_global_config

    try:
        return load_global_config()
    except ArtfeedError as exc:
        error(str(exc))
        suggest("Run: artfeed config reset")
        raise typer.Exit(code=exc.exit_code) from None


def _assign(data: dict[str, Any], key: str, raw: str) -> Any:
    """Set *key* in the dumped config *data* to *raw*, coerced to the current type.

    Raises:
        InvalidUsageError: *key* does not name a setting, or *raw* does not
            fit its type.
    """
    *sections, name = key.split(".")
    node = data
    for section in sections:
        node = node.get(section)
        if not isinstance(node, dict):
            raise InvalidUsageError(f"Unknown config section in {key!r}")
    if name not in node or isinstance(node[name], dict):
        raise InvalidUsageError(f"Unknown config key: {key}")

    current = node[name]
    if isinstance(current, bool):
        value: Any = raw.lower() in _TRUE_WORDS
    elif isinstance(current, (int, float)):
        try:
            value = type(current)(raw)
        except ValueError:
            raise InvalidUsageError(
                f"{key} expects {type(current).__name__}, got {raw!r}"
            ) from None
    else:
        value = raw
    node[name] = value
    return value


@config_app.command("show")
def config_show() -> None:
    """Print the settings stored in ``config.json``.

    ``ARTFEED_URL`` and ``ARTFEED_MAX_AGE`` are not applied, so this shows
    exactly what ``config set`` edits.

    Example::

        artfeed --json config show
    """
    from artfeed.config import get_config_dir

    config = _load()
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Setting in dot notation, e.g. feed.max_age_seconds."),
    value: str = typer.Argument(help="New value."),
) -> None:
    """Change one setting and save the file.

    Exits with code 2 when the key is unknown or the value is rejected.

    Example::

        artfeed config set feed.max_age_seconds 600
        artfeed config set images.enabled false
    """
    from artfeed.config import save_global_config

    data = _load().model_dump(mode="json")
    try:
        coerced = _assign(data, key, value)
        updated = GlobalConfig.model_validate(data)
    except InvalidUsageError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    except ValidationError as exc:
        error(f"Rejected {key}={value}: {exc.errors()[0]['msg']}")
        raise typer.Exit(code=InvalidUsageError.exit_code) from None

    save_global_config(updated)
    success(f"{key} = {coerced}")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Overwrite ``config.json`` with the defaults.

    Asks first unless the root ``--force`` flag is given.

    Example::

        artfeed --force config reset
    """
    from artfeed.config import save_global_config

    if not (ctx.obj or {}).get("force", False):
        if not typer.confirm("Replace every setting with its default?"):
            info("Left config.json unchanged.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Restored default settings.")
