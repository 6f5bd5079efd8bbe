"""
Filesystem locations used by muxi.

The muxi directory is resolved from the environment on every call:
$MUXI_CONFIG_PATH, then $XDG_CONFIG_HOME/muxi, then ~/.config/muxi.
"""

import os
from pathlib import Path


def expand_tilde(path: str | Path) -> Path:
    """Expand a leading ``~`` to the user's home directory."""
    path = Path(path)
    if not path.parts or path.parts[0] != "~":
        return path
    return Path.home().joinpath(*path.parts[1:])


def display_path(path: str | Path) -> str:
    """Render a path with the home directory collapsed to ``~``."""
    path = Path(path)
    try:
        relative = path.relative_to(Path.home())
    except ValueError:
        return str(path)
    return f"~/{relative}"


def muxi_dir() -> Path:
    env_path = os.environ.get("MUXI_CONFIG_PATH")
    if env_path:
        return expand_tilde(env_path)

    env_path = os.environ.get("XDG_CONFIG_HOME")
    if env_path:
        return expand_tilde(env_path) / "muxi"

    return expand_tilde("~/.config/muxi")


def settings_file() -> Path:
    return muxi_dir() / "settings.toml"


def plugins_dir() -> Path:
    return muxi_dir() / "plugins"
