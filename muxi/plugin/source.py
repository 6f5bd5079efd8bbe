"""
Plugin Sourcing.

This module loads an installed plugin into the running tmux server.

Key features:
- Apply plugin options as global ``@key value`` tmux options
- Run every ``*.tmux`` script found in the plugin root
"""

import logging
import subprocess
from pathlib import Path

from muxi.path import display_path
from muxi.plugin.errors import PathNotFound, SourceFailed
from muxi.plugin.model import Plugin

logger = logging.getLogger(__name__)

SCRIPT_SUFFIX = ".tmux"


def source_plugin(plugin: Plugin, plugins_root: Path) -> None:
    """
    Apply a plugin's options and run its tmux scripts.

    Args:
        plugin: Plugin to source
        plugins_root: Directory holding remote plugin clones

    Raises:
        PathNotFound: If the plugin is not installed
        SourceFailed: If tmux rejects an option or a script fails
    """
    root = plugin.install_path(plugins_root)

    if not root.exists():
        raise PathNotFound(f"Plugin path {display_path(root)} does not exist")

    apply_options(plugin)

    for script in find_scripts(root):
        _run_tmux(
            ["run", "-b", str(script)],
            f"Failed to execute {script}",
        )


def apply_options(plugin: Plugin) -> None:
    """
    Set each plugin option as a global tmux option.

    Raises:
        SourceFailed: If tmux rejects an option
    """
    for key, value in sorted(plugin.options.items()):
        _run_tmux(
            ["set", "-g", f"@{key}", value],
            f"Failed to configure option @{key} for {plugin.name}",
        )


def find_scripts(root: Path) -> list[Path]:
    """
    Find the tmux scripts of a plugin.

    Args:
        root: Plugin directory

    Returns:
        ``*.tmux`` files directly inside ``root``, sorted by name
    """
    return sorted(
        path for path in root.iterdir() if path.suffix == SCRIPT_SUFFIX and path.is_file()
    )


def _run_tmux(args: list[str], message: str) -> None:
    cmd = ["tmux", *args]
    logger.debug("Running %s", " ".join(cmd))

    try:
        result = subprocess.run(
            cmd,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError as e:
        raise SourceFailed(f"{message}: tmux command not found") from e
    except OSError as e:
        raise SourceFailed(f"{message}: {e}") from e

    if result.returncode != 0:
        detail = (result.stderr or result.stdout).strip()
        raise SourceFailed(
            f"{message}: exited with {result.returncode}"
            + (f" ({detail})" if detail else "")
        )
