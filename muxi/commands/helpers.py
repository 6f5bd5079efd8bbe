"""Shared setup for plugin commands."""

import sys
from typing import Any

from muxi.config import Settings, load_settings
from muxi.plugin.manager import BatchResult, PluginManager
from muxi.plugin.report import ConsoleReporter, Reporter
from muxi.plugin.sync import PluginSynchronizer


def load_manager(args: Any, reporter: Reporter | None = None) -> tuple[Settings, PluginManager]:
    """
    Build a PluginManager from the settings file.

    Args:
        args: Parsed command-line arguments
        reporter: Event sink (defaults to a console reporter)

    Returns:
        Tuple of (settings, manager)
    """
    settings = load_settings(args.config)
    manager = PluginManager(
        settings.plugins,
        PluginSynchronizer(settings.plugins_dir),
        reporter if reporter is not None else ConsoleReporter(),
    )
    return settings, manager


def no_plugins() -> int:
    print("No plugins defined!", file=sys.stderr)
    return 0


def finish_batch(result: BatchResult) -> int:
    """
    Print the batch changelog and surface failures.

    Raises:
        AggregateFailure: If any plugin failed
    """
    if result.changelog:
        print()
        print(result.changelog)

    result.raise_for_errors()
    return 0
