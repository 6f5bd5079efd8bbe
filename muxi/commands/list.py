"""muxi plugins list - show declared plugins and their on-disk state."""

from typing import Any

from muxi.commands.helpers import load_manager, no_plugins
from muxi.plugin.errors import PluginError
from muxi.plugin.status import LocalStatus, PluginStatus


def list_command(args: Any) -> int:
    """
    Execute list command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    settings, manager = load_manager(args)

    if not settings.plugins:
        return no_plugins()

    for plugin in settings.plugins:
        try:
            state = describe_status(manager.synchronizer.status(plugin))
        except PluginError as e:
            state = f"error: {e}"

        print(f"{plugin.name} {plugin} [{state}]")
        for key, value in sorted(plugin.options.items()):
            print(f"  @{key} {value}")

    return 0


def describe_status(status: PluginStatus) -> str:
    if isinstance(status, LocalStatus):
        return "local" if status.exists else "local, missing"
    if not status.installed:
        return "not installed"
    return f"installed {status.commit}"
