"""muxi plugins update - fast-forward every plugin and print what changed."""

from typing import Any

from muxi.commands.helpers import finish_batch, load_manager, no_plugins


def update_command(args: Any) -> int:
    """
    Execute update command.

    Missing plugins are installed first.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    settings, manager = load_manager(args)

    if not settings.plugins:
        return no_plugins()

    return finish_batch(manager.update_all())
