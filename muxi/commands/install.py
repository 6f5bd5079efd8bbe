"""muxi plugins install - clone every declared plugin that is missing."""

from typing import Any

from muxi.commands.helpers import finish_batch, load_manager, no_plugins


def install_command(args: Any) -> int:
    """
    Execute install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    settings, manager = load_manager(args)

    if not settings.plugins:
        return no_plugins()

    return finish_batch(manager.install_all())
