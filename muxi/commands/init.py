"""muxi plugins init - source every plugin into the running tmux server."""

from typing import Any

from muxi.commands.helpers import load_manager
from muxi.plugin.report import Reporter


def init_command(args: Any) -> int:
    # Runs from tmux.conf, so it stays silent unless something fails
    settings, manager = load_manager(args, reporter=Reporter())

    if not settings.plugins:
        return 0

    manager.source_all().raise_for_errors()
    return 0
