"""muxi plugins add - declare a new plugin in settings.toml."""

import sys
from typing import Any

from muxi.config import add_plugin


def add_command(args: Any) -> int:
    """
    Execute add command.

    Args:
        args: Parsed command-line arguments (``targets`` holds the sources)

    Returns:
        Exit code (0 for success)
    """
    if not args.targets:
        print("Error: No targets specified", file=sys.stderr)
        print("Usage: muxi plugins add <owner/repo | url>...", file=sys.stderr)
        return 1

    for target in args.targets:
        plugin = add_plugin(target, args.config)
        print(f"Added {plugin.name} ({plugin})")

    return 0
