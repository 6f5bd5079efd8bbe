"""
muxi CLI - plugin management commands.

Usage:
    muxi plugins install         Clone missing plugins
    muxi plugins update          Update plugins and show their changelogs
    muxi plugins list            List plugins and their state
    muxi plugins init            Source plugins into tmux
    muxi plugins add <source>    Declare a plugin in settings.toml
"""

import argparse
import logging
import sys
from pathlib import Path

from muxi import __version__
from muxi.config import ConfigError
from muxi.plugin.errors import PluginError


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with the plugin subcommands."""
    parser = argparse.ArgumentParser(
        prog="muxi",
        description="muxi - tmux sessions and plugins",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Settings file (default: <muxi dir>/settings.toml)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    plugins = commands.add_parser("plugins", help="Manage tmux plugins")

    actions = plugins.add_subparsers(dest="action", metavar="ACTION")
    actions.add_parser("install", help="Clone missing plugins")
    actions.add_parser("update", help="Update plugins and show their changelogs")
    actions.add_parser("list", help="List plugins and their state")
    actions.add_parser("init", help="Source plugins into tmux")
    add = actions.add_parser("add", help="Declare a plugin in settings.toml")
    add.add_argument("targets", nargs="*", help="owner/repo shorthand or URL")

    return parser


def run_command(args: argparse.Namespace) -> int:
    """Route parsed arguments to a command implementation."""
    if args.action == "install":
        from muxi.commands.install import install_command

        return install_command(args)

    elif args.action == "update":
        from muxi.commands.update import update_command

        return update_command(args)

    elif args.action == "list":
        from muxi.commands.list import list_command

        return list_command(args)

    elif args.action == "init":
        from muxi.commands.init import init_command

        return init_command(args)

    elif args.action == "add":
        from muxi.commands.add import add_command

        return add_command(args)

    return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the muxi CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command != "plugins" or args.action is None:
        parser.print_help()
        return 0

    try:
        return run_command(args)

    except (PluginError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
