"""
muxi Plugin System - Plugin installation, updates and sourcing.

This module handles:
- Plugin source parsing (GitHub shorthand, URLs, local paths)
- Git-based installation and fast-forward updates
- Changelogs between the old and new commits
- Concurrent batch operations with per-plugin failure isolation
"""

from muxi.plugin.errors import AggregateFailure, PluginError, SourceParseError
from muxi.plugin.manager import BatchResult, PluginManager
from muxi.plugin.model import Plugin
from muxi.plugin.report import ConsoleReporter, Reporter
from muxi.plugin.sync import PluginSynchronizer

__all__ = [
    "AggregateFailure",
    "BatchResult",
    "ConsoleReporter",
    "Plugin",
    "PluginError",
    "PluginManager",
    "PluginSynchronizer",
    "Reporter",
    "SourceParseError",
]
