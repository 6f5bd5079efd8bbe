"""
muxi - tmux sessions and plugins, declared in one place.

This package holds the plugin lifecycle engine (install, update, source)
and the configuration layer that feeds it.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
