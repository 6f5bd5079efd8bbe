"""
muxi Configuration - TOML settings for the plugin subsystem.

This module provides:
- Loading the ordered plugin list from settings.toml
- Resolving the plugins root directory
- Adding a plugin source while preserving the user's comments

Example settings.toml:
    plugins_dir = "~/.local/share/muxi/plugins"  # optional
    plugins = [
        "tmux-plugins/tmux-sensible",
        { url = "tmux-plugins/tmux-yank", opts = { yank_selection = "primary" } },
        { path = "~/dev/my-plugin" },
    ]
"""

from dataclasses import dataclass, field
from pathlib import Path

import tomlkit

from muxi import path as muxi_path
from muxi.config.schema import ConfigField, ValidationError, validate_settings
from muxi.config.toml_handler import TOMLError, read_document, read_toml, write_document
from muxi.plugin.errors import SourceParseError
from muxi.plugin.model import Plugin

SETTINGS_SCHEMA = {
    "plugins": ConfigField(list, [], "Plugin sources in load order"),
    "plugins_dir": ConfigField(str, "", "Directory holding cloned plugins"),
}


class ConfigError(Exception):
    """Base exception for settings errors."""

    pass


@dataclass
class Settings:
    """
    Plugin-related settings.

    Attributes:
        plugins: Plugins in declaration order
        plugins_dir: Directory holding one clone per remote plugin
        source: Settings file the values were read from
    """

    plugins_dir: Path
    plugins: list[Plugin] = field(default_factory=list)
    source: Path | None = None


def load_settings(settings_path: Path | None = None) -> Settings:
    """
    Load plugin settings.

    A missing settings file is not an error: muxi then runs without plugins.

    Args:
        settings_path: Settings file (defaults to <muxi dir>/settings.toml)

    Returns:
        Settings instance

    Raises:
        ConfigError: If the file cannot be parsed or a plugin entry is invalid
    """
    settings_path = settings_path or muxi_path.settings_file()

    if not settings_path.exists():
        return Settings(plugins_dir=muxi_path.plugins_dir(), source=None)

    try:
        values = validate_settings(read_toml(settings_path), SETTINGS_SCHEMA)
    except (TOMLError, ValidationError) as e:
        raise ConfigError(f"Invalid settings in {settings_path}: {e}") from e

    plugins = []
    for index, entry in enumerate(values["plugins"]):
        try:
            plugins.append(Plugin.from_descriptor(entry))
        except SourceParseError as e:
            raise ConfigError(
                f"Invalid plugin #{index + 1} in {settings_path}: {e}"
            ) from e

    plugins_dir = (
        muxi_path.expand_tilde(values["plugins_dir"])
        if values["plugins_dir"]
        else muxi_path.plugins_dir()
    )
    return Settings(plugins_dir=plugins_dir, plugins=plugins, source=settings_path)


def add_plugin(source: str, settings_path: Path | None = None) -> Plugin:
    """
    Append a plugin source to the settings file.

    Args:
        source: "owner/repo" shorthand or URL
        settings_path: Settings file (defaults to <muxi dir>/settings.toml)

    Returns:
        The parsed plugin

    Raises:
        ConfigError: If the source is invalid or a plugin with the same name
            is already declared
    """
    settings_path = settings_path or muxi_path.settings_file()

    try:
        plugin = Plugin.parse(source)
    except SourceParseError as e:
        raise ConfigError(str(e)) from e

    existing = load_settings(settings_path).plugins
    if any(other.name == plugin.name for other in existing):
        raise ConfigError(f"Plugin '{plugin.name}' is already declared")

    try:
        document = read_document(settings_path)
        if "plugins" not in document:
            plugins = tomlkit.array()
            plugins.multiline(True)
            document["plugins"] = plugins
        document["plugins"].append(source)
        write_document(settings_path, document)
    except TOMLError as e:
        raise ConfigError(str(e)) from e

    return plugin


__all__ = ["ConfigError", "Settings", "add_plugin", "load_settings"]
