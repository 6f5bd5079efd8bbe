"""
Plugin model.

A plugin is either remote (a git repository cloned under the plugins root)
or local (an existing directory that muxi only reads).

Accepted sources:
- "owner/repo"                      GitHub shorthand
- "https://host/owner/repo(.git)"   any absolute URL
- {"url": ..., "opts": {...}}       table with tmux options
- {"path": "~/dev/plugin"}          local directory
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

from muxi.path import display_path, expand_tilde
from muxi.plugin.errors import SourceParseError

GITHUB_HOSTS = ("github.com", "www.github.com")
GITLAB_HOSTS = ("gitlab.com", "www.gitlab.com")


@dataclass
class Plugin:
    """
    A configured tmux plugin.

    Attributes:
        name: Directory name, derived once from the URL or path
        url: Remote repository URL (None for local plugins)
        path: Local plugin directory (None for remote plugins)
        options: tmux options applied as ``@key value`` when sourcing
    """

    name: str
    url: str | None = None
    path: Path | None = None
    options: dict[str, str] = field(default_factory=dict)

    @classmethod
    def remote(cls, url: str, options: dict[str, str] | None = None) -> "Plugin":
        """
        Create a remote plugin.

        Raises:
            SourceParseError: If no usable directory name can be derived
                from the URL
        """
        name = _repo_name(url)
        if name in ("", ".", "..") or "/" in name or "\\" in name:
            raise SourceParseError(
                f"Invalid plugin source '{url}': cannot derive a plugin name"
            )
        return cls(name=name, url=url, options=dict(options or {}))

    @classmethod
    def local(
        cls, path: str | Path, options: dict[str, str] | None = None
    ) -> "Plugin":
        """
        Create a local plugin. ``~`` is expanded immediately.

        Args:
            path: Plugin directory
            options: tmux options

        Returns:
            Plugin instance
        """
        expanded = expand_tilde(path)
        name = expanded.name or str(expanded)
        return cls(name=name, path=expanded, options=dict(options or {}))

    @classmethod
    def parse(cls, source: str) -> "Plugin":
        """
        Parse a plugin from "owner/repo" shorthand or a full URL.

        Args:
            source: Plugin source string

        Returns:
            Remote plugin

        Raises:
            SourceParseError: If the source is neither a URL nor owner/repo
        """
        if not source:
            raise SourceParseError("Invalid plugin source '': empty string")

        if _is_absolute_url(source):
            return cls.remote(source)

        if "/" in source and "://" not in source:
            github_url = f"https://github.com/{source}"
            if not _is_absolute_url(github_url):
                raise SourceParseError(f"Invalid plugin source '{source}'")
            return cls.remote(github_url)

        if "://" in source:
            if urlsplit(source).scheme:
                raise SourceParseError(
                    f"Invalid plugin source '{source}': URL has an empty host"
                )
            raise SourceParseError(
                f"Invalid plugin source '{source}': missing or invalid URL scheme"
            )
        raise SourceParseError(
            f"Invalid plugin source '{source}': relative URL without a base"
        )

    @classmethod
    def from_descriptor(cls, value: Any) -> "Plugin":
        """
        Build a plugin from a configuration entry.

        Args:
            value: Bare source string, or a table with exactly one of
                ``url``/``path`` and optional ``opts``

        Returns:
            Plugin instance

        Raises:
            SourceParseError: If the entry is malformed
        """
        if isinstance(value, str):
            return cls.parse(value)

        if not isinstance(value, dict):
            raise SourceParseError(
                f"Expected a plugin string or table, got {type(value).__name__}"
            )

        url = value.get("url")
        path = value.get("path")
        options = _parse_options(value.get("opts", {}))

        if url is not None and path is not None:
            raise SourceParseError("Plugin table must not set both `url` and `path`")

        if path is not None:
            if not isinstance(path, str) or not path:
                raise SourceParseError("Plugin `path` must be a non-empty string")
            return cls.local(path, options)

        if url is not None:
            if not isinstance(url, str):
                raise SourceParseError("Plugin `url` must be a string")
            plugin = cls.parse(url)
            plugin.options = options
            return plugin

        raise SourceParseError("Plugin table must include either `url` or `path`")

    @property
    def is_local(self) -> bool:
        return self.path is not None

    def install_path(self, plugins_root: Path) -> Path:
        if self.path is not None:
            return self.path
        return Path(plugins_root) / self.name

    def compare_url(self, from_id: str, to_id: str) -> str | None:
        """
        Link to the forge page comparing two commits.

        Args:
            from_id: Old commit id
            to_id: New commit id

        Returns:
            Compare URL, or None for local plugins and unknown hosts
        """
        base = self._forge_base()
        if base is None:
            return None
        base_url, host = base
        if host in GITHUB_HOSTS:
            return f"{base_url}/compare/{from_id}...{to_id}"
        return f"{base_url}/-/compare/{from_id}...{to_id}"

    def commit_url(self, commit_id: str) -> str | None:
        base = self._forge_base()
        if base is None:
            return None
        base_url, host = base
        if host in GITHUB_HOSTS:
            return f"{base_url}/commit/{commit_id}"
        return f"{base_url}/-/commit/{commit_id}"

    def _forge_base(self) -> tuple[str, str] | None:
        if self.url is None:
            return None
        host = (urlsplit(self.url).hostname or "").lower()
        if host not in GITHUB_HOSTS + GITLAB_HOSTS:
            return None

        base = self.url.rstrip("/")
        if base.lower().endswith(".git"):
            base = base[:-4]
        return base.rstrip("/"), host

    def __str__(self) -> str:
        if self.path is not None:
            return display_path(self.path)
        return self.url or "unknown"


def _is_absolute_url(value: str) -> bool:
    try:
        parts = urlsplit(value)
    except ValueError as e:
        raise SourceParseError(f"Invalid plugin source '{value}': {e}") from e
    return bool(parts.scheme) and bool(parts.netloc or parts.path)


def _repo_name(url: str) -> str:
    segment = urlsplit(url).path.rstrip("/").rsplit("/", 1)[-1]
    while segment.endswith(".git"):
        segment = segment[: -len(".git")]
    return segment


def _parse_options(value: Any) -> dict[str, str]:
    if not isinstance(value, dict):
        raise SourceParseError("Plugin `opts` must be a table of strings")

    options = {}
    for key, option in value.items():
        if not isinstance(key, str) or not isinstance(option, str):
            raise SourceParseError(
                f"Plugin option {key!r} must map a string to a string"
            )
        options[key] = option
    return options
