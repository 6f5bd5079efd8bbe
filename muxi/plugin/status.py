"""
Plugin status snapshots.

Read-only values computed from the on-disk state on every call.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class InstallStatus(Enum):
    """Outcome of an install request."""

    INSTALLED = "installed"
    ALREADY_INSTALLED = "already_installed"


@dataclass(frozen=True)
class RemoteStatus:
    """State of a git-backed plugin."""

    installed: bool
    commit: str | None = None


@dataclass(frozen=True)
class LocalStatus:
    """State of a plugin living in a user-managed directory."""

    exists: bool
    path: str


PluginStatus = RemoteStatus | LocalStatus


@dataclass(frozen=True)
class PluginChange:
    """
    A single commit brought in by an update.

    Attributes:
        id: Abbreviated commit id (7 hex characters)
        full_id: Full commit id
        summary: First line of the commit message
        time: Commit time (UTC)
        url: Link to the commit on its forge, when the host is known
    """

    id: str
    full_id: str
    summary: str
    time: datetime
    url: str | None = None


@dataclass(frozen=True)
class Updated:
    """The plugin moved to a new commit (or was freshly installed)."""

    from_id: str | None
    to_id: str
    changes: list[PluginChange] = field(default_factory=list)
    range_url: str | None = None


@dataclass(frozen=True)
class UpToDate:
    """The local branch already matches its tracking branch."""

    commit: str


@dataclass(frozen=True)
class LocalPath:
    """Local plugins are never updated, only verified."""

    path: str


PluginUpdateStatus = Updated | UpToDate | LocalPath
