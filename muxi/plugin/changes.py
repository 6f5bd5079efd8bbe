"""Changelog collection between two commits of a plugin repository."""

from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

from muxi.plugin.git_ops import log_range, short_id
from muxi.plugin.status import PluginChange

EMPTY_SUMMARY = "(no commit message)"


def collect_changes(
    repo_dir: Path,
    from_id: str | None,
    to_id: str,
    commit_url: Callable[[str], str | None] | None = None,
) -> list[PluginChange]:
    """
    Collect the commits an update brings in.

    Args:
        repo_dir: Repository path
        from_id: Previous commit (None for a fresh install)
        to_id: New commit
        commit_url: Builds a per-commit link from a full commit id

    Returns:
        Commits on ``from_id..to_id``, newest first

    Raises:
        GitError: If the commit range cannot be walked
    """
    if from_id is None or from_id == to_id:
        return []

    changes = []
    for full_id, timestamp, subject in log_range(repo_dir, from_id, to_id):
        changes.append(
            PluginChange(
                id=short_id(full_id),
                full_id=full_id,
                summary=subject.strip() or EMPTY_SUMMARY,
                time=datetime.fromtimestamp(timestamp, tz=timezone.utc),
                url=commit_url(full_id) if commit_url else None,
            )
        )
    return changes
