"""
Repository Synchronizer.

This module converges one plugin's on-disk state with its source.

Key features:
- Install: clone remote plugins, verify local ones
- Update: fetch, resolve the tracking commit, fast-forward and checkout
- Status: read the installed commit without touching the network
"""

import logging
from pathlib import Path

from muxi.path import display_path
from muxi.plugin import git_ops
from muxi.plugin.changes import collect_changes
from muxi.plugin.errors import PathNotFound
from muxi.plugin.model import Plugin
from muxi.plugin.status import (
    InstallStatus,
    LocalPath,
    LocalStatus,
    PluginStatus,
    PluginUpdateStatus,
    RemoteStatus,
    Updated,
    UpToDate,
)

logger = logging.getLogger(__name__)


class PluginSynchronizer:
    """
    Installs and updates plugins under a plugins root directory.

    The synchronizer keeps no per-plugin state; every call reads the git
    repository on disk.
    """

    def __init__(self, plugins_root: Path, remote: str = "origin"):
        """
        Initialize PluginSynchronizer.

        Args:
            plugins_root: Directory holding one clone per remote plugin
            remote: Remote fetched on update
        """
        self.plugins_root = Path(plugins_root)
        self.remote = remote

    def is_installed(self, plugin: Plugin) -> bool:
        return plugin.install_path(self.plugins_root).exists()

    def status(self, plugin: Plugin) -> PluginStatus:
        """
        Read the current state of a plugin.

        Args:
            plugin: Plugin to inspect

        Returns:
            LocalStatus or RemoteStatus snapshot

        Raises:
            RepositoryOpenFailed: If an installed plugin cannot be read
        """
        if plugin.path is not None:
            return LocalStatus(exists=plugin.path.exists(), path=display_path(plugin.path))

        if not self.is_installed(plugin):
            return RemoteStatus(installed=False)

        repo_dir = git_ops.open_repository(plugin.install_path(self.plugins_root))
        commit = git_ops.head_commit(repo_dir)
        return RemoteStatus(installed=True, commit=git_ops.short_id(commit))

    def install(self, plugin: Plugin) -> InstallStatus:
        """
        Install a plugin.

        Args:
            plugin: Plugin to install

        Returns:
            INSTALLED after a clone, ALREADY_INSTALLED otherwise

        Raises:
            PathNotFound: If a local plugin directory is missing
            CloneFailed: If cloning fails
        """
        if plugin.path is not None:
            _ensure_exists(plugin.path)
            return InstallStatus.ALREADY_INSTALLED

        if self.is_installed(plugin):
            return InstallStatus.ALREADY_INSTALLED

        target = plugin.install_path(self.plugins_root)
        logger.debug("Cloning %s into %s", plugin.url, target)
        git_ops.clone_plugin(plugin.url, target)
        return InstallStatus.INSTALLED

    def update(self, plugin: Plugin) -> PluginUpdateStatus:
        """
        Update a plugin to the tip of its tracking branch.

        Only fast-forwards are performed. Local changes in the plugin's
        working tree are discarded by the forced checkout.

        Args:
            plugin: Plugin to update

        Returns:
            Updated, UpToDate or LocalPath

        Raises:
            PathNotFound: If a local plugin directory is missing
            CloneFailed: If a missing plugin cannot be cloned
            RepositoryOpenFailed: If the clone cannot be read
            FetchFailed: If fetching the remote fails
            BranchResolutionFailed: If the tracking commit cannot be resolved
            CheckoutFailed: If moving the branch or checkout fails
            GitError: If the changelog cannot be computed
        """
        if plugin.path is not None:
            _ensure_exists(plugin.path)
            return LocalPath(path=display_path(plugin.path))

        if not self.is_installed(plugin):
            self.install(plugin)
            repo_dir = git_ops.open_repository(plugin.install_path(self.plugins_root))
            head = git_ops.head_commit(repo_dir)
            return Updated(from_id=None, to_id=git_ops.short_id(head))

        repo_dir = git_ops.open_repository(plugin.install_path(self.plugins_root))
        local_commit = git_ops.head_commit(repo_dir)

        branch = git_ops.current_branch(repo_dir)
        if branch is None:
            logger.debug("%s has a detached HEAD, leaving it as is", plugin.name)
            return Updated(from_id=None, to_id=git_ops.short_id(local_commit))

        git_ops.fetch_remote(repo_dir, self.remote)
        upstream_commit = git_ops.tracking_commit(repo_dir, branch, self.remote)

        if upstream_commit == local_commit:
            return UpToDate(commit=git_ops.short_id(local_commit))

        changes = collect_changes(
            repo_dir, local_commit, upstream_commit, commit_url=plugin.commit_url
        )
        git_ops.fast_forward(repo_dir, branch, upstream_commit, local_commit)
        logger.debug(
            "%s moved %s..%s (%d commits)",
            plugin.name,
            git_ops.short_id(local_commit),
            git_ops.short_id(upstream_commit),
            len(changes),
        )

        return Updated(
            from_id=git_ops.short_id(local_commit),
            to_id=git_ops.short_id(upstream_commit),
            changes=changes,
            range_url=plugin.compare_url(local_commit, upstream_commit),
        )


def _ensure_exists(path: Path) -> None:
    if not path.exists():
        raise PathNotFound(f"Plugin path {display_path(path)} does not exist")
