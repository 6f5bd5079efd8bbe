"""
Plugin Manager.

This module runs a lifecycle operation across every configured plugin.

Key features:
- One thread per plugin, joined before returning
- Per-plugin failure isolation with lock-guarded error collection
- Changelogs restored to declaration order after the join
- Single aggregate failure for the whole batch
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path

from muxi.plugin.errors import AggregateFailure
from muxi.plugin.model import Plugin
from muxi.plugin.report import Reporter
from muxi.plugin.source import source_plugin
from muxi.plugin.status import InstallStatus, LocalPath, Updated, UpToDate
from muxi.plugin.sync import PluginSynchronizer

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """
    Outcome of a batch operation.

    Attributes:
        operation: Operation name (install, update, source)
        changelog: Changelogs of updated plugins, in declaration order
        errors: (plugin, error) pairs in completion order
    """

    operation: str
    changelog: str = ""
    errors: list[tuple[Plugin, Exception]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        """
        Raises:
            AggregateFailure: If at least one plugin failed
        """
        if self.errors:
            raise AggregateFailure(
                self.operation,
                [(plugin.name, str(error)) for plugin, error in self.errors],
            )


class _BatchState:
    """Collections shared by the worker threads of one batch."""

    def __init__(self):
        self._errors_lock = threading.Lock()
        self._changelog_lock = threading.Lock()
        self.errors: list[tuple[Plugin, Exception]] = []
        self.changelogs: list[tuple[int, str]] = []

    def add_error(self, plugin: Plugin, error: Exception) -> None:
        with self._errors_lock:
            self.errors.append((plugin, error))

    def add_changelog(self, index: int, text: str) -> None:
        with self._changelog_lock:
            self.changelogs.append((index, text))


class PluginManager:
    """
    Fans a lifecycle operation out over all plugins and joins the results.

    Plugins are independent: their directories are disjoint and one failure
    never cancels or delays the others beyond the final join.
    """

    def __init__(
        self,
        plugins: list[Plugin],
        synchronizer: PluginSynchronizer,
        reporter: Reporter | None = None,
    ):
        """
        Initialize PluginManager.

        Args:
            plugins: Plugins in declaration order
            synchronizer: Performs install/update of a single plugin
            reporter: Receives per-plugin lifecycle events
        """
        self.plugins = list(plugins)
        self.synchronizer = synchronizer
        self.reporter = reporter if reporter is not None else Reporter()

    @property
    def plugins_root(self) -> Path:
        return self.synchronizer.plugins_root

    def install_all(self) -> BatchResult:
        return self._run_batch("install", self._install_one)

    def update_all(self) -> BatchResult:
        return self._run_batch("update", self._update_one)

    def source_all(self) -> BatchResult:
        return self._run_batch("source", self._source_one)

    def _run_batch(
        self,
        operation: str,
        task: Callable[[int, Plugin, _BatchState], Callable[[], None]],
    ) -> BatchResult:
        state = _BatchState()
        threads = []

        logger.debug("Starting %s of %d plugins", operation, len(self.plugins))

        for index, plugin in enumerate(self.plugins):
            thread = threading.Thread(
                target=self._run_unit,
                args=(task, index, plugin, state),
                name=f"muxi-{operation}-{plugin.name}",
            )
            thread.start()
            threads.append(thread)

        for thread in threads:
            thread.join()

        state.changelogs.sort(key=lambda entry: entry[0])
        changelog = "\n\n".join(text for _, text in state.changelogs)

        logger.debug(
            "Finished %s: %d failed, %d changelogs",
            operation,
            len(state.errors),
            len(state.changelogs),
        )
        return BatchResult(operation=operation, changelog=changelog, errors=state.errors)

    def _run_unit(
        self,
        task: Callable[[int, Plugin, _BatchState], Callable[[], None]],
        index: int,
        plugin: Plugin,
        state: _BatchState,
    ) -> None:
        self.reporter.start(plugin.name)
        try:
            report = task(index, plugin, state)
        except Exception as e:
            logger.debug("%s failed: %s", plugin.name, e)
            self.reporter.error(plugin.name)
            state.add_error(plugin, e)
        else:
            # Reporter failures never count as plugin failures
            try:
                report()
            except Exception:
                logger.warning("Reporter failed for %s", plugin.name, exc_info=True)

    def _install_one(
        self, index: int, plugin: Plugin, state: _BatchState
    ) -> Callable[[], None]:
        status = self.synchronizer.install(plugin)
        if status is InstallStatus.ALREADY_INSTALLED:
            return partial(self.reporter.already_installed, plugin.name)
        return partial(self.reporter.success, plugin.name)

    def _update_one(
        self, index: int, plugin: Plugin, state: _BatchState
    ) -> Callable[[], None]:
        status = self.synchronizer.update(plugin)

        if isinstance(status, UpToDate):
            return partial(self.reporter.up_to_date, plugin.name, status.commit)
        if isinstance(status, LocalPath):
            return partial(self.reporter.up_to_date, plugin.name, status.path)

        if status.changes:
            state.add_changelog(index, format_changelog(plugin, status))
        detail = f"{status.from_id}..{status.to_id}" if status.from_id else status.to_id
        return partial(self.reporter.success, plugin.name, detail)

    def _source_one(
        self, index: int, plugin: Plugin, state: _BatchState
    ) -> Callable[[], None]:
        source_plugin(plugin, self.plugins_root)
        return partial(self.reporter.success, plugin.name)


def format_changelog(plugin: Plugin, status: Updated) -> str:
    """
    Render the changelog of one updated plugin.

    Args:
        plugin: Updated plugin
        status: Update result carrying the changes

    Returns:
        Header line, optional compare link, then one line per commit
    """
    header = f"{plugin.name} {status.from_id}..{status.to_id}"
    lines = [header]
    if status.range_url:
        lines.append(f"  {status.range_url}")
    for change in status.changes:
        lines.append(f"  {change.id} {change.summary} ({change.time:%Y-%m-%d})")
    return "\n".join(lines)
