"""
Plugin Errors.

Every failure raised by the plugin subsystem derives from PluginError, so
callers can catch the whole family at a single seam.
"""


class PluginError(Exception):
    """Base exception for plugin-related errors."""

    pass


class SourceParseError(PluginError):
    """Raised when a plugin descriptor cannot be parsed."""

    pass


class PathNotFound(PluginError):
    """Raised when a local plugin directory does not exist."""

    pass


class SourceFailed(PluginError):
    """Raised when applying options or running a plugin script fails."""

    pass


class GitError(PluginError):
    """
    Base exception for git-backed failures.

    Attributes:
        message: Human-readable description of the failed step
        detail: Output reported by git, if any
    """

    def __init__(self, message: str, detail: str = ""):
        self.message = message
        self.detail = detail.strip()
        super().__init__(f"{message}: {self.detail}" if self.detail else message)


class CloneFailed(GitError):
    """Raised when cloning a plugin repository fails."""

    pass


class RepositoryOpenFailed(GitError):
    """Raised when an installed plugin is not a readable git repository."""

    pass


class FetchFailed(GitError):
    """Raised when fetching from the plugin's remote fails."""

    pass


class BranchResolutionFailed(GitError):
    """Raised when the tracking commit of the current branch cannot be resolved."""

    pass


class CheckoutFailed(GitError):
    """Raised when fast-forwarding or checking out the working tree fails."""

    pass


class AggregateFailure(PluginError):
    """
    Raised once a batch operation finished with one or more plugin failures.

    Attributes:
        operation: Batch operation name (install, update, source)
        failures: (plugin name, error message) pairs in completion order
    """

    def __init__(self, operation: str, failures: list[tuple[str, str]]):
        self.operation = operation
        self.failures = failures
        lines = [f"- {name}: {message}" for name, message in failures]
        super().__init__(
            "\n".join([f"Some plugins failed to {operation}", *lines])
        )
