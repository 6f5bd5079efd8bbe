"""
Git Operations for Plugin Management.

This module drives the ``git`` binary for plugin installation and updates.

Key features:
- Clone plugins from git repositories
- Open an installed plugin and read its HEAD
- Fetch from origin and resolve tracking branches
- Fast-forward a branch and force-checkout the working tree
- Walk the commits of a range for changelogs
"""

import logging
import os
import subprocess
from pathlib import Path

from muxi.plugin.errors import (
    BranchResolutionFailed,
    CheckoutFailed,
    CloneFailed,
    FetchFailed,
    GitError,
    RepositoryOpenFailed,
)

logger = logging.getLogger(__name__)

SHORT_ID_LENGTH = 7

# Field and record separators for `git log` output
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"


def short_id(commit_id: str) -> str:
    """Abbreviate a full commit id for display."""
    return commit_id[:SHORT_ID_LENGTH]


def _git_env() -> dict[str, str]:
    env = os.environ.copy()
    # Never block a worker thread on a credential prompt
    env["GIT_TERMINAL_PROMPT"] = "0"
    return env


def run_git(
    args: list[str],
    cwd: Path | None = None,
    error: type[GitError] = GitError,
    message: str = "git command failed",
) -> str:
    """
    Run a git command and return its stdout.

    Args:
        args: Arguments passed after ``git``
        cwd: Working directory
        error: GitError subclass raised on failure
        message: Description used in the raised error

    Returns:
        Captured stdout

    Raises:
        GitError: (as ``error``) if git exits non-zero or is missing
    """
    cmd = ["git", *args]
    logger.debug("Running %s in %s", " ".join(cmd), cwd or Path.cwd())

    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            env=_git_env(),
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError as e:
        raise error(message, "git command not found. Please install git.") from e
    except OSError as e:
        raise error(message, str(e)) from e

    if result.returncode != 0:
        raise error(message, result.stderr or result.stdout)

    return result.stdout


def _try_git(args: list[str], cwd: Path) -> str | None:
    """Run a git query, returning None instead of raising on a non-zero exit."""
    try:
        return run_git(args, cwd=cwd)
    except GitError as e:
        logger.debug("git %s failed: %s", " ".join(args), e)
        return None


def clone_plugin(repo_url: str, target_dir: Path) -> None:
    """
    Clone a plugin repository.

    Args:
        repo_url: Git repository URL
        target_dir: Target directory for clone

    Raises:
        CloneFailed: If clone operation fails
    """
    try:
        target_dir.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise CloneFailed(
            f"Failed to create plugins directory at {target_dir.parent}", str(e)
        ) from e

    run_git(
        ["clone", "--quiet", repo_url, str(target_dir)],
        error=CloneFailed,
        message="Failed to clone repository",
    )


def open_repository(repo_dir: Path) -> Path:
    """
    Check that a directory is the top level of a git working tree.

    An enclosing repository (e.g. a dotfiles repo holding the plugins
    directory) does not count.

    Args:
        repo_dir: Plugin directory

    Returns:
        Resolved repository path

    Raises:
        RepositoryOpenFailed: If the directory is not a repository root
    """
    if not repo_dir.is_dir():
        raise RepositoryOpenFailed(
            "Failed to open repository", f"{repo_dir} is not a directory"
        )

    toplevel = run_git(
        ["rev-parse", "--show-toplevel"],
        cwd=repo_dir,
        error=RepositoryOpenFailed,
        message="Failed to open repository",
    ).strip()

    resolved = repo_dir.resolve()
    if not toplevel or Path(toplevel).resolve() != resolved:
        raise RepositoryOpenFailed(
            "Failed to open repository", f"{repo_dir} is not a git repository root"
        )
    return resolved


def head_commit(repo_dir: Path) -> str:
    """
    Resolve HEAD to a full commit id.

    Raises:
        RepositoryOpenFailed: If HEAD does not point at a commit
    """
    return run_git(
        ["rev-parse", "--verify", "--quiet", "HEAD^{commit}"],
        cwd=repo_dir,
        error=RepositoryOpenFailed,
        message="Failed to read commit",
    ).strip()


def current_branch(repo_dir: Path) -> str | None:
    """
    Get the branch HEAD points to.

    Returns:
        Short branch name, or None when HEAD is detached
    """
    output = _try_git(["symbolic-ref", "--quiet", "--short", "HEAD"], repo_dir)
    if output is None:
        return None
    return output.strip() or None


def fetch_remote(repo_dir: Path, remote: str = "origin") -> None:
    """
    Fetch a remote using its configured refspecs.

    Raises:
        FetchFailed: If fetch operation fails
    """
    run_git(
        ["fetch", "--quiet", remote],
        cwd=repo_dir,
        error=FetchFailed,
        message=f"Failed to fetch from remote '{remote}'",
    )


def resolve_commit(repo_dir: Path, rev: str) -> str | None:
    """Resolve a revision to a full commit id, or None if it does not exist."""
    output = _try_git(["rev-parse", "--verify", "--quiet", f"{rev}^{{commit}}"], repo_dir)
    if output is None:
        return None
    return output.strip() or None


def tracking_commit(repo_dir: Path, branch: str, remote: str = "origin") -> str:
    """
    Resolve the commit a local branch should move to.

    The branch's configured upstream wins; without one, the same-named
    branch on ``remote`` is used.

    Args:
        repo_dir: Repository path
        branch: Local branch name
        remote: Fallback remote name

    Returns:
        Full commit id

    Raises:
        BranchResolutionFailed: If neither ref resolves
    """
    commit = resolve_commit(repo_dir, f"{branch}@{{upstream}}")
    if commit is not None:
        return commit

    fallback = f"refs/remotes/{remote}/{branch}"
    commit = resolve_commit(repo_dir, fallback)
    if commit is not None:
        logger.debug("No upstream configured for %s, using %s", branch, fallback)
        return commit

    raise BranchResolutionFailed(
        f"Failed to resolve tracking branch for '{branch}'",
        f"no upstream configured and {fallback} does not exist",
    )


def fast_forward(repo_dir: Path, branch: str, new_id: str, old_id: str) -> None:
    """
    Move a branch to a new commit, point HEAD at it and force-checkout.

    Args:
        repo_dir: Repository path
        branch: Local branch name
        new_id: Commit the branch moves to
        old_id: Commit the branch is expected to be at

    Raises:
        CheckoutFailed: If any step fails
    """
    ref = f"refs/heads/{branch}"
    run_git(
        ["update-ref", "-m", "muxi: fast-forward", ref, new_id, old_id],
        cwd=repo_dir,
        error=CheckoutFailed,
        message=f"Failed to update branch {branch}",
    )
    run_git(
        ["symbolic-ref", "HEAD", ref],
        cwd=repo_dir,
        error=CheckoutFailed,
        message="Failed to set HEAD",
    )
    run_git(
        ["checkout", "--force", "--quiet", branch, "--"],
        cwd=repo_dir,
        error=CheckoutFailed,
        message="Failed to checkout",
    )


def log_range(repo_dir: Path, from_id: str, to_id: str) -> list[tuple[str, int, str]]:
    """
    List commits reachable from ``to_id`` but not from ``from_id``.

    Commits come newest first: no parent before its children, otherwise
    by commit time.

    Args:
        repo_dir: Repository path
        from_id: Excluded commit
        to_id: Included commit

    Returns:
        (full id, commit timestamp, subject) tuples

    Raises:
        GitError: If the range cannot be walked
    """
    output = run_git(
        [
            "log",
            "--date-order",
            f"--format=%H{_FIELD_SEP}%ct{_FIELD_SEP}%s{_RECORD_SEP}",
            to_id,
            f"^{from_id}",
            "--",
        ],
        cwd=repo_dir,
        message="Failed to walk commits",
    )

    commits = []
    for record in output.split(_RECORD_SEP):
        record = record.strip("\n")
        if not record:
            continue
        full_id, timestamp, subject = record.split(_FIELD_SEP, 2)
        commits.append((full_id, int(timestamp), subject))
    return commits
