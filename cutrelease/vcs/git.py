"""Git collaborator.

``VersionControl`` is the narrow interface the release workflow depends on;
``GitRepository`` implements it by shelling out to ``git``. Command output is
parsed into typed values (``TagFound | TagNotFound``, ``SyncState``) so
callers never inspect exit codes or grep stdout.

Usage:
    repo = GitRepository(Path("."))
    match repo.lookup_tag("v1.2.3"):
        case Ok(TagFound()):
            print("tag exists")
        case Ok(TagNotFound()):
            print("tag is free")
        case Err(e):
            print(f"git failed: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from cutrelease.core.result import Err, Ok, Result
from cutrelease.platform.process import ProcessError
from cutrelease.platform.process import run as run_process

__all__ = [
    "GitError",
    "GitRepository",
    "SyncState",
    "TagFound",
    "TagLookup",
    "TagNotFound",
    "VersionControl",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class TagFound:
    tag: str


@dataclass(frozen=True, slots=True)
class TagNotFound:
    tag: str


type TagLookup = TagFound | TagNotFound


@dataclass(frozen=True, slots=True)
class SyncState:
    """Commit divergence between HEAD and its remote counterpart."""

    upstream: str
    ahead: int
    behind: int

    @property
    def in_sync(self) -> bool:
        return self.ahead == 0 and self.behind == 0


class VersionControl(Protocol):
    """Version control operations needed to cut a release."""

    def lookup_tag(self, tag: str) -> Result[TagLookup, GitError]: ...

    def list_tags(self) -> Result[list[str], GitError]: ...

    def log_oneline(self, since: str | None) -> Result[list[str], GitError]: ...

    def file_at_head(self, path: Path) -> Result[str, GitError]: ...

    def signing_key(self) -> Result[str | None, GitError]: ...

    def current_branch(self) -> str | None: ...

    def fetch(self, remote: str) -> Result[None, GitError]: ...

    def sync_state(self, remote: str, branch: str) -> Result[SyncState, GitError]: ...

    def add(self, path: Path) -> Result[None, GitError]: ...

    def commit_signed(self, path: Path, message: str) -> Result[None, GitError]: ...

    def unstage(self, path: Path) -> Result[None, GitError]: ...

    def create_tag(self, tag: str, message_file: Path, *, force: bool) -> Result[None, GitError]: ...

    def push_branch(self, remote: str, branch: str) -> Result[None, GitError]: ...

    def push_tag(self, remote: str, tag: str, *, force: bool) -> Result[None, GitError]: ...

    def remote_url(self, remote: str) -> Result[str, GitError]: ...


class GitRepository:
    """``VersionControl`` backed by the git CLI.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def lookup_tag(self, tag: str) -> Result[TagLookup, GitError]:
        """Exact-match lookup of a local tag."""
        result = self._git(["tag", "--list", tag], "tag --list")
        if isinstance(result, Err):
            return result
        names = {line.strip() for line in result.value.splitlines()}
        return Ok(TagFound(tag) if tag in names else TagNotFound(tag))

    def list_tags(self) -> Result[list[str], GitError]:
        result = self._git(["tag", "--list"], "tag --list")
        if isinstance(result, Err):
            return result
        return Ok([line.strip() for line in result.value.splitlines() if line.strip()])

    def log_oneline(self, since: str | None) -> Result[list[str], GitError]:
        """Commit summaries from ``since`` (exclusive) to HEAD.

        With no ``since`` tag the range is all history reachable from HEAD.
        """
        rev_range = f"{since}..HEAD" if since else "HEAD"
        result = self._git(["log", "--oneline", "--no-decorate", rev_range], "log")
        if isinstance(result, Err):
            return result
        return Ok([line for line in result.value.splitlines() if line.strip()])

    def file_at_head(self, path: Path) -> Result[str, GitError]:
        """Content of ``path`` as committed at HEAD."""
        try:
            rel = path.resolve().relative_to(self.path.resolve()).as_posix()
        except ValueError:
            return Err(GitError(command="show", message=f"{path} is outside {self.path}"))
        return self._git(["show", f"HEAD:./{rel}"], "show")

    def signing_key(self) -> Result[str | None, GitError]:
        result = run_process(["git", "config", "--get", "user.signingkey"], cwd=self.path)
        match result:
            case Ok(stdout):
                return Ok(stdout.strip() or None)
            case Err(e) if e.returncode == 1:
                # git config exits 1 when the key is not set
                return Ok(None)
            case Err(e):
                return Err(_to_git_error("config", e))

    def current_branch(self) -> str | None:
        """Current branch name; None on detached HEAD or error."""
        result = run_process(["git", "rev-parse", "--abbrev-ref", "HEAD"], cwd=self.path)
        match result:
            case Ok(stdout):
                branch = stdout.strip()
                return None if branch == "HEAD" else branch
            case Err(_):
                return None

    def fetch(self, remote: str) -> Result[None, GitError]:
        return self._git_none(["fetch", remote], "fetch")

    def sync_state(self, remote: str, branch: str) -> Result[SyncState, GitError]:
        upstream = f"{remote}/{branch}"
        result = self._git(
            ["rev-list", "--left-right", "--count", f"HEAD...{upstream}"],
            "rev-list",
        )
        if isinstance(result, Err):
            return result

        parts = result.value.split()
        if len(parts) != 2 or not all(p.isdigit() for p in parts):
            return Err(
                GitError(command="rev-list", message=f"unexpected output: {result.value.strip()}")
            )
        return Ok(SyncState(upstream=upstream, ahead=int(parts[0]), behind=int(parts[1])))

    def add(self, path: Path) -> Result[None, GitError]:
        return self._git_none(["add", "--", str(path)], "add")

    def commit_signed(self, path: Path, message: str) -> Result[None, GitError]:
        """Commit only ``path``, signed with the configured key."""
        return self._git_none(["commit", "-S", "-m", message, "--", str(path)], "commit")

    def unstage(self, path: Path) -> Result[None, GitError]:
        return self._git_none(["reset", "-q", "HEAD", "--", str(path)], "reset")

    def create_tag(self, tag: str, message_file: Path, *, force: bool) -> Result[None, GitError]:
        """Create an annotated, signed tag whose message is ``message_file``."""
        args = ["tag", "-s", "-a", tag, "-F", str(message_file), "--cleanup=strip"]
        if force:
            args.insert(1, "-f")
        return self._git_none(args, "tag")

    def push_branch(self, remote: str, branch: str) -> Result[None, GitError]:
        return self._git_none(["push", remote, branch], "push")

    def push_tag(self, remote: str, tag: str, *, force: bool) -> Result[None, GitError]:
        args = ["push", remote, f"refs/tags/{tag}"]
        if force:
            args.insert(1, "--force")
        return self._git_none(args, "push")

    def remote_url(self, remote: str) -> Result[str, GitError]:
        result = self._git(["remote", "get-url", remote], "remote get-url")
        if isinstance(result, Err):
            return result
        return Ok(result.value.strip())

    def _git(self, args: list[str], command: str) -> Result[str, GitError]:
        result = run_process(["git", *args], cwd=self.path)
        if isinstance(result, Err):
            return Err(_to_git_error(command, result.error))
        return result

    def _git_none(self, args: list[str], command: str) -> Result[None, GitError]:
        result = self._git(args, command)
        if isinstance(result, Err):
            return result
        return Ok(None)


def _to_git_error(command: str, error: ProcessError) -> GitError:
    return GitError(
        command=command,
        message=error.details or f"git {command} failed",
        returncode=error.returncode,
    )
