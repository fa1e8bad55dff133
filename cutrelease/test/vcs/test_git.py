from __future__ import annotations

from pathlib import Path

import pytest

from cutrelease.core.result import Err, Ok, Result
from cutrelease.platform.process import ProcessError
from cutrelease.vcs import git as git_mod
from cutrelease.vcs.git import GitRepository, SyncState, TagFound, TagNotFound


def _err(cmd: list[str], *, stderr: str = "", returncode: int = 1) -> Err[ProcessError]:
    return Err(ProcessError(command=tuple(cmd), returncode=returncode, stdout="", stderr=stderr))


class _FakeGit:
    """Records git invocations and replies with canned results."""

    def __init__(self, replies: dict[str, Result[str, ProcessError]] | None = None) -> None:
        self.calls: list[list[str]] = []
        self.replies = replies or {}

    def __call__(self, cmd: list[str], cwd: Path, env: dict[str, str] | None = None):
        del cwd
        del env
        self.calls.append(cmd)
        assert cmd[0] == "git"
        return self.replies.get(cmd[1], Ok(""))


@pytest.fixture
def fake_git(monkeypatch: pytest.MonkeyPatch) -> _FakeGit:
    fake = _FakeGit()
    monkeypatch.setattr(git_mod, "run_process", fake)
    return fake


def test_lookup_tag_exact_match(fake_git: _FakeGit, tmp_path: Path) -> None:
    fake_git.replies["tag"] = Ok("v1.0.0\n")
    repo = GitRepository(tmp_path)
    assert repo.lookup_tag("v1.0.0") == Ok(TagFound("v1.0.0"))
    assert repo.lookup_tag("v1.0") == Ok(TagNotFound("v1.0"))


def test_lookup_tag_error(fake_git: _FakeGit, tmp_path: Path) -> None:
    fake_git.replies["tag"] = _err(["git", "tag"], stderr="fatal: not a git repository", returncode=128)
    result = GitRepository(tmp_path).lookup_tag("v1.0.0")
    assert isinstance(result, Err)
    assert result.error.message == "fatal: not a git repository"
    assert result.error.returncode == 128


def test_list_tags_skips_blank_lines(fake_git: _FakeGit, tmp_path: Path) -> None:
    fake_git.replies["tag"] = Ok("v1.0.0\n\nv1.1.0\n")
    assert GitRepository(tmp_path).list_tags() == Ok(["v1.0.0", "v1.1.0"])


def test_log_range(fake_git: _FakeGit, tmp_path: Path) -> None:
    repo = GitRepository(tmp_path)
    repo.log_oneline("v1.0.0")
    repo.log_oneline(None)
    assert fake_git.calls[0][-1] == "v1.0.0..HEAD"
    assert fake_git.calls[1][-1] == "HEAD"


def test_signing_key_unset(fake_git: _FakeGit, tmp_path: Path) -> None:
    fake_git.replies["config"] = _err(["git", "config"], returncode=1)
    assert GitRepository(tmp_path).signing_key() == Ok(None)


def test_signing_key_set(fake_git: _FakeGit, tmp_path: Path) -> None:
    fake_git.replies["config"] = Ok("ABCDEF\n")
    assert GitRepository(tmp_path).signing_key() == Ok("ABCDEF")


def test_signing_key_other_failure(fake_git: _FakeGit, tmp_path: Path) -> None:
    fake_git.replies["config"] = _err(["git", "config"], stderr="bad config", returncode=3)
    assert isinstance(GitRepository(tmp_path).signing_key(), Err)


def test_current_branch_detached(fake_git: _FakeGit, tmp_path: Path) -> None:
    fake_git.replies["rev-parse"] = Ok("HEAD\n")
    assert GitRepository(tmp_path).current_branch() is None


def test_sync_state_parses_counts(fake_git: _FakeGit, tmp_path: Path) -> None:
    fake_git.replies["rev-list"] = Ok("2\t1\n")
    result = GitRepository(tmp_path).sync_state("origin", "main")
    assert result == Ok(SyncState(upstream="origin/main", ahead=2, behind=1))
    assert fake_git.calls[0][-1] == "HEAD...origin/main"


def test_sync_state_rejects_garbage(fake_git: _FakeGit, tmp_path: Path) -> None:
    fake_git.replies["rev-list"] = Ok("what\n")
    assert isinstance(GitRepository(tmp_path).sync_state("origin", "main"), Err)


def test_commit_is_signed_and_scoped(fake_git: _FakeGit, tmp_path: Path) -> None:
    manifest = tmp_path / "package.json"
    GitRepository(tmp_path).commit_signed(manifest, "Release v1.1.0")
    assert fake_git.calls == [
        ["git", "commit", "-S", "-m", "Release v1.1.0", "--", str(manifest)]
    ]


def test_create_tag_args(fake_git: _FakeGit, tmp_path: Path) -> None:
    notes = tmp_path / "notes.md"
    repo = GitRepository(tmp_path)
    repo.create_tag("v1.1.0", notes, force=False)
    repo.create_tag("v1.1.0", notes, force=True)
    assert fake_git.calls[0] == [
        "git", "tag", "-s", "-a", "v1.1.0", "-F", str(notes), "--cleanup=strip",
    ]
    assert fake_git.calls[1][:3] == ["git", "tag", "-f"]


def test_push_tag_force(fake_git: _FakeGit, tmp_path: Path) -> None:
    repo = GitRepository(tmp_path)
    repo.push_tag("origin", "v1.1.0", force=False)
    repo.push_tag("origin", "v1.1.0", force=True)
    assert fake_git.calls[0] == ["git", "push", "origin", "refs/tags/v1.1.0"]
    assert fake_git.calls[1] == ["git", "push", "--force", "origin", "refs/tags/v1.1.0"]


def test_file_at_head_uses_repo_relative_path(fake_git: _FakeGit, tmp_path: Path) -> None:
    fake_git.replies["show"] = Ok('{\n  "version": "1.1.0"\n}\n')
    repo = GitRepository(tmp_path)

    result = repo.file_at_head(tmp_path / "pkg" / "package.json")

    assert result == Ok('{\n  "version": "1.1.0"\n}\n')
    assert fake_git.calls == [["git", "show", "HEAD:./pkg/package.json"]]


def test_file_at_head_outside_repo(fake_git: _FakeGit, tmp_path: Path) -> None:
    repo = GitRepository(tmp_path / "repo")
    assert isinstance(repo.file_at_head(tmp_path / "elsewhere.json"), Err)
    assert fake_git.calls == []
