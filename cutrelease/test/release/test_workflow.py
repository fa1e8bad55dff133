from __future__ import annotations

from pathlib import Path

from cutrelease.core.result import Err, Ok
from cutrelease.release.manifest import backup_path_for
from cutrelease.release.model import ReleaseRequest
from cutrelease.release.workflow import run_release

from ._fakes import FakeEditor, FakeRegistry, FakeVcs, make_harness


def _notes_file(tmp_path: Path) -> Path:
    notes = tmp_path / "notes.md"
    notes.write_text("Release v1.1.0\n\nFaster padding.\n", encoding="utf-8")
    return notes


def _request(notes: Path | None, *, force: bool = False, publish_only: bool = False) -> ReleaseRequest:
    return ReleaseRequest(
        version="1.1.0", notes_path=notes, force_tag=force, publish_only=publish_only
    )


def test_full_release(tmp_path: Path) -> None:
    h = make_harness(tmp_path)
    notes = _notes_file(tmp_path)

    assert run_release(_request(notes), h.ctx) == Ok(None)

    assert '"version": "1.1.0"' in h.manifest.read_text(encoding="utf-8")
    order = [c[0] for c in h.vcs.calls if c[0] in ("fetch", "commit", "push_branch", "tag", "push_tag")]
    assert order == ["fetch", "commit", "push_branch", "tag", "push_tag"]
    assert h.registry.published == [tmp_path]
    assert len(h.opener.urls) == 1
    assert not h.console.has_error()


def test_duplicate_tag_aborts_before_any_change(tmp_path: Path) -> None:
    h = make_harness(tmp_path, vcs=FakeVcs(tags=["v1.1.0"]))
    before = h.manifest.read_bytes()

    result = run_release(_request(_notes_file(tmp_path)), h.ctx)

    assert isinstance(result, Err)
    assert result.error.kind == "duplicate_tag"
    assert h.manifest.read_bytes() == before
    assert h.vcs.called("commit") == []
    assert h.vcs.called("tag") == []
    assert h.registry.published == []


def test_force_retags(tmp_path: Path) -> None:
    h = make_harness(tmp_path, vcs=FakeVcs(tags=["v1.1.0"]))

    assert run_release(_request(_notes_file(tmp_path), force=True), h.ctx) == Ok(None)

    assert h.vcs.called("tag") == [("tag", "v1.1.0", "force")]
    assert h.vcs.called("push_tag") == [("push_tag", "origin", "v1.1.0", "force")]


def test_rerun_after_version_commit_skips_commit(tmp_path: Path) -> None:
    h = make_harness(tmp_path, registry=FakeRegistry(publish_error="E500"))
    notes = _notes_file(tmp_path)
    assert isinstance(run_release(_request(notes), h.ctx), Err)

    h.registry.publish_error = None
    assert run_release(_request(notes, force=True), h.ctx) == Ok(None)
    assert len(h.vcs.called("commit")) == 1
    assert len(h.vcs.called("push_branch")) == 1


def test_out_of_sync_aborts_before_manifest_edit(tmp_path: Path) -> None:
    h = make_harness(tmp_path, vcs=FakeVcs(behind=3))
    before = h.manifest.read_bytes()

    result = run_release(_request(_notes_file(tmp_path)), h.ctx)

    assert isinstance(result, Err)
    assert result.error.kind == "out_of_sync"
    assert h.manifest.read_bytes() == before
    assert h.vcs.called("commit") == []
    assert h.vcs.called("tag") == []
    assert h.vcs.called("push_tag") == []


def test_commit_failure_leaves_manifest_untouched(tmp_path: Path) -> None:
    h = make_harness(tmp_path, vcs=FakeVcs(failures={"commit": "gpg: signing failed"}))
    before = h.manifest.read_bytes()

    result = run_release(_request(_notes_file(tmp_path)), h.ctx)

    assert isinstance(result, Err)
    assert result.error.kind == "manifest_update"
    assert h.manifest.read_bytes() == before
    assert not backup_path_for(h.manifest).exists()
    assert h.vcs.called("tag") == []


def test_unchanged_draft_aborts_before_manifest_edit(tmp_path: Path) -> None:
    h = make_harness(tmp_path, editor=FakeEditor())
    before = h.manifest.read_bytes()
    notes = tmp_path / "notes.md"

    result = run_release(_request(notes), h.ctx)

    assert isinstance(result, Err)
    assert result.error.kind == "empty_release_notes"
    assert not notes.exists()
    assert h.manifest.read_bytes() == before
    assert h.vcs.called("fetch") == []


def test_publish_failure_keeps_tag(tmp_path: Path) -> None:
    h = make_harness(tmp_path, registry=FakeRegistry(publish_error="E403"))

    result = run_release(_request(_notes_file(tmp_path)), h.ctx)

    assert isinstance(result, Err)
    assert result.error.kind == "publish"
    assert "v1.1.0" in h.vcs.tags
    assert h.opener.urls == []


def test_publish_only(tmp_path: Path) -> None:
    h = make_harness(tmp_path, vcs=FakeVcs(tags=["v1.1.0"]))

    assert run_release(_request(None, publish_only=True), h.ctx) == Ok(None)

    assert h.registry.published == [tmp_path]
    assert h.vcs.called("commit") == []
    assert h.vcs.called("tag") == []
    assert len(h.opener.urls) == 1


def test_publish_only_with_undecodable_notes_still_announces(tmp_path: Path) -> None:
    notes = tmp_path / "notes.md"
    notes.write_bytes("Caf\xe9 release\n".encode("latin-1"))
    h = make_harness(tmp_path, vcs=FakeVcs(tags=["v1.1.0"]))

    assert run_release(_request(notes, publish_only=True), h.ctx) == Ok(None)

    assert h.registry.published == [tmp_path]
    assert h.console.has_warning()
    assert len(h.opener.urls) == 1
