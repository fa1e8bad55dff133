"""Release notes: use the supplied file, or draft one in the user's editor.

A draft starts from a scaffold listing the commits since the latest release
tag, every log line commented out. Saving the scaffold unchanged is refused:
the notes must carry a human-written summary, not machine boilerplate.
"""

from __future__ import annotations

from pathlib import Path

from cutrelease.core.result import Err, Ok, Result
from cutrelease.platform.files import atomic_write_text
from cutrelease.release.context import ReleaseContext
from cutrelease.release.errors import ReleaseError
from cutrelease.release.model import ReleaseNotes, ReleaseRequest
from cutrelease.release.semver import latest_tag

SCAFFOLD_COPY_SUFFIX = ".orig"
COMMENT_PREFIX = "#"


def build_scaffold(tag: str, previous_tag: str | None, log_lines: list[str]) -> str:
    title = f"Release {tag}"
    since = previous_tag or "the first commit"
    lines = [
        title,
        "-" * len(title),
        "",
        f"{COMMENT_PREFIX} Summarize the changes since {since}.",
        f"{COMMENT_PREFIX} Lines starting with '{COMMENT_PREFIX}' are dropped from the tag message.",
        f"{COMMENT_PREFIX}",
    ]
    lines.extend(f"{COMMENT_PREFIX} {line}" for line in log_lines)
    return "\n".join(lines) + "\n"


def strip_comments(text: str) -> str:
    kept = [line for line in text.splitlines() if not line.lstrip().startswith(COMMENT_PREFIX)]
    return "\n".join(kept).strip()


def resolve_notes(request: ReleaseRequest, ctx: ReleaseContext) -> Result[ReleaseNotes, ReleaseError]:
    ctx.console.step("Resolving release notes")
    path = request.notes_path
    if path is None:
        return Err(ReleaseError(kind="usage", message="no release notes path given"))

    if path.exists():
        ctx.console.detail(f"using {path}")
        text = read_notes(path)
        if isinstance(text, Err):
            return text
        return Ok(ReleaseNotes(path=path, text=text.value))

    return _draft_notes(request, path, ctx)


def _draft_notes(
    request: ReleaseRequest, path: Path, ctx: ReleaseContext
) -> Result[ReleaseNotes, ReleaseError]:
    tags = ctx.vcs.list_tags()
    if isinstance(tags, Err):
        return Err(_history_error(tags.error.message))
    previous = latest_tag(tags.value)

    log = ctx.vcs.log_oneline(previous)
    if isinstance(log, Err):
        return Err(_history_error(log.error.message))

    ctx.console.detail(
        f"drafting {path} from {len(log.value)} commit(s) since {previous or 'the first commit'}"
    )
    scaffold = build_scaffold(request.tag, previous, log.value)
    copy = path.with_name(path.name + SCAFFOLD_COPY_SUFFIX)

    try:
        atomic_write_text(path, scaffold)
        atomic_write_text(copy, scaffold)
    except OSError as e:
        return Err(ReleaseError(kind="empty_release_notes", message=f"failed to write {path}: {e}"))

    try:
        return _edit_draft(path, copy, ctx)
    finally:
        copy.unlink(missing_ok=True)


def _edit_draft(path: Path, copy: Path, ctx: ReleaseContext) -> Result[ReleaseNotes, ReleaseError]:
    ctx.console.detail("waiting for the editor to exit")
    edited = ctx.editor.edit(path)
    if isinstance(edited, Err):
        path.unlink(missing_ok=True)
        return Err(
            ReleaseError(
                kind="empty_release_notes",
                message=f"editor failed: {edited.error}",
                hint="set [notes] editor in release.toml, or $VISUAL / $EDITOR",
            )
        )

    if not path.exists():
        return Err(ReleaseError(kind="empty_release_notes", message=f"{path} was deleted"))

    if path.read_bytes() == copy.read_bytes():
        path.unlink()
        return Err(
            ReleaseError(
                kind="empty_release_notes",
                message="release notes were left unchanged; draft discarded",
                hint="write a summary of the release above the commit list",
            )
        )

    read = read_notes(path)
    if isinstance(read, Err):
        return read
    text = read.value
    if not strip_comments(text):
        path.unlink()
        return Err(
            ReleaseError(kind="empty_release_notes", message="release notes are empty; draft discarded")
        )
    return Ok(ReleaseNotes(path=path, text=text))


def read_notes(path: Path) -> Result[str, ReleaseError]:
    try:
        return Ok(path.read_bytes().decode("utf-8"))
    except OSError as e:
        return Err(ReleaseError(kind="empty_release_notes", message=f"failed to read {path}: {e}"))
    except UnicodeDecodeError as e:
        return Err(
            ReleaseError(
                kind="empty_release_notes",
                message=f"{path} is not valid UTF-8: {e.reason} at byte {e.start}",
                hint="save the release notes as UTF-8",
            )
        )


def _history_error(detail: str) -> ReleaseError:
    return ReleaseError(
        kind="empty_release_notes",
        message=f"could not read commit history for the notes draft: {detail}",
    )
