"""The release pipeline.

Stages run strictly in order and the first ``Err`` ends the run:

    preconditions -> notes -> branch sync -> manifest -> tag/push
    -> registry publish -> follow-up

The branch-sync check belongs to the tag/push stage but runs before the
manifest edit, so a diverged checkout is refused before anything changes.
"""

from __future__ import annotations

from cutrelease.core.result import Err, Result
from cutrelease.release.context import ReleaseContext
from cutrelease.release.errors import ReleaseError
from cutrelease.release.finalize import finalize
from cutrelease.release.manifest import update_manifest
from cutrelease.release.model import ReleaseRequest
from cutrelease.release.notes import read_notes, resolve_notes
from cutrelease.release.preconditions import (
    check_preconditions,
    check_publish_only_preconditions,
)
from cutrelease.release.publish import ensure_in_sync, publish_to_registry, publish_to_vcs


def run_release(request: ReleaseRequest, ctx: ReleaseContext) -> Result[None, ReleaseError]:
    if request.publish_only:
        return run_publish_only(request, ctx)

    checked = check_preconditions(request, ctx)
    if isinstance(checked, Err):
        return checked

    notes = resolve_notes(request, ctx)
    if isinstance(notes, Err):
        return notes

    branch = ensure_in_sync(ctx)
    if isinstance(branch, Err):
        return branch

    update = update_manifest(request, ctx)
    if isinstance(update, Err):
        return update

    pushed = publish_to_vcs(request, notes.value, update.value, branch.value, ctx)
    if isinstance(pushed, Err):
        return pushed

    published = publish_to_registry(request, ctx)
    if isinstance(published, Err):
        return published

    return finalize(request, notes.value.text, ctx)


def run_publish_only(request: ReleaseRequest, ctx: ReleaseContext) -> Result[None, ReleaseError]:
    """Finish a release whose tag is pushed but whose registry push failed."""
    checked = check_publish_only_preconditions(request, ctx)
    if isinstance(checked, Err):
        return checked

    published = publish_to_registry(request, ctx)
    if isinstance(published, Err):
        return published

    notes_text = None
    if request.notes_path is not None and request.notes_path.is_file():
        read = read_notes(request.notes_path)
        if isinstance(read, Err):
            ctx.console.warning(f"{read.error.message}; announcing without notes")
        else:
            notes_text = read.value
    return finalize(request, notes_text, ctx)
