"""Commit, tag and push; then publish to the registry.

Nothing here is retried: a blind retry of a tag push can leave local and
remote tags diverged, so every failure stops the run with the state as is.
"""

from __future__ import annotations

from cutrelease.core.result import Err, Ok, Result
from cutrelease.release.context import ReleaseContext
from cutrelease.release.errors import ReleaseError
from cutrelease.release.model import ManifestUpdate, ReleaseNotes, ReleaseRequest


def ensure_in_sync(ctx: ReleaseContext) -> Result[str, ReleaseError]:
    """Require HEAD to equal its remote counterpart; returns the branch name.

    Guards against tagging a commit that differs from what gets pushed, and
    against two people releasing from diverging checkouts.
    """
    ctx.console.step(f"Checking the branch is in sync with {ctx.remote}")
    branch = ctx.vcs.current_branch()
    if branch is None:
        return Err(
            ReleaseError(
                kind="out_of_sync",
                message="HEAD is detached",
                hint="check out the release branch first",
            )
        )

    ctx.console.detail(f"fetching {ctx.remote}")
    fetched = ctx.vcs.fetch(ctx.remote)
    if isinstance(fetched, Err):
        return Err(
            ReleaseError(
                kind="out_of_sync",
                message=f"failed to fetch {ctx.remote}: {fetched.error.message}",
            )
        )

    state = ctx.vcs.sync_state(ctx.remote, branch)
    if isinstance(state, Err):
        return Err(
            ReleaseError(
                kind="out_of_sync",
                message=f"could not compare {branch} with {ctx.remote}/{branch}: {state.error.message}",
            )
        )
    if not state.value.in_sync:
        s = state.value
        return Err(
            ReleaseError(
                kind="out_of_sync",
                message=f"{branch} differs from {s.upstream} (ahead {s.ahead}, behind {s.behind})",
                hint=f"pull or push until {branch} matches {s.upstream}",
            )
        )

    ctx.console.detail(f"{branch} matches {state.value.upstream}")
    return Ok(branch)


def publish_to_vcs(
    request: ReleaseRequest,
    notes: ReleaseNotes,
    update: ManifestUpdate,
    branch: str,
    ctx: ReleaseContext,
) -> Result[None, ReleaseError]:
    ctx.console.step(f"Publishing {request.tag}")

    # The branch goes first so the tagged commit is reachable on the remote.
    if update.needs_branch_push:
        ctx.console.detail(f"pushing {branch} to {ctx.remote}")
        pushed = ctx.vcs.push_branch(ctx.remote, branch)
        if isinstance(pushed, Err):
            return Err(_publish_error(f"failed to push {branch}", pushed.error.message))
    else:
        ctx.console.detail(f"no version commit; not pushing {branch}")

    ctx.console.detail(f"creating signed tag {request.tag}")
    tagged = ctx.vcs.create_tag(request.tag, notes.path, force=request.force_tag)
    if isinstance(tagged, Err):
        return Err(_publish_error(f"failed to create tag {request.tag}", tagged.error.message))

    verb = "force-pushing" if request.force_tag else "pushing"
    ctx.console.detail(f"{verb} {request.tag} to {ctx.remote}")
    pushed_tag = ctx.vcs.push_tag(ctx.remote, request.tag, force=request.force_tag)
    if isinstance(pushed_tag, Err):
        return Err(_publish_error(f"failed to push tag {request.tag}", pushed_tag.error.message))

    return Ok(None)


def publish_to_registry(request: ReleaseRequest, ctx: ReleaseContext) -> Result[None, ReleaseError]:
    """Push the package to the registry; no rollback on failure.

    By the time this runs the tag is public, so a failure leaves a partially
    completed release that ``--publish-only`` can finish.
    """
    tool = ctx.registry.tool
    ctx.console.step(f"Publishing {request.tag} with {tool}")
    published = ctx.registry.publish(ctx.manifest_path.parent)
    if isinstance(published, Err):
        return Err(
            ReleaseError(
                kind="publish",
                message=f"{tool} publish failed: {published.error.message}",
                hint=(
                    f"tag {request.tag} is already pushed; finish with: "
                    f"release {request.version} --publish-only"
                ),
            )
        )
    return Ok(None)


def _publish_error(message: str, detail: str) -> ReleaseError:
    return ReleaseError(kind="publish", message=f"{message}: {detail}")
