"""Checks that must pass before anything is mutated.

The order is fixed: cheap local checks run before the ones that hit the
network, and later checks assume earlier ones passed (the packaging tool must
exist before it is asked about package owners).
"""

from __future__ import annotations

from cutrelease.core.result import Err, Ok, Result
from cutrelease.release.context import ReleaseContext
from cutrelease.release.errors import ReleaseError
from cutrelease.release.manifest import read_package_name
from cutrelease.release.model import ReleaseRequest
from cutrelease.vcs.git import TagFound


def check_preconditions(
    request: ReleaseRequest, ctx: ReleaseContext
) -> Result[None, ReleaseError]:
    ctx.console.step("Checking preconditions")

    for check in (
        _check_tooling,
        _check_tag_is_free,
        _check_manifest_exists,
        _check_signing_key,
        _check_ownership,
    ):
        result = check(request, ctx)
        if isinstance(result, Err):
            return result
    return Ok(None)


def check_publish_only_preconditions(
    request: ReleaseRequest, ctx: ReleaseContext
) -> Result[None, ReleaseError]:
    """Preconditions for re-running only the registry publish.

    The tag must already exist: publish-only resumes a release whose tag was
    pushed but whose registry push failed.
    """
    ctx.console.step("Checking preconditions (publish only)")

    for check in (_check_tooling, _check_tag_exists, _check_manifest_exists, _check_ownership):
        result = check(request, ctx)
        if isinstance(result, Err):
            return result
    return Ok(None)


def _check_tooling(request: ReleaseRequest, ctx: ReleaseContext) -> Result[None, ReleaseError]:
    tool = ctx.registry.tool
    ctx.console.detail(f"looking for {tool}")
    if not ctx.registry.is_installed():
        return Err(
            ReleaseError(
                kind="tooling_missing",
                message=f"{tool}: not found on PATH",
                hint=f"install {tool} or set [registry] tool in release.toml",
            )
        )
    return Ok(None)


def _check_tag_is_free(
    request: ReleaseRequest, ctx: ReleaseContext
) -> Result[None, ReleaseError]:
    ctx.console.detail(f"checking that tag {request.tag} does not exist")
    lookup = ctx.vcs.lookup_tag(request.tag)
    if isinstance(lookup, Err):
        return Err(
            ReleaseError(
                kind="duplicate_tag",
                message=f"could not look up tag {request.tag}: {lookup.error.message}",
            )
        )

    if isinstance(lookup.value, TagFound):
        if not request.force_tag:
            return Err(
                ReleaseError(
                    kind="duplicate_tag",
                    message=f"tag {request.tag} already exists",
                    hint="pass -f to overwrite it",
                )
            )
        ctx.console.warning(f"tag {request.tag} already exists and will be overwritten")
    return Ok(None)


def _check_tag_exists(
    request: ReleaseRequest, ctx: ReleaseContext
) -> Result[None, ReleaseError]:
    ctx.console.detail(f"checking that tag {request.tag} exists")
    lookup = ctx.vcs.lookup_tag(request.tag)
    if isinstance(lookup, Err):
        return Err(
            ReleaseError(
                kind="publish",
                message=f"could not look up tag {request.tag}: {lookup.error.message}",
            )
        )
    if not isinstance(lookup.value, TagFound):
        return Err(
            ReleaseError(
                kind="publish",
                message=f"tag {request.tag} does not exist",
                hint="--publish-only resumes a release whose tag was already pushed",
            )
        )
    return Ok(None)


def _check_manifest_exists(
    request: ReleaseRequest, ctx: ReleaseContext
) -> Result[None, ReleaseError]:
    path = ctx.manifest_path
    ctx.console.detail(f"checking manifest {ctx.config.manifest.path}")
    if not path.is_file():
        return Err(
            ReleaseError(
                kind="manifest_missing",
                message=f"manifest not found: {path}",
                hint="set [manifest] path in release.toml",
            )
        )
    return Ok(None)


def _check_signing_key(
    request: ReleaseRequest, ctx: ReleaseContext
) -> Result[None, ReleaseError]:
    ctx.console.detail("checking for a signing key")
    key = ctx.vcs.signing_key()
    if isinstance(key, Err) or key.value is None:
        return Err(
            ReleaseError(
                kind="signing_key_missing",
                message="no signing key configured; refusing to create an unsigned release",
                hint="git config user.signingkey <key-id>",
            )
        )
    return Ok(None)


def _check_ownership(request: ReleaseRequest, ctx: ReleaseContext) -> Result[None, ReleaseError]:
    name = read_package_name(ctx.manifest_path, ctx.config.manifest)
    if isinstance(name, Err):
        return name
    package = name.value

    ctx.console.detail(f"checking {ctx.registry.tool} ownership of {package}")
    ownership = ctx.registry.ownership(package)
    if isinstance(ownership, Err):
        return Err(
            ReleaseError(
                kind="ownership",
                message=f"could not check owners of {package}: {ownership.error.message}",
                hint=f"{ctx.registry.tool} login",
            )
        )
    if not ownership.value.is_owner:
        return Err(
            ReleaseError(
                kind="ownership",
                message=f"{ownership.value.user} is not an owner of {package}",
                hint=f"owners: {', '.join(ownership.value.owners) or '(none)'}",
            )
        )
    return Ok(None)
