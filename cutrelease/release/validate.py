from __future__ import annotations

from pathlib import Path

from cutrelease.core.result import Err, Ok, Result
from cutrelease.release.errors import ReleaseError
from cutrelease.release.model import ReleaseRequest
from cutrelease.release.semver import TAG_GRAMMAR, TAG_RE


def validate_version(version: str) -> Result[str, ReleaseError]:
    """Check the tag derived from ``version``; returns the tag.

    The tool prepends the "v" itself, so "v1.0.0" as input is rejected even
    though "vv1.0.0" would otherwise only fail the grammar check.
    """
    tag = f"v{version}"
    if tag.startswith("vv"):
        return Err(
            ReleaseError(
                kind="malformed_version",
                message=f"version must not start with 'v': {version}",
                hint=f"drop the leading 'v', e.g. release {version[1:]} ...",
            )
        )
    if TAG_RE.match(tag) is None:
        return Err(
            ReleaseError(
                kind="malformed_version",
                message=f"malformed version tag: {tag}",
                hint=f"expected {TAG_GRAMMAR}",
            )
        )
    return Ok(tag)


def parse_request(
    args: list[str],
    *,
    force_tag: bool = False,
    publish_only: bool = False,
) -> Result[ReleaseRequest, ReleaseError]:
    """Build a ReleaseRequest from positional CLI arguments.

    ``release <version> <release_notes_path>``; publish-only mode needs the
    version alone because notes were already used for the pushed tag.
    """
    required = 1 if publish_only else 2
    if len(args) < required:
        return Err(
            ReleaseError(
                kind="usage",
                message="missing arguments",
                hint="usage: release <version> <release_notes_path> [-f]",
            )
        )

    version = args[0].strip()
    checked = validate_version(version)
    if isinstance(checked, Err):
        return checked

    notes_path = Path(args[1]) if len(args) > 1 else None
    return Ok(
        ReleaseRequest(
            version=version,
            notes_path=notes_path,
            force_tag=force_tag,
            publish_only=publish_only,
        )
    )
