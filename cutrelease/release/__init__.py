"""Release workflow: validation, preconditions, notes, manifest, publish."""

from cutrelease.release.context import ReleaseContext
from cutrelease.release.errors import ReleaseError, ReleaseErrorKind, release_exit_code
from cutrelease.release.model import ManifestUpdate, ReleaseNotes, ReleaseRequest
from cutrelease.release.validate import parse_request, validate_version
from cutrelease.release.workflow import run_publish_only, run_release

__all__ = [
    "ManifestUpdate",
    "ReleaseContext",
    "ReleaseError",
    "ReleaseErrorKind",
    "ReleaseNotes",
    "ReleaseRequest",
    "parse_request",
    "release_exit_code",
    "run_publish_only",
    "run_release",
    "validate_version",
]
