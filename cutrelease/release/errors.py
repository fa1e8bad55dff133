"""Error types for the release workflow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from cutrelease.core.errors import ErrorCode

ReleaseErrorKind = Literal[
    "usage",
    "malformed_version",
    "tooling_missing",
    "duplicate_tag",
    "manifest_missing",
    "signing_key_missing",
    "ownership",
    "empty_release_notes",
    "manifest_update",
    "out_of_sync",
    "publish",
]

# Failures raised by the precondition checker, in check order.
PRECONDITION_KINDS: tuple[ReleaseErrorKind, ...] = (
    "tooling_missing",
    "duplicate_tag",
    "manifest_missing",
    "signing_key_missing",
    "ownership",
)


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Terminal release failure.

    Every stage returns this in an ``Err``; none of them is retried. The CLI
    renders ``message`` with the error marker and ``hint`` underneath.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    @property
    def is_precondition(self) -> bool:
        return self.kind in PRECONDITION_KINDS


def release_exit_code(kind: ReleaseErrorKind) -> ErrorCode:
    if kind in {"usage", "signing_key_missing"}:
        return ErrorCode.USAGE_ERROR
    return ErrorCode.FAILURE
