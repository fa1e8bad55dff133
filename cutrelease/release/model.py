from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ReleaseRequest:
    """Validated CLI input. Created once and never mutated."""

    version: str  # without the leading "v"
    notes_path: Path | None
    force_tag: bool = False
    publish_only: bool = False

    @property
    def tag(self) -> str:
        return f"v{self.version}"


@dataclass(frozen=True, slots=True)
class ReleaseNotes:
    path: Path
    text: str


@dataclass(frozen=True, slots=True)
class ManifestUpdate:
    """Outcome of the manifest step."""

    path: Path
    previous_version: str
    committed: bool

    @property
    def needs_branch_push(self) -> bool:
        return self.committed
