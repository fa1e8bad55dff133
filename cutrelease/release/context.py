from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from cutrelease.core.config import ReleaseConfig
from cutrelease.output.console import ConsoleProtocol
from cutrelease.registry.npm import PackageRegistry
from cutrelease.tools.browser import UrlOpener
from cutrelease.tools.editor import Editor
from cutrelease.vcs.git import VersionControl


@dataclass(frozen=True, slots=True)
class ReleaseContext:
    """Everything a release run talks to.

    Collaborators are protocols so tests can pass in-memory fakes.
    """

    root: Path
    config: ReleaseConfig
    console: ConsoleProtocol
    vcs: VersionControl
    registry: PackageRegistry
    editor: Editor
    opener: UrlOpener

    @property
    def manifest_path(self) -> Path:
        return self.root / self.config.manifest.path

    @property
    def remote(self) -> str:
        return self.config.git.remote
