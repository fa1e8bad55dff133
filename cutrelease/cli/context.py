from __future__ import annotations

from pathlib import Path

from cutrelease.core.config import ReleaseConfig
from cutrelease.output.console import ConsoleProtocol
from cutrelease.registry.npm import NpmRegistry
from cutrelease.release.context import ReleaseContext
from cutrelease.tools.browser import BrowserOpener
from cutrelease.tools.editor import CommandEditor, resolve_editor_command
from cutrelease.vcs.git import GitRepository


def build_release_context(
    root: Path, config: ReleaseConfig, console: ConsoleProtocol
) -> ReleaseContext:
    """Wire the real collaborators for a run in ``root``."""
    return ReleaseContext(
        root=root,
        config=config,
        console=console,
        vcs=GitRepository(root),
        registry=NpmRegistry(config.registry.tool, cwd=root),
        editor=CommandEditor(tuple(resolve_editor_command(config.notes.editor)), cwd=root),
        opener=BrowserOpener(),
    )
