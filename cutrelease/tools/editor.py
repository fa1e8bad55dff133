from __future__ import annotations

import os
import shlex
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from cutrelease.core.result import Err, Ok, Result
from cutrelease.platform.process import ProcessError, run_interactive

DEFAULT_EDITOR = "vi"


class Editor(Protocol):
    def edit(self, path: Path) -> Result[None, ProcessError]:
        """Open ``path`` and block until the editor exits."""
        ...


def resolve_editor_command(
    configured: str | None,
    env: Mapping[str, str] | None = None,
) -> list[str]:
    """Editor command line: config, then $VISUAL, then $EDITOR, then vi.

    Values are split like a shell would, so "code --wait" works.
    """
    environ = os.environ if env is None else env
    for candidate in (configured, environ.get("VISUAL"), environ.get("EDITOR")):
        if candidate and candidate.strip():
            return shlex.split(candidate)
    return [DEFAULT_EDITOR]


@dataclass(frozen=True, slots=True)
class CommandEditor:
    command: tuple[str, ...]
    cwd: Path

    def edit(self, path: Path) -> Result[None, ProcessError]:
        result = run_interactive([*self.command, str(path)], cwd=self.cwd)
        if isinstance(result, Err):
            return result
        return Ok(None)
