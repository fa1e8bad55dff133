"""Manifest version bump with backup and restore.

The manifest is the only local file the release mutates. Edits go through
``ManifestTransaction``:

    clean -> backed_up -> edited -> committed | restored

Both the backup and the edit are written with temp-file + rename, and the
restore is a single ``os.replace`` of the backup over the manifest. A run
killed mid-way therefore leaves either the untouched manifest or a complete
backup next to it. The next run restores that backup before doing anything
else, unless the manifest already matches HEAD: then the version commit
landed before the run died and the backup is simply removed.
"""

from __future__ import annotations

import os
import re
from collections.abc import Callable
from pathlib import Path
from typing import Literal

from cutrelease.core.config import ManifestConfig
from cutrelease.core.result import Err, Ok, Result
from cutrelease.platform.files import atomic_write_bytes
from cutrelease.release.context import ReleaseContext
from cutrelease.release.errors import ReleaseError
from cutrelease.release.model import ManifestUpdate, ReleaseRequest

BACKUP_SUFFIX = ".release-backup"

TransactionState = Literal["clean", "backed_up", "edited", "committed", "restored"]
Edit = Callable[[str], Result[str, str]]
Recovery = Literal["none", "restored", "dropped"]


def backup_path_for(path: Path) -> Path:
    return path.with_name(path.name + BACKUP_SUFFIX)


class ManifestTransaction:
    """Transactional edit of one text file.

    ``snapshot`` must be called before ``apply``; after a successful
    ``commit`` no backup remains on disk.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self.backup_path = backup_path_for(path)
        self.state: TransactionState = "clean"

    def snapshot(self) -> Result[None, str]:
        try:
            atomic_write_bytes(self.backup_path, self.path.read_bytes())
        except OSError as e:
            return Err(f"failed to back up {self.path.name}: {e}")
        self.state = "backed_up"
        return Ok(None)

    def apply(self, edit: Edit) -> Result[None, str]:
        if self.state not in ("backed_up", "edited"):
            return Err(f"cannot edit {self.path.name} before taking a snapshot")

        try:
            text = self.path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return Err(f"failed to read {self.path.name}: {e}")

        edited = edit(text)
        if isinstance(edited, Err):
            return edited

        try:
            atomic_write_bytes(self.path, edited.value.encode("utf-8"))
        except OSError as e:
            return Err(f"failed to write {self.path.name}: {e}")
        self.state = "edited"
        return Ok(None)

    def commit(self) -> Result[None, str]:
        """Drop the backup; the edit is now the manifest's content."""
        try:
            self.backup_path.unlink(missing_ok=True)
        except OSError as e:
            return Err(f"failed to remove backup {self.backup_path}: {e}")
        self.state = "committed"
        return Ok(None)

    def rollback(self) -> Result[bool, str]:
        """Move the backup back over the manifest.

        Returns Ok(False) if there was no backup to restore.
        """
        if not self.backup_path.exists():
            return Ok(False)
        try:
            os.replace(self.backup_path, self.path)
        except OSError as e:
            return Err(f"failed to restore {self.path.name} from {self.backup_path}: {e}")
        self.state = "restored"
        return Ok(True)


def recover_interrupted(path: Path, committed: str | None = None) -> Result[Recovery, str]:
    """Deal with a backup left behind by a run that was killed mid-edit.

    ``committed`` is the manifest text at HEAD. If the manifest already matches
    it, the run died after the version commit landed: the backup is stale and
    is dropped. Otherwise the backup is moved back over the manifest.
    """
    tx = ManifestTransaction(path)
    if not tx.backup_path.exists():
        return Ok("none")

    if committed is not None and _same_text(path, committed):
        dropped = tx.commit()
        if isinstance(dropped, Err):
            return dropped
        return Ok("dropped")

    restored = tx.rollback()
    if isinstance(restored, Err):
        return restored
    return Ok("restored")


def _same_text(path: Path, committed: str) -> bool:
    # git output is read in text mode, so compare line by line.
    try:
        current = path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError):
        return False
    return current.splitlines() == committed.splitlines()


def read_version(text: str, pattern: str) -> str | None:
    m = re.search(pattern, text, re.MULTILINE)
    if m is None:
        return None
    return m.group(2)


def replace_version(text: str, pattern: str, version: str) -> Result[str, str]:
    """Rewrite the value of the first version-declaration line only."""
    new_text, count = re.subn(
        pattern,
        lambda m: f"{m.group(1)}{version}{m.group(3)}",
        text,
        count=1,
        flags=re.MULTILINE,
    )
    if count == 0:
        return Err("no version declaration line found")
    return Ok(new_text)


def read_package_name(path: Path, config: ManifestConfig) -> Result[str, ReleaseError]:
    if config.package_name:
        return Ok(config.package_name)

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        return Err(
            ReleaseError(kind="manifest_missing", message=f"failed to read {path.name}: {e}")
        )

    m = re.search(config.name_pattern, text, re.MULTILINE)
    if m is None:
        return Err(
            ReleaseError(
                kind="ownership",
                message=f"could not determine the package name from {path.name}",
                hint="set [manifest] package_name in release.toml",
            )
        )
    return Ok(m.group(1))


def update_manifest(
    request: ReleaseRequest, ctx: ReleaseContext
) -> Result[ManifestUpdate, ReleaseError]:
    """Ensure the manifest declares ``request.version``, committing if it changed."""
    path = ctx.manifest_path
    pattern = ctx.config.manifest.version_pattern
    ctx.console.step(f"Updating {ctx.config.manifest.path} to {request.version}")

    committed: str | None = None
    if backup_path_for(path).exists():
        head = ctx.vcs.file_at_head(path)
        if isinstance(head, Ok):
            committed = head.value

    recovered = recover_interrupted(path, committed)
    if isinstance(recovered, Err):
        return Err(ReleaseError(kind="manifest_update", message=recovered.error))
    match recovered.value:
        case "restored":
            ctx.console.warning(f"restored {path.name} from a backup left by an interrupted run")
        case "dropped":
            ctx.console.detail(f"{path.name} matches HEAD; removed a stale backup")
        case "none":
            pass

    try:
        current = read_version(path.read_bytes().decode("utf-8"), pattern)
    except (OSError, UnicodeDecodeError) as e:
        return Err(ReleaseError(kind="manifest_update", message=f"failed to read {path.name}: {e}"))
    if current is None:
        return Err(
            ReleaseError(
                kind="manifest_update",
                message=f"no version declaration line found in {path.name}",
                hint="check [manifest] version_pattern in release.toml",
            )
        )

    if current == request.version:
        ctx.console.detail(f"{path.name} already at {request.version}; nothing to commit")
        return Ok(ManifestUpdate(path=path, previous_version=current, committed=False))

    tx = ManifestTransaction(path)
    edited = _edit_and_commit(tx, request, ctx)
    if isinstance(edited, Err):
        return Err(_rollback(tx, edited.error, ctx))

    done = tx.commit()
    if isinstance(done, Err):
        return Err(
            ReleaseError(
                kind="manifest_update",
                message=done.error,
                hint="the version commit succeeded; delete the backup before re-running",
            )
        )
    return Ok(ManifestUpdate(path=path, previous_version=current, committed=True))


def _edit_and_commit(
    tx: ManifestTransaction, request: ReleaseRequest, ctx: ReleaseContext
) -> Result[None, str]:
    pattern = ctx.config.manifest.version_pattern

    snap = tx.snapshot()
    if isinstance(snap, Err):
        return snap

    ctx.console.detail(f"setting version {request.version}")
    applied = tx.apply(lambda text: replace_version(text, pattern, request.version))
    if isinstance(applied, Err):
        return applied

    added = ctx.vcs.add(tx.path)
    if isinstance(added, Err):
        return Err(f"git add failed: {added.error.message}")

    message = ctx.config.git.commit_message.format(tag=request.tag, version=request.version)
    ctx.console.detail(f"committing: {message}")
    committed = ctx.vcs.commit_signed(tx.path, message)
    if isinstance(committed, Err):
        return Err(f"git commit failed: {committed.error.message}")
    return Ok(None)


def _rollback(tx: ManifestTransaction, cause: str, ctx: ReleaseContext) -> ReleaseError:
    restored = tx.rollback()
    if isinstance(restored, Err):
        return ReleaseError(
            kind="manifest_update",
            message=f"{cause}; {restored.error}",
            hint=f"restore {tx.path.name} manually from {tx.backup_path.name}",
        )

    if restored.value:
        ctx.console.detail(f"restored {tx.path.name} from backup")
        unstaged = ctx.vcs.unstage(tx.path)
        if isinstance(unstaged, Err):
            ctx.console.warning(f"could not unstage {tx.path.name}: {unstaged.error.message}")

    return ReleaseError(kind="manifest_update", message=cause)
