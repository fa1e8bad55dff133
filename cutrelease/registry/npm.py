"""Package registry collaborator.

``PackageRegistry`` is what the release workflow needs from a registry;
``NpmRegistry`` drives an npm-compatible CLI (``npm``, ``pnpm``, ...), named
by ``[registry] tool`` in the config.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from cutrelease.core.result import Err, Ok, Result
from cutrelease.platform.process import run as run_process
from cutrelease.platform.process import run_interactive, which

__all__ = ["NpmRegistry", "Ownership", "PackageRegistry", "RegistryError"]


@dataclass(frozen=True, slots=True)
class RegistryError:
    command: str
    message: str


@dataclass(frozen=True, slots=True)
class Ownership:
    """Who is logged in and who may publish the package."""

    package: str
    user: str
    owners: tuple[str, ...]

    @property
    def is_owner(self) -> bool:
        return self.user in self.owners


class PackageRegistry(Protocol):
    tool: str

    def is_installed(self) -> bool: ...

    def ownership(self, package: str) -> Result[Ownership, RegistryError]: ...

    def publish(self, manifest_dir: Path) -> Result[None, RegistryError]: ...


class NpmRegistry:
    def __init__(self, tool: str, cwd: Path) -> None:
        self.tool = tool
        self.cwd = cwd

    def is_installed(self) -> bool:
        return which(self.tool) is not None

    def whoami(self) -> Result[str, RegistryError]:
        result = run_process([self.tool, "whoami"], cwd=self.cwd)
        if isinstance(result, Err):
            return Err(RegistryError(command="whoami", message=result.error.details))
        user = result.value.strip()
        if not user:
            return Err(RegistryError(command="whoami", message="not logged in"))
        return Ok(user)

    def owners(self, package: str) -> Result[tuple[str, ...], RegistryError]:
        """Parse ``owner ls`` output: one ``name <email>`` per line."""
        result = run_process([self.tool, "owner", "ls", package], cwd=self.cwd)
        if isinstance(result, Err):
            return Err(RegistryError(command="owner ls", message=result.error.details))
        names = tuple(line.split()[0] for line in result.value.splitlines() if line.strip())
        return Ok(names)

    def ownership(self, package: str) -> Result[Ownership, RegistryError]:
        user = self.whoami()
        if isinstance(user, Err):
            return user
        owners = self.owners(package)
        if isinstance(owners, Err):
            return owners
        return Ok(Ownership(package=package, user=user.value, owners=owners.value))

    def publish(self, manifest_dir: Path) -> Result[None, RegistryError]:
        # Attached to the terminal: the registry may prompt for a one-time password.
        result = run_interactive([self.tool, "publish", str(manifest_dir)], cwd=self.cwd)
        if isinstance(result, Err):
            return Err(RegistryError(command="publish", message=str(result.error)))
        return Ok(None)
