"""Package registry collaborator."""

from cutrelease.registry.npm import NpmRegistry, Ownership, PackageRegistry, RegistryError

__all__ = ["NpmRegistry", "Ownership", "PackageRegistry", "RegistryError"]
