"""Typed configuration loading.

Settings live in an optional ``release.toml`` at the repository root. Every
key has a default that matches an npm package with a ``package.json``
manifest, so most projects need no config file at all.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_table

__all__ = [
    "AnnounceConfig",
    "CONFIG_FILE_NAME",
    "ConfigError",
    "GitConfig",
    "ManifestConfig",
    "NotesConfig",
    "RegistryConfig",
    "ReleaseConfig",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE_NAME = "release.toml"

# Groups: (1) text before the value, (2) the version value, (3) closing quote.
DEFAULT_VERSION_PATTERN = r'^(\s*"version"\s*:\s*")([^"]*)(")'
DEFAULT_NAME_PATTERN = r'^\s*"name"\s*:\s*"([^"]+)"'
DEFAULT_URL_TEMPLATE = (
    "https://github.com/{slug}/releases/new?tag={tag}&title={title}&body={body}"
)


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ManifestConfig:
    """Where the package manifest lives and how its version line looks."""

    path: str = "package.json"
    version_pattern: str = DEFAULT_VERSION_PATTERN
    name_pattern: str = DEFAULT_NAME_PATTERN
    # Overrides the name read from the manifest.
    package_name: str | None = None


@dataclass(frozen=True, slots=True)
class GitConfig:
    remote: str = "origin"
    commit_message: str = "Release {tag}"


@dataclass(frozen=True, slots=True)
class RegistryConfig:
    tool: str = "npm"


@dataclass(frozen=True, slots=True)
class NotesConfig:
    editor: str | None = None


@dataclass(frozen=True, slots=True)
class AnnounceConfig:
    """Release announcement page (GitHub "draft a new release" by default)."""

    repo_slug: str | None = None
    url_template: str = DEFAULT_URL_TEMPLATE


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Main configuration container."""

    manifest: ManifestConfig = field(default_factory=ManifestConfig)
    git: GitConfig = field(default_factory=GitConfig)
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    notes: NotesConfig = field(default_factory=NotesConfig)
    announce: AnnounceConfig = field(default_factory=AnnounceConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ReleaseConfig:
        """Create a config from a parsed TOML mapping."""
        manifest: StrDict = get_table(data, "manifest") or {}
        git: StrDict = get_table(data, "git") or {}
        registry: StrDict = get_table(data, "registry") or {}
        notes: StrDict = get_table(data, "notes") or {}
        announce: StrDict = get_table(data, "announce") or {}

        return cls(
            manifest=ManifestConfig(
                path=get_str(manifest, "path") or "package.json",
                version_pattern=get_str(manifest, "version_pattern") or DEFAULT_VERSION_PATTERN,
                name_pattern=get_str(manifest, "name_pattern") or DEFAULT_NAME_PATTERN,
                package_name=get_str(manifest, "package_name"),
            ),
            git=GitConfig(
                remote=get_str(git, "remote") or "origin",
                commit_message=get_str(git, "commit_message") or "Release {tag}",
            ),
            registry=RegistryConfig(tool=get_str(registry, "tool") or "npm"),
            notes=NotesConfig(editor=get_str(notes, "editor")),
            announce=AnnounceConfig(
                repo_slug=get_str(announce, "repo_slug"),
                url_template=get_str(announce, "url_template") or DEFAULT_URL_TEMPLATE,
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, mapping I/O and syntax failures to ConfigError."""
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to release.toml

    Returns:
        Ok(ReleaseConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(ReleaseConfig.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load config if the file exists; a missing file yields the defaults."""
    if not path.exists():
        return Ok(ReleaseConfig())
    return load_config(path)
