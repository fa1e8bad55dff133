from __future__ import annotations

import re
from dataclasses import dataclass

# v<major>.<minor>.<patch>[-<word>[.<digit>]], ASCII only
TAG_RE = re.compile(r"^v(\d+)\.(\d+)\.(\d+)(?:-(\w+)(?:\.(\d))?)?\Z", re.ASCII)
TAG_GRAMMAR = "v<major>.<minor>.<patch>[-<prerelease>[.<n>]]"


@dataclass(frozen=True, slots=True)
class SemVer:
    major: int
    minor: int
    patch: int
    prerelease: str | None = None
    index: int | None = None

    def to_tag(self) -> str:
        tag = f"v{self.major}.{self.minor}.{self.patch}"
        if self.prerelease is not None:
            tag += f"-{self.prerelease}"
            if self.index is not None:
                tag += f".{self.index}"
        return tag

    def sort_key(self) -> tuple[int, int, int, int, tuple[int, int, str], int]:
        # A prerelease sorts before the release it leads up to.
        is_release = 1 if self.prerelease is None else 0
        return (
            self.major,
            self.minor,
            self.patch,
            is_release,
            _prerelease_key(self.prerelease),
            -1 if self.index is None else self.index,
        )


def _prerelease_key(word: str | None) -> tuple[int, int, str]:
    # Numeric identifiers compare as numbers and rank below alphanumeric ones.
    if word is None:
        return (0, 0, "")
    if word.isdigit():
        return (0, int(word), "")
    return (1, 0, word)


def parse_tag(tag: str) -> SemVer | None:
    m = TAG_RE.match(tag)
    if m is None:
        return None
    return SemVer(
        major=int(m.group(1)),
        minor=int(m.group(2)),
        patch=int(m.group(3)),
        prerelease=m.group(4),
        index=int(m.group(5)) if m.group(5) is not None else None,
    )


def latest_tag(tags: list[str]) -> str | None:
    """Return the highest tag by semantic-version order, ignoring non-matching tags."""
    parsed = [(v, t) for t in tags if (v := parse_tag(t)) is not None]
    if not parsed:
        return None
    return max(parsed, key=lambda item: item[0].sort_key())[1]
