"""Console output abstraction.

Release progress is narrated step by step so a failure can be traced to the
exact stage that produced it:

    -> Checking preconditions
     > tag v1.2.3 is free
    [ERROR] manifest not found: package.json

Services depend on ``ConsoleProtocol`` only; ``RichConsole`` renders to the
terminal and ``MockConsole`` captures output for tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "OutputRecord",
    "RichConsole",
    "Style",
]

STEP_PREFIX = "-> "
DETAIL_PREFIX = " > "
ERROR_PREFIX = "[ERROR] "


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    STEP = auto()
    DETAIL = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    DIM = auto()

    def __str__(self) -> str:
        return self.name.lower()


class ConsoleProtocol(Protocol):
    """Protocol for release progress output."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        """Print a message with optional styling."""
        ...

    def step(self, message: str) -> None:
        """Announce a pipeline stage (``-> message``)."""
        ...

    def detail(self, message: str) -> None:
        """Report progress inside the current stage (`` > message``)."""
        ...

    def success(self, message: str) -> None:
        ...

    def warning(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        """Report a fatal error (``[ERROR] message``) on stderr."""
        ...

    def newline(self) -> None:
        ...


class RichConsole:
    """Console implementation using Rich."""

    def __init__(self) -> None:
        # Import Rich lazily to avoid import-time dependency
        from rich.console import Console

        self._out = Console(highlight=False)
        self._err = Console(stderr=True, highlight=False)
        self._style_map = {
            Style.DEFAULT: "",
            Style.STEP: "bold",
            Style.DETAIL: "",
            Style.SUCCESS: "green",
            Style.ERROR: "red bold",
            Style.WARNING: "yellow",
            Style.DIM: "dim",
        }

    def _emit(self, prefix: str, message: str, style: Style, *, stderr: bool = False) -> None:
        from rich.text import Text

        # Text() keeps user-supplied brackets from being read as markup.
        text = Text.assemble((prefix, self._style_map[style]), message)
        (self._err if stderr else self._out).print(text)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        from rich.text import Text

        self._out.print(Text(message, style=self._style_map.get(style, "")))

    def step(self, message: str) -> None:
        self._emit(STEP_PREFIX, message, Style.STEP)

    def detail(self, message: str) -> None:
        self._emit(DETAIL_PREFIX, message, Style.DIM)

    def success(self, message: str) -> None:
        self._emit("OK ", message, Style.SUCCESS)

    def warning(self, message: str) -> None:
        self._emit("warning: ", message, Style.WARNING)

    def error(self, message: str) -> None:
        self._emit(ERROR_PREFIX, message, Style.ERROR, stderr=True)

    def newline(self) -> None:
        self._out.print()


@dataclass
class OutputRecord:
    """A single output record for MockConsole."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console implementation that captures output for testing."""

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def step(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"{STEP_PREFIX}{message}", Style.STEP))

    def detail(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"{DETAIL_PREFIX}{message}", Style.DETAIL))

    def success(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"OK {message}", Style.SUCCESS))

    def warning(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"warning: {message}", Style.WARNING))

    def error(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"{ERROR_PREFIX}{message}", Style.ERROR))

    def newline(self) -> None:
        self.outputs.append(OutputRecord("", Style.DEFAULT))

    # Test helpers

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style == Style.ERROR for o in self.outputs)

    def has_warning(self) -> bool:
        return any(o.style == Style.WARNING for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        """Find all outputs containing a substring."""
        return [o for o in self.outputs if substring in o.message]
