"""Process and filesystem primitives."""

from cutrelease.platform.files import atomic_write_bytes, atomic_write_text
from cutrelease.platform.process import ProcessError, run, run_interactive, which

__all__ = [
    "ProcessError",
    "atomic_write_bytes",
    "atomic_write_text",
    "run",
    "run_interactive",
    "which",
]
