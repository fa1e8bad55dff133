"""Process exit codes.

The release tool only distinguishes three outcomes; the values are part of
the CLI contract and must stay stable:
- 0: release completed
- 1: validation or operational failure
- 2: usage error, or an environment the user must fix by hand
  (for example a missing signing key)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the ``release`` command."""

    OK = 0
    FAILURE = 1
    USAGE_ERROR = 2
