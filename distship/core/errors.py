"""Process exit codes for the distship CLI.

Any failed ship exits with USER_ERROR; the release pipeline that calls us only
distinguishes zero from non-zero, so the other codes are for humans reading
fetch and setup failures.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    - 0: Success (including "Nothing to do.")
    - 1: Release refused or failed (validation, naming, tagging, publishing)
    - 2: Environment error (bad distship.toml while fetching)
    - 4: Network error (artifact download failed)
    - 5: I/O error (manifest unreadable)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    NETWORK_ERROR = 4
    IO_ERROR = 5
