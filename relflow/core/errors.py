"""Exit codes for the CLI.

Every failure exits 1; callers tell failure kinds apart by the ``error:``
line on stderr.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes.

    - 0: Success
    - 1: Any failed check, collaborator failure or usage error
    """

    OK = 0
    FAILURE = 1

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
