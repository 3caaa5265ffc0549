"""Process exit codes.

Every terminal state of a run maps to one of these codes. All successful
outcomes (nothing to do, initialized, published) exit with ``OK``; each
failure family gets its own non-zero code so callers can tell them apart.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success
    - 1: User error (bad input, invalid metadata or feed files)
    - 2: Environment error (missing gh, unknown repository identity)
    - 3: Version error (downgrade detected)
    - 4: Publish error (release API rejected the release)
    - 5: I/O error (file, git or archive failure)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    VERSION_ERROR = 3
    PUBLISH_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")
