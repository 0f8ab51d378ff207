"""Error codes for CLI exit status.

Each class of publishing failure maps to a stable shell exit code so CI
steps can tell configuration mistakes apart from remote failures.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success (edit committed)
    - 1: User error (bad input, bad release directory, bad metadata)
    - 2: Environment error (missing aapt/bundletool/java, provisioning failed)
    - 3: Publish error (edit open/upload/track/validate/commit failed)
    - 4: Network error (GitHub API or download unreachable)
    - 5: I/O error (file not readable)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    PUBLISH_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        """Return human-readable name."""
        return self.name.lower().replace("_", " ")
