"""
Exit Codes - Process exit status for the procsync CLI.

Scripts can branch on these values; they stay stable across releases.
"""

from enum import IntEnum

from procsync.core.exceptions import (
    AccessDeniedError,
    AuthenticationError,
    ConfigError,
    ProcessNotFoundError,
    ResourceNotFoundError,
    TransientError,
)


class ExitCode(IntEnum):
    """
    Exit codes returned by the CLI.

    Attributes:
        SUCCESS: Everything synced (warnings may still be printed).
        ERROR: Unexpected failure.
        CONFIG_ERROR: Missing or invalid configuration.
        CONNECTION_ERROR: The tracker rejected our credentials or was unreachable.
        NOT_FOUND: The requested process does not exist.
        PARTIAL_SUCCESS: A batch finished but some processes failed.
        SIGINT: Interrupted by the user.
    """

    SUCCESS = 0
    ERROR = 1
    CONFIG_ERROR = 2
    CONNECTION_ERROR = 3
    NOT_FOUND = 4
    PARTIAL_SUCCESS = 5
    SIGINT = 130

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ExitCode":
        """Map an exception to the exit code a script should see."""
        if isinstance(exc, KeyboardInterrupt):
            return cls.SIGINT
        if isinstance(exc, ConfigError):
            return cls.CONFIG_ERROR
        if isinstance(exc, ProcessNotFoundError):
            return cls.NOT_FOUND
        if isinstance(exc, (AuthenticationError, AccessDeniedError, TransientError)):
            return cls.CONNECTION_ERROR
        if isinstance(exc, ResourceNotFoundError):
            return cls.NOT_FOUND
        return cls.ERROR
