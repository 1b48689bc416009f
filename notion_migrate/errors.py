"""Exception types raised by the migration tool."""

from typing import Optional


class MigrationError(Exception):
    """Base class for migration errors."""


class ConfigError(MigrationError):
    """Missing or invalid configuration."""


class RemoteError(MigrationError):
    """A call to the remote service failed."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code

    def __str__(self) -> str:
        if self.status_code:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message
