"""Exception hierarchy for controller access."""


class BMCError(Exception):
    """Base exception for all controller access errors."""


class AuthenticationError(BMCError):
    """SSH authentication against the controller failed."""


class SSHError(BMCError):
    """SSH connection or command execution failed."""


class CommandError(BMCError):
    """The controller rejected a CLP command."""

    def __init__(self, message: str, status: int | None = None):
        self.status = status
        super().__init__(message)


class ConfigError(BMCError):
    """Controller configuration is missing, unreadable or invalid."""
