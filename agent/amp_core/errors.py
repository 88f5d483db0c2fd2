"""
Exception hierarchy for the agent.

None of these are fatal: each is caught at the command or edge handler that
triggered it and shown to the operator as a notification.
"""


class AmpError(Exception):
    """Base exception for agent errors."""

    pass


class ConfigurationError(AmpError):
    """Raised when no endpoint is configured for a connect or send."""

    def __init__(self, message="WebSocket URL is not set"):
        super().__init__(message)


class TransportError(AmpError):
    """Raised when a socket transport cannot be created for an endpoint."""

    def __init__(self, message, url=None, error=None):
        super().__init__(message)
        self.url = url
        self.original_error = error


class AlreadyConnectedWarning(UserWarning):
    """A connect was requested while a connection is open or opening."""

    pass
