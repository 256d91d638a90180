"""EZID client exceptions."""


class EzidException(Exception):
    """Base class of all exceptions raised by the EZID client."""

    def __init__(self, message: str) -> None:
        """Initialize exception."""
        self.message = message
        super().__init__(message)


class ServiceError(EzidException):
    """Exception raised when an EZID operation fails.

    Errors reported by EZID itself keep the service's message unchanged.
    """


class TransportError(ServiceError):
    """Exception raised when the HTTP exchange with EZID fails."""


class AuthenticationError(ServiceError):
    """Exception raised when logging in to EZID fails."""


class ProtocolError(ServiceError):
    """Exception raised for malformed ANVL or an unparsable response envelope."""


class QueueShutdownError(EzidException):
    """Exception raised when a request is submitted to a queue that has been shut down."""
