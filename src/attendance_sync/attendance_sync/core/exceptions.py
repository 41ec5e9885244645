class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class MalformedEvent(ValidationError):
    """Raised when a raw punch has an unparseable date or time-of-day."""

    def __init__(self, message: str, *, sequence: int | None = None):
        super().__init__(message)
        self.sequence = sequence


class DuplicateAddress(ValidationError):
    """Raised when a terminal is added manually at an address already registered."""


class TerminalNotFound(DomainError):
    """Raised when no registry entry has the given identity key."""


class TerminalUnreachable(DomainError):
    """Raised by an event source when a terminal cannot be read."""

    def __init__(self, address: str, port: int, reason: str):
        super().__init__(f"{address}:{port} unreachable: {reason}")
        self.address = address
        self.port = port
        self.reason = reason


class InvalidCredential(DomainError):
    """Raised when the HR endpoint rejects the API key; callers must re-authenticate."""


class SyncTransportError(DomainError):
    """Raised when a batch could not be delivered to the HR endpoint at all."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class StoreUnavailable(DomainError):
    """Raised when the persistent store cannot be read or written."""


class SyncInProgress(DomainError):
    """Raised when a sync is requested while another one is still running."""


class DiscoveryCancelled(DomainError):
    """Raised when a network discovery was cancelled before completing."""
