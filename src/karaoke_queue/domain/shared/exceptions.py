"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class NotInSessionError(DomainError):
    """Raised when an operation requires the caller to be in a session."""

    def __init__(self, caller_id: str, message: str | None = None) -> None:
        msg = message or f"Caller '{caller_id}' is not in a session"
        super().__init__(msg, code="NOT_IN_SESSION")
        self.caller_id = caller_id


class InvalidVideoUrlError(DomainError):
    """Raised when a URL is not a supported video link."""

    def __init__(self, url: str, message: str | None = None) -> None:
        msg = message or f"Not a supported video link: {url}"
        super().__init__(msg, code="INVALID_VIDEO_URL")
        self.url = url


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


class SessionCodeExhaustedError(DomainError):
    """Raised when no free session code could be generated."""

    def __init__(self, attempts: int) -> None:
        super().__init__(
            f"Could not generate a free session code after {attempts} attempts",
            code="SESSION_CODE_EXHAUSTED",
        )
        self.attempts = attempts


class IntegrationError(DomainError):
    """Base class for failures of external collaborators (resolver, cast device)."""


class ResolverError(IntegrationError):
    """Raised when a video could not be resolved for a reason other than a bad URL."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="RESOLVER_ERROR")


class ResolverTimeoutError(ResolverError):
    """Raised when video resolution exceeded its timeout."""

    def __init__(self, url: str, timeout_s: float) -> None:
        super().__init__(f"Resolving {url} timed out after {timeout_s:g}s")
        self.code = "RESOLVER_TIMEOUT"
        self.url = url
        self.timeout_s = timeout_s


class CastError(IntegrationError):
    """Raised when a cast device could not be discovered, reached, or commanded."""

    def __init__(self, message: str, device: str | None = None) -> None:
        super().__init__(message, code="CAST_ERROR")
        self.device = device


class CastDeviceNotFoundError(CastError):
    """Raised when the requested cast device is not on the network."""

    def __init__(self, device: str | None = None) -> None:
        msg = f"Cast device not found: {device}" if device else "No cast devices available"
        super().__init__(msg, device=device)
        self.code = "CAST_DEVICE_NOT_FOUND"


class CastTimeoutError(CastError):
    """Raised when device discovery or a device command exceeded its timeout."""

    def __init__(self, operation: str, timeout_s: float, device: str | None = None) -> None:
        target = f" on {device}" if device else ""
        super().__init__(f"Cast {operation}{target} timed out after {timeout_s:g}s", device=device)
        self.code = "CAST_TIMEOUT"
        self.operation = operation
        self.timeout_s = timeout_s
