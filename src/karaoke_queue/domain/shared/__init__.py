"""
Shared Domain Kernel

Contains exceptions, types and helpers shared across the code base.
"""

from karaoke_queue.domain.shared.exceptions import (
    CastDeviceNotFoundError,
    CastError,
    CastTimeoutError,
    DomainError,
    IntegrationError,
    InvalidOperationError,
    InvalidVideoUrlError,
    NotInSessionError,
    ResolverError,
    ResolverTimeoutError,
    SessionCodeExhaustedError,
)

__all__ = [
    "DomainError",
    "NotInSessionError",
    "InvalidVideoUrlError",
    "InvalidOperationError",
    "SessionCodeExhaustedError",
    "IntegrationError",
    "ResolverError",
    "ResolverTimeoutError",
    "CastError",
    "CastDeviceNotFoundError",
    "CastTimeoutError",
]
