"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting exceptions, types and messages
- karaoke/: Sessions, membership, queue and now-playing state
"""

from karaoke_queue.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
