"""
Karaoke Domain Repository Interfaces

Abstract base classes defining the contracts for data persistence.
Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod

from karaoke_queue.domain.karaoke.entities import StoreSnapshot


class SnapshotRepository(ABC):
    """Abstract repository persisting the whole session store as one snapshot.

    Every save overwrites the previous snapshot atomically; there is no
    per-session persistence.
    """

    @abstractmethod
    async def load(self) -> StoreSnapshot:
        """Load the last saved snapshot.

        Returns:
            The stored snapshot, or an empty snapshot if nothing was saved yet.

        Raises:
            Any storage or parse error; callers decide how to degrade.
        """
        ...

    @abstractmethod
    async def save(self, snapshot: StoreSnapshot) -> None:
        """Replace the stored snapshot with *snapshot*.

        Args:
            snapshot: The full store state to persist.
        """
        ...
