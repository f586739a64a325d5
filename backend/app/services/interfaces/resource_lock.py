"""
Per-resource write lock strategy interface.
Allows swapping between different concurrency control approaches.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional


class ResourceLockStrategy(ABC):
    """
    Interface for serializing booking writes per resource.

    Implementations:
    - ConstraintOnlyLock: No lock, rely on the resource_nights unique constraint
    - RedisResourceLock: Short-lived Redis locks keyed on resource id

    Whatever the strategy, the database constraint stays authoritative.
    """

    @abstractmethod
    async def acquire(self, resource_ids: Iterable[int]) -> Optional[str]:
        """
        Lock every resource in the set.

        Returns:
            A token to pass to release(), or None if the set could not
            be locked within the wait budget.
        """
        pass

    @abstractmethod
    async def release(self, resource_ids: Iterable[int], token: str) -> None:
        """Release locks taken with `token`. Best effort."""
        pass
