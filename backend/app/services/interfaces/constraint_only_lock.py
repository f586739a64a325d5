"""
Constraint-only strategy - no pre-lock.
Relies entirely on the database unique constraint.
"""

from typing import Iterable, Optional

from app.services.interfaces.resource_lock import ResourceLockStrategy


class ConstraintOnlyLock(ResourceLockStrategy):
    """
    No lock - always proceed.
    Concurrent writers race to the insert and the loser gets an
    IntegrityError, reported as ResourceConflict.

    Use when:
    - Single database, normal load
    - Simplicity preferred over early rejection
    """

    async def acquire(self, resource_ids: Iterable[int]) -> Optional[str]:
        return "constraint"

    async def release(self, resource_ids: Iterable[int], token: str) -> None:
        pass
