"""
Service interfaces for dependency inversion.
Allows swapping implementations without changing business logic.
"""

from .resource_lock import ResourceLockStrategy
from .constraint_only_lock import ConstraintOnlyLock

__all__ = ['ResourceLockStrategy', 'ConstraintOnlyLock']
