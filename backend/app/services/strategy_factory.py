"""
Resource lock strategy factory.
Configures which write serialization strategy to use.
"""

from typing import Optional

from app.core.config import get_settings
from app.services.interfaces.resource_lock import ResourceLockStrategy
from app.services.interfaces.constraint_only_lock import ConstraintOnlyLock
from app.services.resource_lock_service import RedisResourceLock


def get_resource_lock_strategy() -> ResourceLockStrategy:
    """
    Build the configured lock strategy.

    - constraint (default): ConstraintOnlyLock
    - redis: RedisResourceLock

    Selected via the RESOURCE_LOCK_STRATEGY env var.
    """
    strategy = get_settings().RESOURCE_LOCK_STRATEGY

    if strategy == 'redis':
        return RedisResourceLock()
    else:
        return ConstraintOnlyLock()


# Singleton instance
_strategy: Optional[ResourceLockStrategy] = None


def get_resource_lock() -> ResourceLockStrategy:
    """Get resource lock strategy singleton."""
    global _strategy
    if _strategy is None:
        _strategy = get_resource_lock_strategy()
    return _strategy
