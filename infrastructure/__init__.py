# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Infrastructure - Concurrency control
# PURPOSE: Cross-instance coordination primitives
# CREATED: 18 OCT 2026
# ============================================================================
"""
Infrastructure module for the bounce coordinator.

Provides:
- LockService: PostgreSQL advisory locks, one per cluster

Usage:
    from infrastructure import LockService

    lock_service = LockService(pool)
    async with lock_service.cluster_lock("prod/fdb-a", "bouncing processes") as acquired:
        ...
"""

from infrastructure.locking import LockService

__all__ = [
    # Locking
    'LockService',
]
