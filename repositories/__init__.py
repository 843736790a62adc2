# ============================================================================
# REPOSITORIES MODULE
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core - Database access layer
# PURPOSE: Persistence for pending upgrades, events and status markers
# CREATED: 18 OCT 2026
# ============================================================================
"""
Repositories Module

Provides database access for bounce coordination state.
Uses psycopg3 async with connection pooling.

Usage:
    from repositories import DatabasePool, PendingUpgradeRepository

    async with DatabasePool() as pool:
        repo = PendingUpgradeRepository(pool)
        pending = await repo.get("prod/fdb-a", "7.1.25")
"""

from .database import init_pool, close_pool, DatabasePool
from .pending_upgrade_repo import PendingUpgradeRepository
from .event_repo import EventRepository
from .cluster_status_repo import ClusterStatusRepository
from .schema import deploy_schema

__all__ = [
    "init_pool",
    "close_pool",
    "DatabasePool",
    "PendingUpgradeRepository",
    "EventRepository",
    "ClusterStatusRepository",
    "deploy_schema",
]
