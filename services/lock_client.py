# ============================================================================
# POSTGRES LOCK CLIENT
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core - LockClient backed by PostgreSQL
# PURPOSE: Cluster lock + pending-upgrade set for one cluster
# CREATED: 18 OCT 2026
# ============================================================================
"""
Postgres Lock Client

Binds the advisory-lock service and the pending-upgrade repository to a
single cluster, giving the pipeline the LockClient contract.
"""

import logging
from typing import Dict, List

from psycopg_pool import AsyncConnectionPool

from core.interfaces import LockClient
from core.models import FdbVersion, FoundationDBCluster
from infrastructure.locking import LockService
from repositories import PendingUpgradeRepository

logger = logging.getLogger(__name__)


class PostgresLockClient(LockClient):
    """LockClient for one cluster."""

    def __init__(
        self,
        pool: AsyncConnectionPool,
        cluster: FoundationDBCluster,
        lock_service: LockService = None,
    ):
        self.cluster_key = cluster.cluster_key
        self.lock_service = lock_service or LockService(pool)
        self.pending_repo = PendingUpgradeRepository(pool)

    async def add_pending_upgrades(self, version: FdbVersion, process_ids: List[str]) -> None:
        await self.pending_repo.add(self.cluster_key, str(version), process_ids)

    async def get_pending_upgrades(self, version: FdbVersion) -> Dict[str, bool]:
        return await self.pending_repo.get(self.cluster_key, str(version))

    async def clear_pending_upgrades(self) -> None:
        await self.pending_repo.clear(self.cluster_key)

    def acquire_lock(self, reason: str):
        return self.lock_service.cluster_lock(self.cluster_key, reason)
