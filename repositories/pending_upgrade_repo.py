# ============================================================================
# PENDING UPGRADE REPOSITORY
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core - Pending upgrade set persistence
# PURPOSE: Database access for bounce.pending_upgrades
# CREATED: 18 OCT 2026
# ============================================================================
"""
Pending Upgrade Repository

Stores the pending-upgrade set shared by every controller instance.
Registration and clearing each run in one transaction, so the set is
never left half-written.
"""

import logging
from typing import Dict, List

from psycopg import sql
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from core.models import PendingUpgrade
from .database import TABLE_PENDING_UPGRADES

logger = logging.getLogger(__name__)


class PendingUpgradeRepository:
    """Repository for PendingUpgrade rows."""

    def __init__(self, pool: AsyncConnectionPool):
        self.pool = pool

    async def add(self, cluster_key: str, version: str, process_ids: List[str]) -> None:
        """
        Register processes for an upgrade.

        Idempotent: re-adding an already registered id is a no-op.

        Args:
            cluster_key: Cluster identifier
            version: Target version string
            process_ids: Process ids to register
        """
        if not process_ids:
            return

        query = sql.SQL(
            """
            INSERT INTO {table} (cluster_key, version, process_id, created_at)
            VALUES (%s, %s, %s, %s)
            ON CONFLICT (cluster_key, version, process_id) DO NOTHING
            """
        ).format(table=TABLE_PENDING_UPGRADES)

        rows = [
            PendingUpgrade(cluster_key=cluster_key, version=version, process_id=pid)
            for pid in process_ids
        ]

        async with self.pool.connection() as conn:
            async with conn.transaction():
                async with conn.cursor() as cur:
                    await cur.executemany(
                        query,
                        [(r.cluster_key, r.version, r.process_id, r.created_at) for r in rows],
                    )

        logger.debug(
            f"Registered {len(process_ids)} pending upgrades for "
            f"{cluster_key} -> {version}"
        )

    async def get(self, cluster_key: str, version: str) -> Dict[str, bool]:
        """
        Get the pending-upgrade set for a target version.

        Returns:
            process_id -> True for every registered process
        """
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row
            result = await conn.execute(
                sql.SQL(
                    "SELECT process_id FROM {table} "
                    "WHERE cluster_key = %s AND version = %s"
                ).format(table=TABLE_PENDING_UPGRADES),
                (cluster_key, version),
            )
            rows = await result.fetchall()
            return {row["process_id"]: True for row in rows}

    async def clear(self, cluster_key: str) -> int:
        """
        Remove every pending upgrade for a cluster, all versions.

        Returns:
            Number of rows deleted
        """
        async with self.pool.connection() as conn:
            async with conn.transaction():
                result = await conn.execute(
                    sql.SQL("DELETE FROM {table} WHERE cluster_key = %s").format(
                        table=TABLE_PENDING_UPGRADES
                    ),
                    (cluster_key,),
                )
                deleted = result.rowcount

        logger.debug(f"Cleared {deleted} pending upgrades for {cluster_key}")
        return deleted
