# ============================================================================
# CLUSTER STATUS REPOSITORY
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core - Persisted cluster status markers
# PURPOSE: Database access for bounce.cluster_status
# CREATED: 18 OCT 2026
# ============================================================================
"""
Cluster Status Repository

Persists status markers other loops read, currently the generation that
requested a bounce before the cluster was stable enough for it.
"""

import logging
from typing import Optional

from psycopg import sql
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from core.models import FoundationDBCluster
from .database import TABLE_CLUSTER_STATUS

logger = logging.getLogger(__name__)


class ClusterStatusRepository:
    """Repository for per-cluster status markers."""

    def __init__(self, pool: AsyncConnectionPool):
        self.pool = pool

    async def update_needs_bounce(self, cluster: FoundationDBCluster) -> None:
        """Upsert the needs-bounce generation of a cluster."""
        async with self.pool.connection() as conn:
            await conn.execute(
                sql.SQL(
                    """
                    INSERT INTO {table} (cluster_key, needs_bounce_generation, updated_at)
                    VALUES (%s, %s, NOW())
                    ON CONFLICT (cluster_key) DO UPDATE SET
                        needs_bounce_generation = EXCLUDED.needs_bounce_generation,
                        updated_at = EXCLUDED.updated_at
                    """
                ).format(table=TABLE_CLUSTER_STATUS),
                (cluster.cluster_key, cluster.status.needs_bounce_generation),
            )
        logger.debug(
            f"Persisted needs_bounce_generation="
            f"{cluster.status.needs_bounce_generation} for {cluster.cluster_key}"
        )

    async def get_needs_bounce(self, cluster_key: str) -> Optional[int]:
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row
            result = await conn.execute(
                sql.SQL(
                    "SELECT needs_bounce_generation FROM {table} WHERE cluster_key = %s"
                ).format(table=TABLE_CLUSTER_STATUS),
                (cluster_key,),
            )
            row = await result.fetchone()
            return row["needs_bounce_generation"] if row else None
