# ============================================================================
# DISTRIBUTED LOCKING SERVICE
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Infrastructure - Concurrency control
# PURPOSE: PostgreSQL advisory locks for per-cluster coordination
# CREATED: 18 OCT 2026
# ============================================================================
"""
Distributed Locking Service

Uses PostgreSQL advisory locks so that only one controller instance at a
time issues kills or mutates upgrade state for a given cluster.

Advisory locks are:
- Fast (in-memory, no disk I/O)
- Auto-release on disconnect (crash-safe)
- Support non-blocking try_lock semantics
- 64-bit key space

The cluster lock is session-level and held on a dedicated pooled
connection for the duration of an `async with` block. It is released
explicitly on every exit path; if the explicit unlock fails the server
still drops it when the connection goes away.

Usage:
    from infrastructure.locking import LockService

    lock_service = LockService(pool)

    async with lock_service.cluster_lock("prod/fdb-a", "bouncing processes") as acquired:
        if acquired:
            await bounce(...)
"""

import hashlib
import logging
from contextlib import asynccontextmanager
from typing import Optional

from psycopg_pool import AsyncConnectionPool

from core.config import get_defaults

logger = logging.getLogger(__name__)


class LockService:
    """
    PostgreSQL-based distributed locking.

    One lock per cluster key. Locks are non-blocking: a caller that
    cannot get the lock is told so immediately and retries on a later tick.
    """

    def __init__(self, pool: AsyncConnectionPool, key_prefix: Optional[str] = None):
        """
        Initialize lock service.

        Args:
            pool: Database connection pool
            key_prefix: Namespace prefix for lock keys (defaults to config)
        """
        self.pool = pool
        self.key_prefix = key_prefix or get_defaults().locks.key_prefix

    @staticmethod
    def _hash_to_lock_id(key: str) -> int:
        """
        Convert string key to int64 for PostgreSQL advisory lock.

        Args:
            key: String key to hash

        Returns:
            Signed int64 suitable for pg_advisory_lock
        """
        # First 8 bytes of SHA256, interpreted as signed int64
        h = hashlib.sha256(key.encode()).digest()[:8]
        return int.from_bytes(h, byteorder='big', signed=True)

    def lock_id_for(self, cluster_key: str) -> int:
        return self._hash_to_lock_id(f"{self.key_prefix}{cluster_key}")

    @staticmethod
    def _first_value(row, key: str) -> bool:
        # Handle both dict_row and tuple row factories
        if not row:
            return False
        return bool(row[key] if hasattr(row, 'keys') else row[0])

    @asynccontextmanager
    async def cluster_lock(self, cluster_key: str, reason: str):
        """
        Context manager for the cluster lock.

        Args:
            cluster_key: Cluster identifier (namespace/name)
            reason: Why the lock is taken, for logs

        Yields:
            bool: True if the lock is held, False if another session holds it

        Raises:
            psycopg.Error: If the lock query itself fails
        """
        lock_id = self.lock_id_for(cluster_key)

        async with self.pool.connection() as conn:
            result = await conn.execute(
                "SELECT pg_try_advisory_lock(%s) as acquired",
                (lock_id,),
            )
            acquired = self._first_value(await result.fetchone(), "acquired")

            if acquired:
                logger.info(
                    f"Acquired cluster lock for {cluster_key} "
                    f"(lock_id={lock_id}, reason={reason})"
                )
            else:
                logger.info(
                    f"Cluster {cluster_key} locked by another instance, "
                    f"skipping ({reason})"
                )

            try:
                yield acquired
            finally:
                if acquired:
                    try:
                        await conn.execute(
                            "SELECT pg_advisory_unlock(%s)",
                            (lock_id,),
                        )
                        logger.info(f"Released cluster lock for {cluster_key}")
                    except Exception as e:
                        # Server drops the lock with the broken session
                        logger.warning(
                            f"Error releasing cluster lock for {cluster_key}: {e}"
                        )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = ['LockService']
