# ============================================================================
# SCHEMA DDL
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core - Table definitions
# PURPOSE: Idempotent DDL for the bounce schema
# CREATED: 18 OCT 2026
# ============================================================================
"""
Schema DDL

Every statement is idempotent (IF NOT EXISTS), so deployment is safe to
run repeatedly.
"""

import logging
from typing import List

from psycopg import sql
from psycopg_pool import AsyncConnectionPool

from .database import SCHEMA, TABLE_CLUSTER_STATUS, TABLE_EVENTS, TABLE_PENDING_UPGRADES

logger = logging.getLogger(__name__)


def build_statements() -> List[sql.Composed]:
    """Build the DDL statements in dependency order."""
    return [
        sql.SQL("CREATE SCHEMA IF NOT EXISTS {}").format(sql.Identifier(SCHEMA)),
        sql.SQL(
            """
            CREATE TABLE IF NOT EXISTS {} (
                cluster_key VARCHAR(256) NOT NULL,
                version VARCHAR(32) NOT NULL,
                process_id VARCHAR(128) NOT NULL,
                created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                PRIMARY KEY (cluster_key, version, process_id)
            )
            """
        ).format(TABLE_PENDING_UPGRADES),
        sql.SQL(
            """
            CREATE TABLE IF NOT EXISTS {} (
                event_id BIGSERIAL PRIMARY KEY,
                cluster_key VARCHAR(256) NOT NULL,
                generation BIGINT,
                event_type VARCHAR(64) NOT NULL,
                event_status VARCHAR(16) NOT NULL,
                message VARCHAR(4000) NOT NULL DEFAULT '',
                event_data JSONB,
                created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                source_app VARCHAR(64)
            )
            """
        ).format(TABLE_EVENTS),
        sql.SQL(
            "CREATE INDEX IF NOT EXISTS idx_cluster_events_cluster_created "
            "ON {} (cluster_key, created_at)"
        ).format(TABLE_EVENTS),
        sql.SQL(
            """
            CREATE TABLE IF NOT EXISTS {} (
                cluster_key VARCHAR(256) PRIMARY KEY,
                needs_bounce_generation BIGINT,
                updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
            """
        ).format(TABLE_CLUSTER_STATUS),
    ]


async def deploy_schema(pool: AsyncConnectionPool) -> int:
    """
    Create the schema and tables in one transaction.

    Returns:
        Number of statements executed
    """
    statements = build_statements()
    async with pool.connection() as conn:
        async with conn.transaction():
            for statement in statements:
                await conn.execute(statement)
    logger.info(f"Deployed schema {SCHEMA} ({len(statements)} statements)")
    return len(statements)
