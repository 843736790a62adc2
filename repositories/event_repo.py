# ============================================================================
# EVENT REPOSITORY
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core - ClusterEvent persistence
# PURPOSE: Database access for bounce.cluster_events
# CREATED: 18 OCT 2026
# ============================================================================
"""
Event Repository

Create/read operations for cluster events.
Events provide an audit trail of bounce decisions.
"""

import logging
from typing import List, Optional

from psycopg import sql
from psycopg.rows import dict_row
from psycopg.types.json import Json
from psycopg_pool import AsyncConnectionPool

from core.models import ClusterEvent
from core.models.events import EventType, EventStatus
from .database import TABLE_EVENTS

logger = logging.getLogger(__name__)


class EventRepository:
    """Repository for ClusterEvent entities."""

    def __init__(self, pool: AsyncConnectionPool):
        self.pool = pool

    async def create(self, event: ClusterEvent) -> ClusterEvent:
        """
        Create a new event.

        Args:
            event: ClusterEvent instance to persist

        Returns:
            Created event with event_id populated
        """
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row
            result = await conn.execute(
                sql.SQL(
                    """
                    INSERT INTO {table} (
                        cluster_key, generation, event_type, event_status,
                        message, event_data, created_at, source_app
                    ) VALUES (
                        %(cluster_key)s, %(generation)s, %(event_type)s,
                        %(event_status)s, %(message)s, %(event_data)s,
                        %(created_at)s, %(source_app)s
                    )
                    RETURNING event_id
                    """
                ).format(table=TABLE_EVENTS),
                {
                    "cluster_key": event.cluster_key,
                    "generation": event.generation,
                    "event_type": event.event_type.value,
                    "event_status": event.event_status.value,
                    "message": event.message,
                    "event_data": Json(event.event_data) if event.event_data else None,
                    "created_at": event.created_at,
                    "source_app": event.source_app,
                },
            )
            row = await result.fetchone()
            event.event_id = row["event_id"]
            return event

    async def get_for_cluster(
        self,
        cluster_key: str,
        limit: int = 100,
        event_types: Optional[List[EventType]] = None,
    ) -> List[ClusterEvent]:
        """
        Get events for a cluster.

        Args:
            cluster_key: Cluster identifier
            limit: Maximum number of events to return
            event_types: Optional filter by event types

        Returns:
            List of ClusterEvent instances, newest first
        """
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row

            if event_types:
                result = await conn.execute(
                    sql.SQL(
                        """
                        SELECT * FROM {table}
                        WHERE cluster_key = %s AND event_type = ANY(%s)
                        ORDER BY created_at DESC
                        LIMIT %s
                        """
                    ).format(table=TABLE_EVENTS),
                    (cluster_key, [t.value for t in event_types], limit),
                )
            else:
                result = await conn.execute(
                    sql.SQL(
                        """
                        SELECT * FROM {table}
                        WHERE cluster_key = %s
                        ORDER BY created_at DESC
                        LIMIT %s
                        """
                    ).format(table=TABLE_EVENTS),
                    (cluster_key, limit),
                )

            rows = await result.fetchall()
            return [self._row_to_event(row) for row in rows]

    def _row_to_event(self, row: dict) -> ClusterEvent:
        """Convert database row to ClusterEvent."""
        return ClusterEvent(
            event_id=row["event_id"],
            cluster_key=row["cluster_key"],
            generation=row.get("generation"),
            event_type=EventType(row["event_type"]),
            event_status=EventStatus(row["event_status"]),
            message=row.get("message") or "",
            event_data=row.get("event_data") or {},
            created_at=row["created_at"],
            source_app=row.get("source_app"),
        )
