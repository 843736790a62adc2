# ============================================================================
# EVENT SERVICE
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core - Event emission
# PURPOSE: Emit operator-visible events at bounce decision points
# CREATED: 18 OCT 2026
# ============================================================================
"""
Event Service

Provides methods to emit events at key decision points.
Events are fire-and-forget - failures are logged but don't propagate.

This enables:
- Operators seeing that a bounce is pending or in progress
- Audit trail of every kill request
- Debugging stalled upgrades ("which processes were not ready?")
"""

import logging
from typing import Any, Dict, Optional, Sequence

from psycopg_pool import AsyncConnectionPool

from core.models import ClusterEvent, FoundationDBCluster, ProcessAddress
from core.models.events import EventType, EventStatus
from repositories import EventRepository

logger = logging.getLogger(__name__)

# Source identifier for events from this coordinator
SOURCE_BOUNCER = "bounce-coordinator"


class EventService:
    """Service for emitting cluster events."""

    def __init__(self, pool: AsyncConnectionPool):
        """
        Initialize event service.

        Args:
            pool: Database connection pool
        """
        self.pool = pool
        self._repo = EventRepository(pool)

    # =========================================================================
    # CORE EMIT METHOD
    # =========================================================================

    async def emit(
        self,
        cluster: FoundationDBCluster,
        event_type: EventType,
        message: str,
        status: EventStatus = EventStatus.NORMAL,
        data: Optional[Dict[str, Any]] = None,
    ) -> Optional[ClusterEvent]:
        """
        Emit an event. Fire-and-forget - logs errors but doesn't raise.

        Args:
            cluster: Cluster the event is about
            event_type: Type of event
            message: Human-readable message
            status: Event status/severity
            data: Additional event data

        Returns:
            Created ClusterEvent or None if emission failed
        """
        try:
            event = ClusterEvent(
                cluster_key=cluster.cluster_key,
                generation=cluster.generation,
                event_type=event_type,
                event_status=status,
                message=message,
                event_data=data or {},
                source_app=SOURCE_BOUNCER,
            )

            created = await self._repo.create(event)

            logger.debug(
                f"Event emitted: {event_type.value} for cluster={cluster.cluster_key}"
            )

            return created

        except Exception as e:
            # Fire-and-forget - log but don't raise
            logger.warning(
                f"Failed to emit event {event_type.value} for cluster "
                f"{cluster.cluster_key}: {e}"
            )
            return None

    # =========================================================================
    # BOUNCE EVENTS
    # =========================================================================

    async def emit_needs_bounce(
        self,
        cluster: FoundationDBCluster,
        minimum_uptime: float,
    ) -> None:
        """Emit NeedsBounce when the cluster is not yet stable enough."""
        await self.emit(
            cluster,
            EventType.NEEDS_BOUNCE,
            "Spec require a bounce of some processes, but the cluster has only "
            f"been up for {minimum_uptime:f} seconds",
            data={
                "minimum_uptime": minimum_uptime,
                "threshold": cluster.get_minimum_uptime_seconds_for_bounce(),
            },
        )

    async def emit_bouncing_processes(
        self,
        cluster: FoundationDBCluster,
        addresses: Sequence[ProcessAddress],
        upgrading: bool,
    ) -> None:
        """Emit BouncingProcesses before the kill request is sent."""
        rendered = [str(a) for a in addresses]
        await self.emit(
            cluster,
            EventType.BOUNCING_PROCESSES,
            f"Bouncing processes: {rendered}",
            data={"addresses": rendered, "upgrading": upgrading},
        )

    async def emit_upgrade_requeued(
        self,
        cluster: FoundationDBCluster,
        message: str,
    ) -> None:
        """Emit UpgradeRequeued when an upgrade is deferred."""
        await self.emit(
            cluster,
            EventType.UPGRADE_REQUEUED,
            message,
            data={"target_version": cluster.spec.version},
        )
