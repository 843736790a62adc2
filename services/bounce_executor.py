# ============================================================================
# BOUNCE EXECUTOR
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core - Final pipeline stage
# PURPOSE: Issue the kill request for a resolved batch
# CREATED: 18 OCT 2026
# ============================================================================
"""
Bounce Executor

Sends exactly one kill request per tick. Kills are best effort: a
successful call does not mean every process restarted, so after an
upgrade the loop is asked to come back with fresh status.
"""

import logging
from typing import Optional, Sequence

from core.interfaces import AdminClient
from core.logging import log_checkpoint
from core.models import DecisionSignal, FoundationDBCluster, ProcessAddress
from services.event_service import EventService

logger = logging.getLogger(__name__)


class BounceExecutor:
    """Issues restarts for a batch of addresses."""

    def __init__(self, event_service: EventService):
        self._event_service = event_service

    async def execute(
        self,
        cluster: FoundationDBCluster,
        admin_client: AdminClient,
        addresses: Sequence[ProcessAddress],
        upgrading: bool,
    ) -> Optional[DecisionSignal]:
        """
        Kill the processes at these addresses.

        Args:
            cluster: Cluster being bounced
            admin_client: Client bound to the cluster
            addresses: Non-empty batch to restart
            upgrading: Whether this bounce completes a version change

        Returns:
            None when done, SOFT_RETRY after an upgrade, ERROR if the kill failed
        """
        rendered = [str(a) for a in addresses]
        logger.info(f"Bouncing processes for {cluster.cluster_key}: {rendered}")

        await self._event_service.emit_bouncing_processes(cluster, addresses, upgrading)
        log_checkpoint(
            "bounce_issued",
            {"cluster": cluster.cluster_key, "count": len(rendered), "upgrading": upgrading},
        )

        try:
            await admin_client.kill_processes(addresses)
        except Exception as e:
            logger.error(f"Kill request failed for {cluster.cluster_key}: {e}")
            return DecisionSignal.failed(e)

        if upgrading:
            return DecisionSignal.soft("fetch latest status after upgrade")

        return None


__all__ = ["BounceExecutor"]
