# ============================================================================
# STABILITY GATE
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core - Second pipeline stage
# PURPOSE: Hold bounces until the cluster has been up long enough
# CREATED: 18 OCT 2026
# ============================================================================
"""
Stability Gate

A cluster that recovered recently is not bounced again until it has been
up for the configured minimum. The gate returns an explicit delay
(threshold - uptime) so the loop does not poll a stabilizing cluster.

While holding, the gate records a needs-bounce marker on the cluster so
operators and other loops can see a bounce is pending.
"""

import logging
from typing import Optional

from core.config import get_defaults
from core.models import DecisionSignal, FoundationDBCluster
from repositories import ClusterStatusRepository
from services.event_service import EventService

logger = logging.getLogger(__name__)


class StabilityGate:
    """Minimum-uptime gate in front of every bounce."""

    def __init__(
        self,
        event_service: EventService,
        status_repo: ClusterStatusRepository,
        minimum_delay_seconds: Optional[float] = None,
    ):
        """
        Initialize stability gate.

        Args:
            event_service: Sink for the NeedsBounce event
            status_repo: Persists the needs-bounce marker
            minimum_delay_seconds: Floor for the returned delay
        """
        self._event_service = event_service
        self._status_repo = status_repo
        if minimum_delay_seconds is None:
            minimum_delay_seconds = get_defaults().bounce.minimum_delay_seconds
        self.minimum_delay_seconds = minimum_delay_seconds

    def compute_delay(self, minimum_uptime: float, threshold: float) -> Optional[float]:
        """Seconds left until the threshold, or None if already stable."""
        if minimum_uptime >= threshold:
            return None
        return max(threshold - minimum_uptime, self.minimum_delay_seconds)

    async def check(
        self,
        cluster: FoundationDBCluster,
        minimum_uptime: float,
    ) -> Optional[DecisionSignal]:
        """
        Check the cluster has been up long enough to bounce.

        Args:
            cluster: Cluster being reconciled (needs-bounce marker is set on it)
            minimum_uptime: Minimum continuous uptime in seconds

        Returns:
            DELAYED_RETRY signal while holding, None to pass through
        """
        threshold = cluster.get_minimum_uptime_seconds_for_bounce()
        delay = self.compute_delay(minimum_uptime, threshold)
        if delay is None:
            return None

        await self._event_service.emit_needs_bounce(cluster, minimum_uptime)

        cluster.status.needs_bounce_generation = cluster.generation
        try:
            await self._status_repo.update_needs_bounce(cluster)
        except Exception as e:
            # The delay is still correct without the marker
            logger.error(f"Error updating cluster status for {cluster.cluster_key}: {e}")

        return DecisionSignal.delayed(delay, "Cluster needs to stabilize before bouncing")


__all__ = ["StabilityGate"]
