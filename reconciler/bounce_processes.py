# ============================================================================
# BOUNCE PROCESSES RECONCILER
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core - Reconciliation entry point
# PURPOSE: Restart processes whose configuration changed, safely
# CREATED: 18 OCT 2026
# ============================================================================
"""
Bounce Processes Reconciler

One invocation per reconciliation tick:

    eligibility -> stability -> [register upgrade] -> lock
        -> [upgrade readiness] -> kill

Every outcome is a single DecisionSignal:
    NOOP           nothing to do, or the bounce was issued
    SOFT_RETRY     come back soon (waiting on config sync / upgrade peers)
    DELAYED_RETRY  come back after delay_seconds (cluster stabilizing)
    ERROR          something failed; the outer loop retries

The cluster lock is held from acquisition through the kill request and
released on every exit path, including timeout and cancellation.
"""

import asyncio
from typing import Callable, Optional

from psycopg_pool import AsyncConnectionPool

from core.config import get_defaults
from core.contracts import DecisionKind
from core.errors import LockNotAcquired
from core.interfaces import AdminClient, LockClient
from core.logging import ComponentType, get_logger, log_context
from core.models import DecisionSignal, FdbVersion, FoundationDBCluster
from repositories import ClusterStatusRepository
from services.bounce_executor import BounceExecutor
from services.eligibility import get_processes_ready_for_restart
from services.event_service import EventService
from services.lock_client import PostgresLockClient
from services.stability import StabilityGate
from services.upgrade_coordinator import UpgradeCoordinator
from services.uptime import get_minimum_uptime_and_address_map

logger = get_logger(__name__, ComponentType.RECONCILER)

RECONCILER_NAME = "bounceProcesses"

AdminClientFactory = Callable[[FoundationDBCluster], AdminClient]
LockClientFactory = Callable[[FoundationDBCluster], LockClient]


class BounceProcesses:
    """Reconciler that bounces processes needing a restart."""

    def __init__(
        self,
        admin_client_factory: AdminClientFactory,
        lock_client_factory: LockClientFactory,
        event_service: EventService,
        status_repo: ClusterStatusRepository,
        tick_timeout_seconds: Optional[float] = None,
        max_listed_processes: Optional[int] = None,
        use_recovery_state: Optional[bool] = None,
    ):
        """
        Initialize reconciler.

        Args:
            admin_client_factory: Opens an AdminClient for a cluster
            lock_client_factory: Builds a LockClient bound to a cluster
            event_service: Operator-visible event sink
            status_repo: Persists cluster status markers
            tick_timeout_seconds: Timeout for one whole tick
            max_listed_processes: Cap on ids listed in requeue messages
            use_recovery_state: Use recovery state for uptime when supported
        """
        self._admin_client_factory = admin_client_factory
        self._lock_client_factory = lock_client_factory
        self._event_service = event_service
        self._stability_gate = StabilityGate(event_service, status_repo)
        self._executor = BounceExecutor(event_service)

        if tick_timeout_seconds is None:
            tick_timeout_seconds = get_defaults().timeouts.tick_timeout_seconds
        self.tick_timeout_seconds = tick_timeout_seconds
        self.max_listed_processes = max_listed_processes
        self.use_recovery_state = use_recovery_state

    @classmethod
    def from_pool(
        cls,
        pool: AsyncConnectionPool,
        admin_client_factory: AdminClientFactory,
        **kwargs,
    ) -> "BounceProcesses":
        """Wire the PostgreSQL-backed collaborators from one pool."""
        return cls(
            admin_client_factory=admin_client_factory,
            lock_client_factory=lambda cluster: PostgresLockClient(pool, cluster),
            event_service=EventService(pool),
            status_repo=ClusterStatusRepository(pool),
            **kwargs,
        )

    # =========================================================================
    # ENTRY POINT
    # =========================================================================

    async def reconcile(self, cluster: FoundationDBCluster) -> DecisionSignal:
        """
        Run one bounce tick for a cluster.

        Never raises for operational failures; they come back as ERROR.
        Cancellation propagates after the lock is released.
        """
        with log_context(
            cluster=cluster.name,
            namespace=cluster.namespace,
            reconciler=RECONCILER_NAME,
        ):
            try:
                signal = await asyncio.wait_for(
                    self._reconcile(cluster),
                    timeout=self.tick_timeout_seconds,
                )
            except asyncio.TimeoutError as e:
                signal = DecisionSignal.failed(
                    e, f"bounce tick timed out after {self.tick_timeout_seconds}s"
                )

            if signal.is_error:
                logger.error(f"Bounce tick failed: {signal}")
            elif signal.kind is DecisionKind.NOOP:
                logger.debug("Bounce tick complete")
            else:
                logger.info(f"Bounce tick requeued: {signal}")

            return signal

    async def _reconcile(self, cluster: FoundationDBCluster) -> DecisionSignal:
        if not cluster.spec.automation_options.kill_processes:
            logger.debug("Process kills disabled by automation options")
            return DecisionSignal.noop()

        # Failures opening or closing the admin client are operational too
        try:
            async with self._admin_client_factory(cluster) as admin_client:
                return await self._bounce(cluster, admin_client)
        except Exception as e:
            return DecisionSignal.failed(e)

    # =========================================================================
    # PIPELINE
    # =========================================================================

    async def _bounce(
        self,
        cluster: FoundationDBCluster,
        admin_client: AdminClient,
    ) -> DecisionSignal:
        try:
            status = await admin_client.get_status()
            minimum_uptime, address_map = get_minimum_uptime_and_address_map(
                cluster, status, self.use_recovery_state
            )
        except Exception as e:
            return DecisionSignal.failed(e)

        addresses, signal = get_processes_ready_for_restart(cluster, address_map)
        if signal is not None:
            return signal
        if not addresses:
            return DecisionSignal.noop()

        signal = await self._stability_gate.check(cluster, minimum_uptime)
        if signal is not None:
            return signal

        try:
            version = FdbVersion.parse(cluster.spec.version)
        except ValueError as e:
            return DecisionSignal.failed(e)

        upgrading = cluster.is_being_upgraded()

        if not cluster.should_use_locks():
            return await self._execute(cluster, admin_client, addresses, upgrading)

        lock_client = self._lock_client_factory(cluster)
        coordinator = UpgradeCoordinator(lock_client, self.max_listed_processes)

        # Announce before locking so peers can see this instance is ready
        if upgrading:
            try:
                await coordinator.register(cluster, version)
            except Exception as e:
                return DecisionSignal.failed(e)

        reason = f"bouncing processes: {[str(a) for a in addresses]}"
        try:
            async with lock_client.acquire_lock(reason) as acquired:
                if not acquired:
                    return DecisionSignal.failed(LockNotAcquired(cluster.cluster_key, reason))

                if upgrading:
                    addresses, signal = await coordinator.resolve(cluster, status, version)
                    if signal is not None:
                        if signal.kind is DecisionKind.SOFT_RETRY:
                            await self._event_service.emit_upgrade_requeued(cluster, signal.message)
                        return signal

                return await self._execute(cluster, admin_client, addresses, upgrading)
        except Exception as e:
            return DecisionSignal.failed(e)

    async def _execute(
        self,
        cluster: FoundationDBCluster,
        admin_client: AdminClient,
        addresses,
        upgrading: bool,
    ) -> DecisionSignal:
        signal = await self._executor.execute(cluster, admin_client, addresses, upgrading)
        return signal or DecisionSignal.noop()


__all__ = ["BounceProcesses", "RECONCILER_NAME"]
