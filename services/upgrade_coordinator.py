# ============================================================================
# UPGRADE COORDINATOR
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core - Lock-mediated rolling upgrade
# PURPOSE: Decide when every process is ready for the target version
# CREATED: 18 OCT 2026
# ============================================================================
"""
Upgrade Coordinator

Several controller instances may manage the same cluster. Before any of
them restarts processes onto a new version, every process must have been
announced in the shared pending-upgrade set.

Per upgrade episode (identified by target version):

    Uninitialized -> Announced   register(): all process group ids added
    Announced     -> Locked      caller holds the cluster lock
    Locked        -> Ready-check resolve(): compare live versions to the set
    Ready-check   -> Cleared     every mismatched process ready: set cleared

Ready-check leaves the set untouched whenever it defers. Cleared is
terminal; the next version change starts a new episode.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from core.config import get_defaults
from core.errors import UpgradeResolutionError
from core.interfaces import LockClient
from core.logging import log_checkpoint
from core.models import (
    DatabaseStatus,
    DecisionSignal,
    FdbVersion,
    FoundationDBCluster,
    ProcessAddress,
)

logger = logging.getLogger(__name__)


def format_process_ids(process_ids: Sequence[str], limit: int) -> str:
    """Render ids for a message, listing at most `limit` of them."""
    shown = list(process_ids[:limit])
    rendered = f"[{' '.join(shown)}]"
    remaining = len(process_ids) - len(shown)
    if remaining > 0:
        rendered += f" ... and {remaining} more"
    return rendered


class UpgradeCoordinator:
    """Tracks upgrade readiness through the shared lock client."""

    def __init__(
        self,
        lock_client: LockClient,
        max_listed_processes: Optional[int] = None,
    ):
        """
        Initialize upgrade coordinator.

        Args:
            lock_client: Lock client bound to the cluster
            max_listed_processes: Cap on ids listed in requeue messages
        """
        self.lock_client = lock_client
        if max_listed_processes is None:
            max_listed_processes = get_defaults().bounce.max_listed_processes
        self.max_listed_processes = max_listed_processes

    async def register(self, cluster: FoundationDBCluster, version: FdbVersion) -> None:
        """
        Announce every known process group for the target version.

        Idempotent and all-or-nothing.
        """
        process_group_ids = cluster.process_group_ids()
        await self.lock_client.add_pending_upgrades(version, process_group_ids)
        logger.debug(
            f"Announced {len(process_group_ids)} process groups for upgrade to {version}"
        )

    async def resolve(
        self,
        cluster: FoundationDBCluster,
        status: DatabaseStatus,
        version: FdbVersion,
    ) -> Tuple[List[ProcessAddress], Optional[DecisionSignal]]:
        """
        Return every address ready for the upgrade, or why not yet.

        Must be called while holding the cluster lock.

        Args:
            cluster: Cluster being upgraded
            status: Live status snapshot
            version: Target version

        Returns:
            (addresses, None) once all mismatched processes are ready and the
            pending set has been cleared; ([], signal) otherwise
        """
        try:
            pending_upgrades = await self.lock_client.get_pending_upgrades(version)
        except Exception as e:
            return [], DecisionSignal.failed(e)

        if not status.available:
            return [], DecisionSignal.soft("Deferring upgrade until database is available")

        target = str(version)
        not_ready: List[str] = []
        addresses: List[ProcessAddress] = []
        for process in status.process_list():
            if process.version == target:
                continue
            process_id = process.process_group_id
            if process_id is None:
                # Never announced, so it can't be ready; name it by address
                logger.info(f"Process {process.address} has no instance_id locality")
                not_ready.append(str(process.address))
                continue
            if pending_upgrades.get(process_id):
                addresses.append(process.address)
            else:
                not_ready.append(process_id)

        if not_ready:
            logger.info(
                f"Deferring upgrade until all processes are ready to be upgraded, "
                f"remaining={not_ready}"
            )
            return [], DecisionSignal.soft(
                "Waiting for processes to be updated: "
                f"{format_process_ids(not_ready, self.max_listed_processes)}"
            )

        try:
            await self.lock_client.clear_pending_upgrades()
        except Exception as e:
            return [], DecisionSignal.failed(e)

        log_checkpoint(
            "pending_upgrades_cleared",
            {"version": target, "cluster": cluster.cluster_key, "ready": len(addresses)},
        )

        if not addresses:
            error = UpgradeResolutionError(
                "unknown error when getting addresses that are ready for upgrade"
            )
            logger.error(
                f"Upgrade resolution for {cluster.cluster_key} to {target} produced "
                f"no addresses and no signal"
            )
            return [], DecisionSignal.failed(error)

        return addresses, None


__all__ = ["UpgradeCoordinator", "format_process_ids"]
