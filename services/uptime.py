# ============================================================================
# UPTIME / ADDRESS RESOLVER
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core - Derive bounce inputs from live status
# PURPOSE: Minimum cluster uptime and process group -> address map
# CREATED: 18 OCT 2026
# ============================================================================
"""
Uptime / Address Resolver

Turns a live status snapshot into the two inputs the pipeline needs:

- minimum uptime: how long the least-recently-restarted process has been
  running, or the time since the last recovery when recovery state is
  used and the running version reports it
- address map: process group id (instance_id locality) -> addresses

Excluded processes still contribute addresses but not uptime.
"""

import logging
import math
from typing import Optional, Tuple

from core.config import get_defaults
from core.models import AddressMap, DatabaseStatus, FdbVersion, FoundationDBCluster

logger = logging.getLogger(__name__)


def get_minimum_uptime_and_address_map(
    cluster: FoundationDBCluster,
    status: DatabaseStatus,
    use_recovery_state: Optional[bool] = None,
) -> Tuple[float, AddressMap]:
    """
    Compute minimum uptime and the address map.

    Args:
        cluster: Cluster being reconciled
        status: Live status snapshot
        use_recovery_state: Override for the BOUNCE_USE_RECOVERY_STATE default

    Returns:
        (minimum uptime in seconds, address map)

    Raises:
        VersionParseError: If the running version cannot be parsed
    """
    if use_recovery_state is None:
        use_recovery_state = get_defaults().bounce.use_recovery_state

    running_version = FdbVersion.parse(cluster.get_running_version())
    recovery_state = status.cluster.recovery_state
    use_recovery_state = (
        use_recovery_state
        and running_version.supports_recovery_state()
        and recovery_state is not None
        and recovery_state.seconds_since_last_recovered is not None
    )

    minimum_uptime = math.inf
    if use_recovery_state:
        minimum_uptime = recovery_state.seconds_since_last_recovered

    address_map: AddressMap = {}
    for process in status.process_list():
        process_group_id = process.process_group_id
        if process_group_id is None:
            logger.debug(f"Process {process.address} has no instance_id locality, skipping")
            continue

        address_map.setdefault(process_group_id, []).append(process.address)

        if process.excluded:
            continue

        if not use_recovery_state and process.uptime_seconds < minimum_uptime:
            minimum_uptime = process.uptime_seconds

    return minimum_uptime, address_map
