# ============================================================================
# ELIGIBILITY FILTER
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core - First pipeline stage
# PURPOSE: Select the process addresses that may be restarted this tick
# CREATED: 18 OCT 2026
# ============================================================================
"""
Eligibility Filter

Given the process group registry and the live address map, decide which
addresses can be bounced right now, or why none can.

Rules, in order:
1. Groups must match the restart filter (see get_filter_conditions) and
   not be skipped or marked for removal
2. Groups missing from status for longer than the grace window are
   ignored for this tick (a partitioned node must not block the rest)
3. Eligible groups without an address fail the whole batch (ERROR)
4. Groups still waiting for their config map hold the batch (SOFT_RETRY)
5. During an upgrade every desired process must be in the batch, so the
   desired process counts must be set

When several rules object, the most severe signal wins; ties go to the
earlier rule.

Pure with respect to cluster state; only logs.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

from core.contracts import DecisionKind, ProcessGroupConditionType
from core.errors import MissingAddressError, ProcessCountsError
from core.logging import ComponentType, get_logger, log_context
from core.models import (
    AddressMap,
    DecisionSignal,
    FoundationDBCluster,
    ProcessAddress,
    filter_by_conditions,
    find_process_group_by_id,
)

logger = get_logger(__name__, ComponentType.SERVICE)


def get_filter_conditions(
    cluster: FoundationDBCluster,
) -> Dict[ProcessGroupConditionType, bool]:
    """
    Conditions that select process groups needing a restart.

    Groups whose sidecar is unreachable never receive config updates and
    groups with a wrong pod spec are replaced rather than restarted, so
    both are excluded.
    """
    return {
        ProcessGroupConditionType.INCORRECT_COMMAND_LINE: True,
        ProcessGroupConditionType.INCORRECT_POD_SPEC: False,
        ProcessGroupConditionType.SIDECAR_UNREACHABLE: False,
    }


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def get_processes_ready_for_restart(
    cluster: FoundationDBCluster,
    address_map: AddressMap,
    now: Optional[datetime] = None,
    filter_conditions: Optional[Dict[ProcessGroupConditionType, bool]] = None,
) -> Tuple[List[ProcessAddress], Optional[DecisionSignal]]:
    """
    Resolve the addresses that can be restarted.

    Args:
        cluster: Cluster with its process group registry and policy
        address_map: Process group id -> live addresses
        now: Current time (defaults to utc now)
        filter_conditions: Restart predicate (defaults to get_filter_conditions)

    Returns:
        (addresses, None) when the batch is ready, ([], signal) otherwise.
        An empty address list with no signal means nothing needs a restart.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    now = _as_utc(now)
    if filter_conditions is None:
        filter_conditions = get_filter_conditions(cluster)

    process_groups = cluster.status.process_groups
    candidates = filter_by_conditions(process_groups, filter_conditions, ignore_removed=True)
    grace = timedelta(seconds=cluster.get_ignore_missing_processes_seconds())

    addresses: List[ProcessAddress] = []
    missing_address: List[str] = []
    all_synced = True

    for process_group_id in candidates:
        process_group = find_process_group_by_id(process_groups, process_group_id)
        if cluster.skip_process_group(process_group):
            continue

        with log_context(process_group_id=process_group_id):
            # Status updates stop for partitioned processes; don't wait on them forever
            missing_since = process_group.get_condition_time(ProcessGroupConditionType.MISSING_PROCESSES)
            if missing_since is not None and _as_utc(missing_since) + grace < now:
                logger.info(
                    f"Ignoring process group with missing processes "
                    f"since {missing_since.isoformat()}"
                )
                continue

            group_addresses = address_map.get(process_group_id)
            if not group_addresses:
                missing_address.append(process_group_id)
                continue

            addresses.extend(group_addresses)

            if process_group.has_condition(ProcessGroupConditionType.INCORRECT_CONFIG_MAP):
                all_synced = False
                logger.info("Waiting for dynamic config update")

    missing_signal = None
    if missing_address:
        missing_signal = DecisionSignal.failed(MissingAddressError(missing_address))

    sync_signal = None
    if not all_synced:
        sync_signal = DecisionSignal.soft("Waiting for config map to sync to all pods")

    signal = DecisionSignal.most_severe(
        missing_signal,
        sync_signal,
        _check_upgrade_batch(cluster, len(addresses)),
    )
    if signal.kind is not DecisionKind.NOOP:
        return [], signal

    return addresses, None


def _check_upgrade_batch(
    cluster: FoundationDBCluster,
    ready: int,
) -> Optional[DecisionSignal]:
    """Upgrades restart every process at once, so all of them must be ready."""
    if not cluster.is_being_upgraded():
        return None

    expected = cluster.spec.process_counts.total()
    if expected == 0:
        return DecisionSignal.failed(ProcessCountsError(
            f"process_counts must be set to upgrade to {cluster.spec.version}"
        ))
    if expected != ready:
        return DecisionSignal.soft(
            f"expected {expected} processes, got {ready} processes ready to restart"
        )
    return None


__all__ = ["get_filter_conditions", "get_processes_ready_for_restart"]
