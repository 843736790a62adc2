# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Foundation - Core enums shared by every stage
# PURPOSE: Condition kinds, decision kinds and locality keys
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: ProcessGroupConditionType, ProcessClass, DecisionKind, LOCALITY_INSTANCE_ID
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the bounce coordinator.

These enums cross every boundary:
- Cluster snapshot (process group conditions)
- Database status (locality keys)
- Reconciliation loop (decision kinds)
"""

from enum import Enum


# Locality key carrying the process group identifier in database status
LOCALITY_INSTANCE_ID = "instance_id"


# ============================================================================
# PROCESS GROUP CONDITIONS
# ============================================================================

class ProcessGroupConditionType(str, Enum):
    """
    Timestamped condition flags a process group can carry.

    Conditions are queried by kind. Adding a new kind does not require
    changes to the bounce pipeline; it only matters if a filter names it.
    """
    MISSING_PROCESSES = "MissingProcesses"
    INCORRECT_CONFIG_MAP = "IncorrectConfigMap"
    INCORRECT_COMMAND_LINE = "IncorrectCommandLine"
    INCORRECT_POD_SPEC = "IncorrectPodSpec"
    SIDECAR_UNREACHABLE = "SidecarUnreachable"
    POD_PENDING = "PodPending"
    POD_FAILING = "PodFailing"
    PROCESS_IS_MARKED_AS_EXCLUDED = "ProcessIsMarkedAsExcluded"


class ProcessClass(str, Enum):
    """Process roles a process group can run."""
    STORAGE = "storage"
    LOG = "log"
    STATELESS = "stateless"
    TRANSACTION = "transaction"
    COORDINATOR = "coordinator"
    CLUSTER_CONTROLLER = "cluster_controller"


# ============================================================================
# DECISION KINDS
# ============================================================================

class DecisionKind(str, Enum):
    """
    Outcome of one reconciliation tick.

    Severity order (highest first):
        ERROR > DELAYED_RETRY > SOFT_RETRY > NOOP
    """
    NOOP = "noop"                    # Nothing to do
    SOFT_RETRY = "soft_retry"        # Expected wait, retry on next trigger
    DELAYED_RETRY = "delayed_retry"  # Deterministic wait before retrying
    ERROR = "error"                  # Report-worthy failure

    @property
    def severity(self) -> int:
        """Numeric severity, higher wins."""
        return _SEVERITY[self]

    def is_retry(self) -> bool:
        """Check if the loop should invoke the step again."""
        return self is not DecisionKind.NOOP


_SEVERITY = {
    DecisionKind.NOOP: 0,
    DecisionKind.SOFT_RETRY: 1,
    DecisionKind.DELAYED_RETRY: 2,
    DecisionKind.ERROR: 3,
}


__all__ = [
    "LOCALITY_INSTANCE_ID",
    "ProcessGroupConditionType",
    "ProcessClass",
    "DecisionKind",
]
