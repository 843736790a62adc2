# ============================================================================
# MODELS MODULE
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Model exports
# PURPOSE: Central export point for all models
# LAST_REVIEWED: 18 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

Pydantic models for cluster state, live status and persisted records,
plus the DecisionSignal result type.
"""

from core.models.address import ProcessAddress, AddressMap
from core.models.version import FdbVersion
from core.models.process_group import (
    ProcessGroupCondition,
    ProcessGroupStatus,
    filter_by_conditions,
    find_process_group_by_id,
)
from core.models.cluster import (
    FoundationDBCluster,
    ClusterSpec,
    ClusterStatus,
    ProcessCounts,
    AutomationOptions,
    LockOptions,
)
from core.models.database_status import DatabaseStatus, ProcessStatus
from core.models.decision import DecisionSignal
from core.models.events import ClusterEvent, EventType, EventStatus
from core.models.pending_upgrade import PendingUpgrade

__all__ = [
    # Addresses / versions
    "ProcessAddress",
    "AddressMap",
    "FdbVersion",
    # Process groups
    "ProcessGroupCondition",
    "ProcessGroupStatus",
    "filter_by_conditions",
    "find_process_group_by_id",
    # Cluster
    "FoundationDBCluster",
    "ClusterSpec",
    "ClusterStatus",
    "ProcessCounts",
    "AutomationOptions",
    "LockOptions",
    # Live status
    "DatabaseStatus",
    "ProcessStatus",
    # Decisions
    "DecisionSignal",
    # Events
    "ClusterEvent",
    "EventType",
    "EventStatus",
    # Pending upgrades
    "PendingUpgrade",
]
