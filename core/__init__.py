# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core module initialization
# PURPOSE: Export core contracts, models and errors
# LAST_REVIEWED: 18 OCT 2026
# ============================================================================

from core.contracts import DecisionKind, ProcessGroupConditionType, ProcessClass
from core.errors import (
    BounceError,
    MissingAddressError,
    LockNotAcquired,
    UpgradeResolutionError,
    AdminClientError,
    VersionParseError,
)
from core.models import (
    DecisionSignal,
    FoundationDBCluster,
    DatabaseStatus,
    ProcessAddress,
    FdbVersion,
)

__all__ = [
    # Enums
    "DecisionKind",
    "ProcessGroupConditionType",
    "ProcessClass",
    # Errors
    "BounceError",
    "MissingAddressError",
    "LockNotAcquired",
    "UpgradeResolutionError",
    "AdminClientError",
    "VersionParseError",
    # Models
    "DecisionSignal",
    "FoundationDBCluster",
    "DatabaseStatus",
    "ProcessAddress",
    "FdbVersion",
]
