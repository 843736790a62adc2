# ============================================================================
# ERROR TYPES
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Foundation - Exception hierarchy
# PURPOSE: Typed failures that stages convert into decision signals
# CREATED: 18 OCT 2026
# ============================================================================
"""
Error Types

Every failure inside a tick is one of these. Stages never let them escape
the pipeline; they are wrapped in an ERROR DecisionSignal so the outer
loop can retry on its normal cadence.
"""

from typing import List, Optional


class BounceError(Exception):
    """Base class for bounce coordinator failures."""


class MissingAddressError(BounceError):
    """
    Raised when eligible process groups have no known address.

    Data incompleteness rather than infrastructure failure, but the caller
    handles it the same way.
    """

    def __init__(self, process_group_ids: List[str]):
        self.process_group_ids = list(process_group_ids)
        super().__init__(
            f"could not find address for processes: {self.process_group_ids}"
        )


class LockNotAcquired(BounceError):
    """
    Raised when the cluster lock cannot be acquired.

    Use this when the lock is required and the failure must be reported
    as an error rather than a boolean.
    """

    def __init__(self, cluster_key: str, reason: Optional[str] = None):
        self.cluster_key = cluster_key
        self.reason = reason
        super().__init__(f"Failed to acquire cluster lock for {cluster_key}")


class UpgradeResolutionError(BounceError):
    """Upgrade resolution returned neither addresses nor a signal."""


class ProcessCountsError(BounceError):
    """Desired process counts are unusable for the requested operation."""


class AdminClientError(BounceError):
    """Management-plane request failed (transport or HTTP status)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class VersionParseError(BounceError, ValueError):
    """Version string is not major.minor.patch."""


__all__ = [
    "BounceError",
    "MissingAddressError",
    "LockNotAcquired",
    "UpgradeResolutionError",
    "ProcessCountsError",
    "AdminClientError",
    "VersionParseError",
]
