# ============================================================================
# CLUSTER MODEL
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core model - Desired and observed cluster state
# PURPOSE: Cluster spec/status consumed by the bounce pipeline
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: FoundationDBCluster, ClusterSpec, ClusterStatus, ProcessCounts,
#          AutomationOptions, LockOptions
# DEPENDENCIES: pydantic
# ============================================================================
"""
Cluster Model

FoundationDBCluster pairs the desired state (spec) with the observed state
(status). The status, including its process groups, is refreshed wholesale
before every tick; the bounce pipeline only writes the needs-bounce marker.

Key concept:
- spec.version            = version the cluster should run
- status.running_version  = version the cluster currently runs
- they differ             = an upgrade is in progress
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from core.config import get_defaults
from core.contracts import ProcessGroupConditionType
from core.models.process_group import ProcessGroupStatus


class ProcessCounts(BaseModel):
    """
    Desired number of process groups per class.

    Supplied as policy; the pipeline never derives it. Required (non-zero
    total) while the cluster is being upgraded.
    """
    storage: int = Field(default=0, ge=0)
    log: int = Field(default=0, ge=0)
    stateless: int = Field(default=0, ge=0)
    transaction: int = Field(default=0, ge=0)
    coordinator: int = Field(default=0, ge=0)
    cluster_controller: int = Field(default=0, ge=0)

    def total(self) -> int:
        return (
            self.storage + self.log + self.stateless + self.transaction
            + self.coordinator + self.cluster_controller
        )


class AutomationOptions(BaseModel):
    """Switches for automated actions."""
    kill_processes: bool = Field(
        default=True,
        description="Allow the operator to bounce processes"
    )


class LockOptions(BaseModel):
    """Cluster-wide coordination lock settings."""
    disable_locks: Optional[bool] = Field(
        default=None,
        description="Explicit override; unset means locks follow the topology"
    )


class ClusterSpec(BaseModel):
    """Desired cluster state."""
    version: str = Field(..., description="Target database version")
    process_counts: ProcessCounts = Field(default_factory=ProcessCounts)
    automation_options: AutomationOptions = Field(default_factory=AutomationOptions)
    lock_options: LockOptions = Field(default_factory=LockOptions)
    region_count: int = Field(default=1, ge=1)
    minimum_uptime_seconds_for_bounce: Optional[int] = Field(default=None, ge=0)
    ignore_missing_processes_seconds: Optional[int] = Field(default=None, ge=0)
    ignore_during_restart: List[str] = Field(
        default_factory=list,
        description="Process group ids never bounced by the operator"
    )


class ClusterStatus(BaseModel):
    """Observed cluster state."""
    running_version: str = Field(default="")
    process_groups: List[ProcessGroupStatus] = Field(default_factory=list)
    needs_bounce_generation: Optional[int] = Field(
        default=None,
        description="Generation that requested a bounce the cluster was not stable enough for"
    )


class FoundationDBCluster(BaseModel):
    """A managed database cluster."""
    name: str = Field(..., min_length=1, max_length=128)
    namespace: str = Field(default="default", max_length=128)
    generation: int = Field(default=1, ge=0)
    spec: ClusterSpec
    status: ClusterStatus = Field(default_factory=ClusterStatus)

    @property
    def cluster_key(self) -> str:
        """Stable identifier used for locks and persisted state."""
        return f"{self.namespace}/{self.name}"

    def is_being_upgraded(self) -> bool:
        """Check if the running version differs from the target version."""
        return (
            self.status.running_version != ""
            and self.status.running_version != self.spec.version
        )

    def get_running_version(self) -> str:
        """Running version, falling back to the target for new clusters."""
        return self.status.running_version or self.spec.version

    def should_use_locks(self) -> bool:
        """Locks default on for multi-region clusters."""
        if self.spec.lock_options.disable_locks is not None:
            return not self.spec.lock_options.disable_locks
        return self.spec.region_count > 1

    def skip_process_group(self, process_group: Optional[ProcessGroupStatus]) -> bool:
        """Check if a process group must never be bounced right now."""
        if process_group is None:
            return True
        if process_group.process_group_id in self.spec.ignore_during_restart:
            return True
        return process_group.has_condition(ProcessGroupConditionType.POD_PENDING)

    def get_minimum_uptime_seconds_for_bounce(self) -> int:
        if self.spec.minimum_uptime_seconds_for_bounce is not None:
            return self.spec.minimum_uptime_seconds_for_bounce
        return get_defaults().bounce.minimum_uptime_seconds

    def get_ignore_missing_processes_seconds(self) -> int:
        if self.spec.ignore_missing_processes_seconds is not None:
            return self.spec.ignore_missing_processes_seconds
        return get_defaults().bounce.ignore_missing_processes_seconds

    def process_group_ids(self) -> List[str]:
        return [pg.process_group_id for pg in self.status.process_groups]


__all__ = [
    "ProcessCounts",
    "AutomationOptions",
    "LockOptions",
    "ClusterSpec",
    "ClusterStatus",
    "FoundationDBCluster",
]
