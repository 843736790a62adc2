# ============================================================================
# PROCESS GROUP MODEL
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core model - Observed cluster members
# PURPOSE: Process groups, their timestamped conditions, condition filters
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: ProcessGroupCondition, ProcessGroupStatus, filter_by_conditions
# DEPENDENCIES: pydantic
# ============================================================================
"""
Process Group Model

A process group is a logical cluster member (one pod, one or more
processes). Its conditions are refreshed wholesale on every tick by the
status updater; the bounce pipeline only reads them.

Conditions are queried by kind:

    pg.get_condition_time(ProcessGroupConditionType.MISSING_PROCESSES)
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from core.contracts import ProcessClass, ProcessGroupConditionType


class ProcessGroupCondition(BaseModel):
    """A condition flag and the time it was first observed."""

    type: ProcessGroupConditionType
    timestamp: datetime


class ProcessGroupStatus(BaseModel):
    """
    Observed state of one process group.

    Lifecycle:
        1. Created by the status updater when the group is provisioned
        2. Conditions added/removed on every status refresh
        3. removal_timestamp set once the group is marked for removal
    """

    process_group_id: str = Field(..., min_length=1, max_length=128)
    process_class: ProcessClass = Field(default=ProcessClass.STORAGE)
    conditions: List[ProcessGroupCondition] = Field(default_factory=list)
    removal_timestamp: Optional[datetime] = Field(
        default=None,
        description="Set when the group is marked for removal"
    )

    @property
    def is_marked_for_removal(self) -> bool:
        return self.removal_timestamp is not None

    def get_condition_time(
        self,
        condition_type: ProcessGroupConditionType,
    ) -> Optional[datetime]:
        """Timestamp of a condition, or None if the group does not carry it."""
        for condition in self.conditions:
            if condition.type == condition_type:
                return condition.timestamp
        return None

    def has_condition(self, condition_type: ProcessGroupConditionType) -> bool:
        return self.get_condition_time(condition_type) is not None

    def matches_conditions(
        self,
        conditions: Dict[ProcessGroupConditionType, bool],
    ) -> bool:
        """
        Check a condition filter.

        Each entry maps a kind to whether the group must (True) or must not
        (False) carry it.
        """
        return all(
            self.has_condition(kind) == required
            for kind, required in conditions.items()
        )


def filter_by_conditions(
    process_groups: Iterable[ProcessGroupStatus],
    conditions: Dict[ProcessGroupConditionType, bool],
    ignore_removed: bool = True,
) -> List[str]:
    """
    Select process group ids matching a condition filter.

    Args:
        process_groups: Groups to filter, order preserved
        conditions: Kind -> required presence
        ignore_removed: Skip groups marked for removal

    Returns:
        Matching process group ids
    """
    result = []
    for process_group in process_groups:
        if ignore_removed and process_group.is_marked_for_removal:
            continue
        if process_group.matches_conditions(conditions):
            result.append(process_group.process_group_id)
    return result


def find_process_group_by_id(
    process_groups: Iterable[ProcessGroupStatus],
    process_group_id: str,
) -> Optional[ProcessGroupStatus]:
    for process_group in process_groups:
        if process_group.process_group_id == process_group_id:
            return process_group
    return None


__all__ = [
    "ProcessGroupCondition",
    "ProcessGroupStatus",
    "filter_by_conditions",
    "find_process_group_by_id",
]
