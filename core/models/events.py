# ============================================================================
# CLUSTER EVENT MODEL
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core model - Operator-visible events
# PURPOSE: Audit trail of bounce decisions per cluster
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: ClusterEvent, EventType, EventStatus
# DEPENDENCIES: pydantic, enum
# ============================================================================
"""
Cluster Event Model

ClusterEvent records what the bounce pipeline decided and why, so
operators (and other loops) can see a bounce is pending or in progress
without reading logs.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """Types of events emitted by the bounce pipeline."""

    NEEDS_BOUNCE = "NeedsBounce"
    BOUNCING_PROCESSES = "BouncingProcesses"
    UPGRADE_REQUEUED = "UpgradeRequeued"


class EventStatus(str, Enum):
    """Status/severity of an event."""
    NORMAL = "normal"
    WARNING = "warning"


class ClusterEvent(BaseModel):
    """
    A single event in a cluster's bounce timeline.

    Maps to: bounce.cluster_events table
    """

    # =========================================================================
    # SQL DDL METADATA
    # =========================================================================
    __sql_table__: ClassVar[str] = "cluster_events"
    __sql_schema__: ClassVar[str] = "bounce"
    __sql_primary_key__: ClassVar[List[str]] = ["event_id"]
    __sql_serial_columns__: ClassVar[List[str]] = ["event_id"]
    __sql_indexes__: ClassVar[List[tuple]] = [
        ("idx_cluster_events_cluster", ["cluster_key"]),
        ("idx_cluster_events_cluster_created", ["cluster_key", "created_at"]),
        ("idx_cluster_events_type", ["event_type"]),
    ]

    # Identity
    event_id: Optional[int] = Field(
        default=None,
        description="Auto-increment primary key (SERIAL)"
    )
    cluster_key: str = Field(..., max_length=256)
    generation: Optional[int] = Field(default=None, ge=0)

    # Event details
    event_type: EventType
    event_status: EventStatus = Field(default=EventStatus.NORMAL)
    message: str = Field(default="", max_length=4000)

    # Flexible data payload
    event_data: Dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data (JSONB)"
    )

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source_app: Optional[str] = Field(default=None, max_length=64)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = ["ClusterEvent", "EventType", "EventStatus"]
