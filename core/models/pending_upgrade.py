# ============================================================================
# PENDING UPGRADE MODEL
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core model - Shared upgrade readiness markers
# PURPOSE: Per-process "ready for version X" records shared by controllers
# CREATED: 18 OCT 2026
# ============================================================================
"""
Pending Upgrade Model

One row per (cluster, target version, process id). The set of rows for a
cluster/version is the pending-upgrade set:

- Registered in full when a locked upgrade starts (idempotent)
- Read on every tick while the upgrade is in progress
- Cleared in full once every mismatched process is ready

Rows live in PostgreSQL so that every controller instance sees the same
set; there is no in-process copy.
"""

from datetime import datetime, timezone
from typing import ClassVar, List

from pydantic import BaseModel, Field


class PendingUpgrade(BaseModel):
    """
    A process that has been announced for an upgrade.

    Table: bounce.pending_upgrades
    """

    __sql_table__: ClassVar[str] = "pending_upgrades"
    __sql_schema__: ClassVar[str] = "bounce"
    __sql_primary_key__: ClassVar[List[str]] = ["cluster_key", "version", "process_id"]

    cluster_key: str = Field(..., max_length=256)
    version: str = Field(..., max_length=32, description="Target version string")
    process_id: str = Field(..., max_length=128)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


__all__ = ["PendingUpgrade"]
