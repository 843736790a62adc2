# ============================================================================
# DATABASE STATUS MODEL
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core model - Live status snapshot from the management plane
# PURPOSE: Parse the subset of machine-readable status the pipeline reads
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: DatabaseStatus, ProcessStatus
# DEPENDENCIES: pydantic
# ============================================================================
"""
Database Status Model

Parses the machine-readable status document:

    {
      "client": {"database_status": {"available": true}},
      "cluster": {
        "processes": {
          "<process key>": {
            "address": "10.1.2.3:4500:tls",
            "version": "7.1.25",
            "locality": {"instance_id": "storage-1"},
            "uptime_seconds": 1234.5,
            "excluded": false
          }
        },
        "recovery_state": {"seconds_since_last_recovered": 900.0}
      }
    }

Unknown fields are ignored so newer status documents still parse.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from core.contracts import LOCALITY_INSTANCE_ID
from core.models.address import ProcessAddress


class ProcessStatus(BaseModel):
    """Status of a single running process."""

    address: ProcessAddress
    version: str = Field(default="")
    locality: Dict[str, str] = Field(default_factory=dict)
    uptime_seconds: float = Field(default=0.0, ge=0)
    excluded: bool = Field(default=False)

    model_config = {"extra": "ignore"}

    @field_validator("address", mode="before")
    @classmethod
    def _parse_address(cls, value):
        if isinstance(value, str):
            return ProcessAddress.parse(value)
        return value

    @property
    def process_group_id(self) -> Optional[str]:
        return self.locality.get(LOCALITY_INSTANCE_ID)


class RecoveryState(BaseModel):
    seconds_since_last_recovered: Optional[float] = Field(default=None, ge=0)

    model_config = {"extra": "ignore"}


class ClusterProcesses(BaseModel):
    processes: Dict[str, ProcessStatus] = Field(default_factory=dict)
    recovery_state: Optional[RecoveryState] = None

    model_config = {"extra": "ignore"}


class ClientDatabaseStatus(BaseModel):
    available: bool = Field(default=False)

    model_config = {"extra": "ignore"}


class ClientStatus(BaseModel):
    database_status: ClientDatabaseStatus = Field(default_factory=ClientDatabaseStatus)

    model_config = {"extra": "ignore"}


class DatabaseStatus(BaseModel):
    """Snapshot of live cluster status."""

    client: ClientStatus = Field(default_factory=ClientStatus)
    cluster: ClusterProcesses = Field(default_factory=ClusterProcesses)

    model_config = {"extra": "ignore"}

    @property
    def available(self) -> bool:
        return self.client.database_status.available

    def process_list(self) -> List[ProcessStatus]:
        """Processes in a stable order (sorted by status key)."""
        return [self.cluster.processes[key] for key in sorted(self.cluster.processes)]


__all__ = [
    "ProcessStatus",
    "RecoveryState",
    "ClusterProcesses",
    "ClientDatabaseStatus",
    "ClientStatus",
    "DatabaseStatus",
]
