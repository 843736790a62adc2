# ============================================================================
# SERVICES MODULE
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core - Business logic layer
# PURPOSE: Pipeline stages and their collaborators
# CREATED: 18 OCT 2026
# ============================================================================
"""
Services Module

Stages of the bounce pipeline plus the services they lean on.

Usage:
    from services import StabilityGate, get_processes_ready_for_restart

    addresses, signal = get_processes_ready_for_restart(cluster, address_map)
"""

from .event_service import EventService
from .eligibility import get_filter_conditions, get_processes_ready_for_restart
from .stability import StabilityGate
from .upgrade_coordinator import UpgradeCoordinator
from .bounce_executor import BounceExecutor
from .lock_client import PostgresLockClient
from .uptime import get_minimum_uptime_and_address_map

__all__ = [
    "EventService",
    "get_filter_conditions",
    "get_processes_ready_for_restart",
    "StabilityGate",
    "UpgradeCoordinator",
    "BounceExecutor",
    "PostgresLockClient",
    "get_minimum_uptime_and_address_map",
]
