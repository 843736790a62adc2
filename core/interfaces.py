# ============================================================================
# COLLABORATOR INTERFACES
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Foundation - Contracts for external collaborators
# PURPOSE: What the bounce pipeline needs from the outside world
# CREATED: 18 OCT 2026
# ============================================================================
"""
Collaborator Interfaces

The pipeline depends only on these contracts:

- AdminClient: live status + kill/restart requests
- LockClient:  cluster lock + shared pending-upgrade set

Concrete implementations live in clients/ (HTTP) and services/ (PostgreSQL).
Every method may block on the network; callers bound them with a timeout.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Dict, List, Sequence

from core.models.address import ProcessAddress
from core.models.database_status import DatabaseStatus
from core.models.version import FdbVersion


class AdminClient(ABC):
    """Management-plane client for one cluster."""

    @abstractmethod
    async def get_status(self) -> DatabaseStatus:
        """
        Fetch a live status snapshot.

        Raises:
            AdminClientError: If the status cannot be fetched or parsed
        """
        pass

    @abstractmethod
    async def kill_processes(self, addresses: Sequence[ProcessAddress]) -> None:
        """
        Ask the processes at these addresses to restart.

        Best effort: a successful return does not mean every process
        received the signal.

        Raises:
            AdminClientError: If the request was rejected or not sent
        """
        pass

    async def close(self) -> None:
        """Release client resources."""

    async def __aenter__(self) -> "AdminClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


class LockClient(ABC):
    """Cluster-scoped lock and pending-upgrade store."""

    @abstractmethod
    async def add_pending_upgrades(self, version: FdbVersion, process_ids: List[str]) -> None:
        """Register processes for an upgrade (all-or-nothing, idempotent)."""
        pass

    @abstractmethod
    async def get_pending_upgrades(self, version: FdbVersion) -> Dict[str, bool]:
        """Return process id -> True for every registered process."""
        pass

    @abstractmethod
    async def clear_pending_upgrades(self) -> None:
        """Remove every pending upgrade for the cluster (all-or-nothing)."""
        pass

    @abstractmethod
    def acquire_lock(self, reason: str) -> AbstractAsyncContextManager:
        """
        Context manager for the cluster lock.

        Yields True if the lock is held for the duration of the block,
        False if another holder has it. Release happens on every exit path.

        Usage:
            async with lock_client.acquire_lock("bouncing processes") as acquired:
                if acquired:
                    ...
        """
        pass


__all__ = ["AdminClient", "LockClient"]
