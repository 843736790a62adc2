# ============================================================================
# UPGRADE COORDINATOR TESTS
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Tests - Lock-mediated rolling upgrade
# PURPOSE: Verify registration, readiness checks and clearing
# CREATED: 18 OCT 2026
# ============================================================================
"""
Upgrade Coordinator Tests

Uses an in-memory LockClient so the pending-upgrade set behaves like the
shared store: keyed by version, cleared wholesale.

Run with:
    pytest tests/test_upgrade_coordinator.py -v
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Dict, List

from core.contracts import DecisionKind
from core.errors import UpgradeResolutionError
from core.interfaces import LockClient
from core.models import (
    ClusterSpec,
    ClusterStatus,
    DatabaseStatus,
    FdbVersion,
    FoundationDBCluster,
    ProcessAddress,
    ProcessGroupStatus,
)
from services.upgrade_coordinator import UpgradeCoordinator, format_process_ids


# ============================================================================
# HELPERS
# ============================================================================

TARGET = FdbVersion(7, 1, 26)


class InMemoryLockClient(LockClient):
    """Pending-upgrade store held in a dict, per version."""

    def __init__(self):
        self.pending: Dict[str, Dict[str, bool]] = {}
        self.clear_calls = 0
        self.fail_get = False
        self.fail_clear = False

    async def add_pending_upgrades(self, version: FdbVersion, process_ids: List[str]) -> None:
        entries = self.pending.setdefault(str(version), {})
        for process_id in process_ids:
            entries[process_id] = True

    async def get_pending_upgrades(self, version: FdbVersion) -> Dict[str, bool]:
        if self.fail_get:
            raise ConnectionError("store unreachable")
        return dict(self.pending.get(str(version), {}))

    async def clear_pending_upgrades(self) -> None:
        if self.fail_clear:
            raise ConnectionError("store unreachable")
        self.clear_calls += 1
        self.pending.clear()

    def acquire_lock(self, reason: str):
        @asynccontextmanager
        async def _lock():
            yield True
        return _lock()


def _make_cluster(*pg_ids):
    return FoundationDBCluster(
        name="sample",
        spec=ClusterSpec(version=str(TARGET)),
        status=ClusterStatus(
            running_version="7.1.25",
            process_groups=[ProcessGroupStatus(process_group_id=p) for p in pg_ids],
        ),
    )


def _make_status(versions, available=True):
    """versions: instance id -> running version."""
    processes = {
        f"p{i}": {
            "address": f"10.0.0.{i + 1}:4500:tls",
            "version": version,
            "locality": {"instance_id": pg_id},
            "uptime_seconds": 1000,
        }
        for i, (pg_id, version) in enumerate(versions.items())
    }
    return DatabaseStatus.model_validate({
        "client": {"database_status": {"available": available}},
        "cluster": {"processes": processes},
    })


def _build(max_listed=None):
    lock_client = InMemoryLockClient()
    return UpgradeCoordinator(lock_client, max_listed_processes=max_listed), lock_client


# ============================================================================
# REGISTER
# ============================================================================

class TestRegister:
    """Tests for announcing process groups."""

    def test_registers_every_group(self):
        coordinator, lock_client = _build()
        cluster = _make_cluster("storage-1", "storage-2")

        asyncio.run(coordinator.register(cluster, TARGET))

        assert lock_client.pending == {"7.1.26": {"storage-1": True, "storage-2": True}}

    def test_register_idempotent(self):
        coordinator, lock_client = _build()
        cluster = _make_cluster("storage-1")

        asyncio.run(coordinator.register(cluster, TARGET))
        asyncio.run(coordinator.register(cluster, TARGET))

        assert lock_client.pending == {"7.1.26": {"storage-1": True}}


# ============================================================================
# RESOLVE
# ============================================================================

class TestResolve:
    """Tests for readiness checks."""

    def test_three_of_four_pending_waits(self):
        coordinator, lock_client = _build()
        asyncio.run(lock_client.add_pending_upgrades(TARGET, ["s1", "s2", "s3"]))
        status = _make_status({"s1": "7.1.25", "s2": "7.1.25", "s3": "7.1.25", "s4": "7.1.25"})

        addresses, signal = asyncio.run(
            coordinator.resolve(_make_cluster("s1", "s2", "s3", "s4"), status, TARGET)
        )

        assert addresses == []
        assert signal.kind is DecisionKind.SOFT_RETRY
        assert signal.message == "Waiting for processes to be updated: [s4]"
        assert lock_client.clear_calls == 0
        assert len(lock_client.pending["7.1.26"]) == 3

    def test_all_pending_returns_addresses_and_clears_once(self):
        coordinator, lock_client = _build()
        asyncio.run(lock_client.add_pending_upgrades(TARGET, ["s1", "s2"]))
        status = _make_status({"s1": "7.1.25", "s2": "7.1.25"})

        addresses, signal = asyncio.run(
            coordinator.resolve(_make_cluster("s1", "s2"), status, TARGET)
        )

        assert signal is None
        assert addresses == [
            ProcessAddress.parse("10.0.0.1:4500:tls"),
            ProcessAddress.parse("10.0.0.2:4500:tls"),
        ]
        assert lock_client.clear_calls == 1
        assert lock_client.pending == {}

    def test_process_without_instance_id_waits(self):
        coordinator, lock_client = _build()
        asyncio.run(lock_client.add_pending_upgrades(TARGET, ["s1", "s2"]))
        status = DatabaseStatus.model_validate({
            "client": {"database_status": {"available": True}},
            "cluster": {"processes": {
                "p0": {"address": "10.0.0.1:4500", "version": "7.1.25", "locality": {"instance_id": "s1"}},
                "p1": {"address": "10.0.0.2:4500", "version": "7.1.25", "locality": {"instance_id": "s2"}},
                "p2": {"address": "10.0.0.3:4500", "version": "7.1.25", "locality": {}},
            }},
        })

        addresses, signal = asyncio.run(
            coordinator.resolve(_make_cluster("s1", "s2"), status, TARGET)
        )

        assert addresses == []
        assert signal.kind is DecisionKind.SOFT_RETRY
        assert signal.message == "Waiting for processes to be updated: [10.0.0.3:4500]"
        assert lock_client.clear_calls == 0
        assert lock_client.pending == {"7.1.26": {"s1": True, "s2": True}}

    def test_processes_on_target_version_not_required(self):
        coordinator, lock_client = _build()
        asyncio.run(lock_client.add_pending_upgrades(TARGET, ["s1"]))
        status = _make_status({"s1": "7.1.25", "s2": "7.1.26"})

        addresses, signal = asyncio.run(
            coordinator.resolve(_make_cluster("s1", "s2"), status, TARGET)
        )

        assert signal is None
        assert addresses == [ProcessAddress.parse("10.0.0.1:4500:tls")]

    def test_unavailable_database_defers_without_touching_state(self):
        coordinator, lock_client = _build()
        asyncio.run(lock_client.add_pending_upgrades(TARGET, ["s1"]))
        status = _make_status({"s1": "7.1.25"}, available=False)

        addresses, signal = asyncio.run(coordinator.resolve(_make_cluster("s1"), status, TARGET))

        assert addresses == []
        assert signal.kind is DecisionKind.SOFT_RETRY
        assert signal.message == "Deferring upgrade until database is available"
        assert lock_client.clear_calls == 0
        assert lock_client.pending == {"7.1.26": {"s1": True}}

    def test_new_version_starts_empty(self):
        coordinator, lock_client = _build()
        asyncio.run(lock_client.add_pending_upgrades(FdbVersion(7, 1, 25), ["s1"]))
        status = _make_status({"s1": "7.1.24"})

        _, signal = asyncio.run(coordinator.resolve(_make_cluster("s1"), status, TARGET))

        assert signal.kind is DecisionKind.SOFT_RETRY
        assert "s1" in signal.message

    def test_empty_resolution_is_error(self):
        coordinator, lock_client = _build()
        status = _make_status({"s1": "7.1.26"})

        addresses, signal = asyncio.run(coordinator.resolve(_make_cluster("s1"), status, TARGET))

        assert addresses == []
        assert signal.kind is DecisionKind.ERROR
        assert isinstance(signal.error, UpgradeResolutionError)

    def test_store_read_failure_is_error(self):
        coordinator, lock_client = _build()
        lock_client.fail_get = True

        _, signal = asyncio.run(
            coordinator.resolve(_make_cluster("s1"), _make_status({"s1": "7.1.25"}), TARGET)
        )

        assert signal.is_error
        assert isinstance(signal.error, ConnectionError)

    def test_store_clear_failure_is_error(self):
        coordinator, lock_client = _build()
        asyncio.run(lock_client.add_pending_upgrades(TARGET, ["s1"]))
        lock_client.fail_clear = True

        addresses, signal = asyncio.run(
            coordinator.resolve(_make_cluster("s1"), _make_status({"s1": "7.1.25"}), TARGET)
        )

        assert addresses == []
        assert signal.is_error

    def test_not_ready_list_bounded(self):
        coordinator, _ = _build(max_listed=2)
        status = _make_status({"s1": "7.1.25", "s2": "7.1.25", "s3": "7.1.25"})

        _, signal = asyncio.run(
            coordinator.resolve(_make_cluster("s1", "s2", "s3"), status, TARGET)
        )

        assert signal.message == "Waiting for processes to be updated: [s1 s2] ... and 1 more"


class TestFormatProcessIds:
    """Tests for format_process_ids."""

    def test_under_limit(self):
        assert format_process_ids(["a", "b"], 10) == "[a b]"

    def test_over_limit(self):
        assert format_process_ids(["a", "b", "c", "d"], 3) == "[a b c] ... and 1 more"
