# ============================================================================
# BOUNCE PROCESSES RECONCILER TESTS
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Tests - Full pipeline
# PURPOSE: Verify end-to-end tick decisions with fake collaborators
# CREATED: 18 OCT 2026
# ============================================================================
"""
Bounce Processes Reconciler Tests

Drives BounceProcesses.reconcile with:
- FakeAdminClient: canned status, records kill requests
- FakeLockClient: in-memory lock + pending-upgrade set, records lock state
- MagicMock EventService / ClusterStatusRepository

Covers:
1. Automation disabled, nothing to do
2. Config sync and stability holds (no kills)
3. Plain bounce with and without locks
4. Upgrade coordination across instances
5. Failures: status fetch, kill, lock contention, bad version, timeout
6. Lock released on every exit path

Run with:
    pytest tests/test_bounce_processes.py -v
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Dict, List, Optional

import pytest
from unittest.mock import AsyncMock, MagicMock

from core.contracts import DecisionKind, ProcessGroupConditionType
from core.errors import AdminClientError, LockNotAcquired, MissingAddressError
from core.interfaces import AdminClient, LockClient
from core.models import (
    AutomationOptions,
    ClusterSpec,
    ClusterStatus,
    DatabaseStatus,
    FdbVersion,
    FoundationDBCluster,
    LockOptions,
    ProcessCounts,
    ProcessGroupCondition,
    ProcessGroupStatus,
)
from reconciler import BounceProcesses


# ============================================================================
# FAKES
# ============================================================================

class FakeAdminClient(AdminClient):
    """Admin client returning a fixed status and recording kills."""

    def __init__(self, status, status_error=None, kill_error=None, kill_delay=0.0):
        self.status = status
        self.status_error = status_error
        self.kill_error = kill_error
        self.kill_delay = kill_delay
        self.kills: List[List[str]] = []
        self.closed = False

    async def get_status(self) -> DatabaseStatus:
        if self.status_error:
            raise self.status_error
        return self.status

    async def kill_processes(self, addresses) -> None:
        if self.kill_delay:
            await asyncio.sleep(self.kill_delay)
        if self.kill_error:
            raise self.kill_error
        self.kills.append([str(a) for a in addresses])

    async def close(self) -> None:
        self.closed = True


class FakeLockClient(LockClient):
    """Lock client with an in-memory pending set and observable lock state."""

    def __init__(self, acquirable=True):
        self.acquirable = acquirable
        self.held = False
        self.reasons: List[str] = []
        self.releases = 0
        self.pending: Dict[str, Dict[str, bool]] = {}
        self.clear_calls = 0

    async def add_pending_upgrades(self, version: FdbVersion, process_ids: List[str]) -> None:
        entries = self.pending.setdefault(str(version), {})
        for process_id in process_ids:
            entries[process_id] = True

    async def get_pending_upgrades(self, version: FdbVersion) -> Dict[str, bool]:
        return dict(self.pending.get(str(version), {}))

    async def clear_pending_upgrades(self) -> None:
        self.clear_calls += 1
        self.pending.clear()

    def acquire_lock(self, reason: str):
        @asynccontextmanager
        async def _lock():
            self.reasons.append(reason)
            if not self.acquirable:
                yield False
                return
            self.held = True
            try:
                yield True
            finally:
                self.held = False
                self.releases += 1
        return _lock()


# ============================================================================
# HELPERS
# ============================================================================

CMD = ProcessGroupConditionType.INCORRECT_COMMAND_LINE


def _make_cluster(
    pg_ids=("s1", "s2", "s3"),
    version="7.1.26",
    running_version="7.1.26",
    conditions=None,
    use_locks=False,
    threshold=60,
    kill_processes=True,
):
    """Cluster whose groups all carry IncorrectCommandLine (plus extra conditions)."""
    conditions = conditions or {}
    groups = []
    for pg_id in pg_ids:
        kinds = [CMD, *conditions.get(pg_id, [])]
        groups.append(ProcessGroupStatus(
            process_group_id=pg_id,
            conditions=[ProcessGroupCondition(type=k, timestamp="2026-10-18T09:00:00Z") for k in kinds],
        ))
    return FoundationDBCluster(
        name="sample",
        namespace="prod",
        generation=3,
        spec=ClusterSpec(
            version=version,
            process_counts=ProcessCounts(storage=len(pg_ids)),
            automation_options=AutomationOptions(kill_processes=kill_processes),
            lock_options=LockOptions(disable_locks=not use_locks),
            minimum_uptime_seconds_for_bounce=threshold,
        ),
        status=ClusterStatus(running_version=running_version, process_groups=groups),
    )


def _make_status(pg_ids=("s1", "s2", "s3"), version="7.1.26", uptime=1000.0, available=True):
    processes = {
        f"p{i}": {
            "address": f"10.0.0.{i + 1}:4500:tls",
            "version": version,
            "locality": {"instance_id": pg_id},
            "uptime_seconds": uptime,
        }
        for i, pg_id in enumerate(pg_ids)
    }
    return DatabaseStatus.model_validate({
        "client": {"database_status": {"available": available}},
        "cluster": {"processes": processes},
    })


def _build_reconciler(admin, lock_client=None, timeout=5.0, admin_factory=None):
    event_service = MagicMock()
    event_service.emit_needs_bounce = AsyncMock()
    event_service.emit_bouncing_processes = AsyncMock()
    event_service.emit_upgrade_requeued = AsyncMock()
    status_repo = MagicMock()
    status_repo.update_needs_bounce = AsyncMock()
    lock_client = lock_client or FakeLockClient()

    reconciler = BounceProcesses(
        admin_client_factory=admin_factory or (lambda cluster: admin),
        lock_client_factory=lambda cluster: lock_client,
        event_service=event_service,
        status_repo=status_repo,
        tick_timeout_seconds=timeout,
    )
    return reconciler, event_service, status_repo, lock_client


# ============================================================================
# NOTHING TO DO
# ============================================================================

class TestNoop:
    """Ticks that end without a kill and without a retry."""

    def test_kill_processes_disabled(self):
        admin = FakeAdminClient(_make_status())
        factory = MagicMock(return_value=admin)
        reconciler, _, _, _ = _build_reconciler(admin)
        reconciler._admin_client_factory = factory

        signal = asyncio.run(reconciler.reconcile(_make_cluster(kill_processes=False)))

        assert signal.kind is DecisionKind.NOOP
        factory.assert_not_called()

    def test_no_group_needs_restart(self):
        cluster = _make_cluster()
        for group in cluster.status.process_groups:
            group.conditions = []
        admin = FakeAdminClient(_make_status())
        reconciler, _, _, _ = _build_reconciler(admin)

        signal = asyncio.run(reconciler.reconcile(cluster))

        assert signal.kind is DecisionKind.NOOP
        assert admin.kills == []
        assert admin.closed is True


# ============================================================================
# HOLDS
# ============================================================================

class TestHolds:
    """Ticks held by config sync or stability."""

    def test_config_map_sync_holds_batch(self):
        cluster = _make_cluster(
            conditions={"s2": [ProcessGroupConditionType.INCORRECT_CONFIG_MAP]},
        )
        admin = FakeAdminClient(_make_status())
        reconciler, _, _, _ = _build_reconciler(admin)

        signal = asyncio.run(reconciler.reconcile(cluster))

        assert signal.kind is DecisionKind.SOFT_RETRY
        assert signal.message == "Waiting for config map to sync to all pods"
        assert admin.kills == []

    def test_young_cluster_delayed(self):
        cluster = _make_cluster(threshold=60)
        admin = FakeAdminClient(_make_status(uptime=5))
        reconciler, event_service, status_repo, _ = _build_reconciler(admin)

        signal = asyncio.run(reconciler.reconcile(cluster))

        assert signal.kind is DecisionKind.DELAYED_RETRY
        assert signal.delay_seconds == 55
        assert cluster.status.needs_bounce_generation == 3
        event_service.emit_needs_bounce.assert_awaited_once()
        status_repo.update_needs_bounce.assert_awaited_once_with(cluster)
        assert admin.kills == []

    def test_hold_is_idempotent(self):
        cluster = _make_cluster(
            conditions={"s1": [ProcessGroupConditionType.INCORRECT_CONFIG_MAP]},
        )
        admin = FakeAdminClient(_make_status())
        reconciler, _, _, _ = _build_reconciler(admin)

        first = asyncio.run(reconciler.reconcile(cluster))
        second = asyncio.run(reconciler.reconcile(cluster))

        assert first == second
        assert admin.kills == []


# ============================================================================
# BOUNCE
# ============================================================================

class TestBounce:
    """Ticks that issue a kill."""

    def test_bounce_without_locks(self):
        admin = FakeAdminClient(_make_status())
        reconciler, event_service, _, lock_client = _build_reconciler(admin)

        signal = asyncio.run(reconciler.reconcile(_make_cluster()))

        assert signal.kind is DecisionKind.NOOP
        assert admin.kills == [["10.0.0.1:4500:tls", "10.0.0.2:4500:tls", "10.0.0.3:4500:tls"]]
        assert lock_client.reasons == []
        event_service.emit_bouncing_processes.assert_awaited_once()
        assert admin.closed is True

    def test_bounce_with_lock(self):
        admin = FakeAdminClient(_make_status())
        reconciler, _, _, lock_client = _build_reconciler(admin)

        signal = asyncio.run(reconciler.reconcile(_make_cluster(use_locks=True)))

        assert signal.kind is DecisionKind.NOOP
        assert len(admin.kills) == 1
        assert lock_client.reasons == [
            "bouncing processes: ['10.0.0.1:4500:tls', '10.0.0.2:4500:tls', '10.0.0.3:4500:tls']"
        ]
        assert lock_client.releases == 1
        assert lock_client.held is False

    def test_missing_address_fails_closed(self):
        admin = FakeAdminClient(_make_status(pg_ids=("s1",)))
        reconciler, _, _, _ = _build_reconciler(admin)

        signal = asyncio.run(reconciler.reconcile(_make_cluster()))

        assert signal.kind is DecisionKind.ERROR
        assert isinstance(signal.error, MissingAddressError)
        assert signal.error.process_group_ids == ["s2", "s3"]
        assert admin.kills == []


# ============================================================================
# UPGRADES
# ============================================================================

class TestUpgrade:
    """Ticks during a version change."""

    def test_upgrade_without_locks_bounces_and_requeues(self):
        cluster = _make_cluster(running_version="7.1.25")
        admin = FakeAdminClient(_make_status(version="7.1.25"))
        reconciler, _, _, lock_client = _build_reconciler(admin)

        signal = asyncio.run(reconciler.reconcile(cluster))

        assert signal.kind is DecisionKind.SOFT_RETRY
        assert signal.message == "fetch latest status after upgrade"
        assert len(admin.kills) == 1
        assert lock_client.pending == {}

    def test_upgrade_all_ready(self):
        cluster = _make_cluster(running_version="7.1.25", use_locks=True)
        admin = FakeAdminClient(_make_status(version="7.1.25"))
        reconciler, _, _, lock_client = _build_reconciler(admin)

        signal = asyncio.run(reconciler.reconcile(cluster))

        assert signal.kind is DecisionKind.SOFT_RETRY
        assert signal.message == "fetch latest status after upgrade"
        assert len(admin.kills[0]) == 3
        assert lock_client.clear_calls == 1
        assert lock_client.pending == {}
        assert lock_client.held is False

    def test_upgrade_waits_for_peer_instance(self):
        # s4 runs in the cluster but belongs to another controller instance
        cluster = _make_cluster(running_version="7.1.25", use_locks=True)
        admin = FakeAdminClient(_make_status(pg_ids=("s1", "s2", "s3", "s4"), version="7.1.25"))
        reconciler, event_service, _, lock_client = _build_reconciler(admin)

        signal = asyncio.run(reconciler.reconcile(cluster))

        assert signal.kind is DecisionKind.SOFT_RETRY
        assert signal.message == "Waiting for processes to be updated: [s4]"
        assert admin.kills == []
        assert lock_client.clear_calls == 0
        assert set(lock_client.pending["7.1.26"]) == {"s1", "s2", "s3"}
        assert lock_client.releases == 1
        assert lock_client.held is False
        event_service.emit_upgrade_requeued.assert_awaited_once_with(cluster, signal.message)

    def test_peer_registration_unblocks_upgrade(self):
        cluster = _make_cluster(running_version="7.1.25", use_locks=True)
        admin = FakeAdminClient(_make_status(pg_ids=("s1", "s2", "s3", "s4"), version="7.1.25"))
        lock_client = FakeLockClient()
        reconciler, _, _, _ = _build_reconciler(admin, lock_client)

        first = asyncio.run(reconciler.reconcile(cluster))
        asyncio.run(lock_client.add_pending_upgrades(FdbVersion(7, 1, 26), ["s4"]))
        second = asyncio.run(reconciler.reconcile(cluster))

        assert first.kind is DecisionKind.SOFT_RETRY
        assert second.message == "fetch latest status after upgrade"
        assert len(admin.kills) == 1
        assert len(admin.kills[0]) == 4
        assert lock_client.clear_calls == 1

    def test_unavailable_database_defers(self):
        cluster = _make_cluster(running_version="7.1.25", use_locks=True)
        admin = FakeAdminClient(_make_status(version="7.1.25", available=False))
        reconciler, _, _, lock_client = _build_reconciler(admin)

        signal = asyncio.run(reconciler.reconcile(cluster))

        assert signal.message == "Deferring upgrade until database is available"
        assert admin.kills == []
        assert lock_client.held is False


# ============================================================================
# FAILURES
# ============================================================================

class TestFailures:
    """Ticks that end in ERROR."""

    def test_status_fetch_failure(self):
        admin = FakeAdminClient(None, status_error=AdminClientError("unreachable"))
        reconciler, _, _, _ = _build_reconciler(admin)

        signal = asyncio.run(reconciler.reconcile(_make_cluster()))

        assert signal.kind is DecisionKind.ERROR
        assert isinstance(signal.error, AdminClientError)
        assert admin.closed is True

    def test_admin_client_factory_failure(self):
        def _factory(cluster):
            raise RuntimeError("cannot build admin client")

        reconciler, event_service, _, lock_client = _build_reconciler(None, admin_factory=_factory)

        signal = asyncio.run(reconciler.reconcile(_make_cluster(use_locks=True)))

        assert signal.kind is DecisionKind.ERROR
        assert isinstance(signal.error, RuntimeError)
        assert lock_client.reasons == []
        event_service.emit_bouncing_processes.assert_not_awaited()

    def test_admin_client_close_failure(self):
        admin = FakeAdminClient(_make_status())
        admin.close = AsyncMock(side_effect=AdminClientError("close failed"))
        reconciler, _, _, _ = _build_reconciler(admin)

        signal = asyncio.run(reconciler.reconcile(_make_cluster()))

        assert signal.kind is DecisionKind.ERROR
        assert isinstance(signal.error, AdminClientError)

    def test_kill_failure_releases_lock(self):
        admin = FakeAdminClient(_make_status(), kill_error=AdminClientError("rejected", 500))
        reconciler, _, _, lock_client = _build_reconciler(admin)

        signal = asyncio.run(reconciler.reconcile(_make_cluster(use_locks=True)))

        assert signal.kind is DecisionKind.ERROR
        assert lock_client.releases == 1
        assert lock_client.held is False

    def test_lock_held_elsewhere(self):
        admin = FakeAdminClient(_make_status())
        reconciler, _, _, _ = _build_reconciler(admin, FakeLockClient(acquirable=False))

        signal = asyncio.run(reconciler.reconcile(_make_cluster(use_locks=True)))

        assert signal.kind is DecisionKind.ERROR
        assert isinstance(signal.error, LockNotAcquired)
        assert admin.kills == []

    def test_invalid_target_version(self):
        cluster = _make_cluster(version="not-a-version")
        admin = FakeAdminClient(_make_status())
        reconciler, _, _, _ = _build_reconciler(admin)

        signal = asyncio.run(reconciler.reconcile(cluster))

        assert signal.kind is DecisionKind.ERROR
        assert isinstance(signal.error, ValueError)
        assert admin.kills == []

    def test_timeout_releases_lock(self):
        admin = FakeAdminClient(_make_status(), kill_delay=5.0)
        reconciler, _, _, lock_client = _build_reconciler(admin, timeout=0.05)

        signal = asyncio.run(reconciler.reconcile(_make_cluster(use_locks=True)))

        assert signal.kind is DecisionKind.ERROR
        assert "timed out" in signal.message
        assert lock_client.held is False
        assert lock_client.releases == 1
        assert admin.closed is True

    def test_cancellation_propagates_after_release(self):
        admin = FakeAdminClient(_make_status(), kill_delay=5.0)
        reconciler, _, _, lock_client = _build_reconciler(admin)

        async def _run():
            task = asyncio.ensure_future(reconciler.reconcile(_make_cluster(use_locks=True)))
            while not lock_client.held:
                await asyncio.sleep(0.01)
            task.cancel()
            await task

        with pytest.raises(asyncio.CancelledError):
            asyncio.run(_run())
        assert lock_client.held is False
        assert lock_client.releases == 1
