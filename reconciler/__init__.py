# ============================================================================
# RECONCILER MODULE
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Core - Reconciliation entry points
# PURPOSE: Export the bounce processes reconciler
# CREATED: 18 OCT 2026
# ============================================================================
"""
Reconciler Module

Usage:
    from reconciler import BounceProcesses

    reconciler = BounceProcesses.from_pool(pool, http_admin_client_factory())
    signal = await reconciler.reconcile(cluster)
"""

from .bounce_processes import BounceProcesses, RECONCILER_NAME

__all__ = [
    "BounceProcesses",
    "RECONCILER_NAME",
]
