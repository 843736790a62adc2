#!/usr/bin/env python3
# ============================================================================
# CLI BOUNCE TOOL
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Tool - Run one bounce tick by hand
# PURPOSE: Exercise the pipeline against a cluster definition file
# CREATED: 18 OCT 2026
# ============================================================================
"""
Run one bounce reconciliation tick for a cluster described in YAML.

Usage:
    # Single tick against the configured admin API
    python tools/bounce_cluster.py tools/sample_cluster.yaml

    # Different admin API, JSON logs
    python tools/bounce_cluster.py cluster.yaml --admin-url http://admin:8080 --json-logs

    # Override the tick timeout
    python tools/bounce_cluster.py cluster.yaml --timeout 30

Exit code is 0 for NOOP / SOFT_RETRY / DELAYED_RETRY, 1 for ERROR.

Requires:
    DATABASE_URL (or POSTGRES_*) when the cluster uses locks or events
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

import yaml

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from __version__ import __version__
from clients import http_admin_client_factory
from core.logging import configure_logging
from core.models import DecisionSignal, FoundationDBCluster
from reconciler import BounceProcesses
from repositories import DatabasePool


def load_cluster(path: Path) -> FoundationDBCluster:
    """
    Load a cluster definition from YAML.

    Raises:
        ValueError: If the file is empty or not a mapping
        pydantic.ValidationError: If the definition is invalid
    """
    with open(path) as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")

    return FoundationDBCluster.model_validate(data)


async def run_tick(
    cluster: FoundationDBCluster,
    admin_url: str = None,
    timeout: float = None,
) -> DecisionSignal:
    """Open a pool, reconcile once, close everything."""
    async with DatabasePool(min_size=1, max_size=4) as pool:
        reconciler = BounceProcesses.from_pool(
            pool,
            http_admin_client_factory(admin_url),
            tick_timeout_seconds=timeout,
        )
        return await reconciler.reconcile(cluster)


def main():
    parser = argparse.ArgumentParser(
        description="Run one bounce tick for a cluster definition",
    )
    parser.add_argument("cluster_file", type=Path, help="Cluster definition (YAML)")
    parser.add_argument("--admin-url", help="Admin API root (default: ADMIN_API_URL)")
    parser.add_argument("--timeout", type=float, help="Tick timeout in seconds")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args()

    configure_logging(
        level="DEBUG" if args.verbose else os.getenv("LOG_LEVEL", "INFO"),
        json_output=args.json_logs,
    )

    try:
        cluster = load_cluster(args.cluster_file)
    except Exception as e:
        print(f"Invalid cluster definition: {e}")
        sys.exit(2)

    print(f"Cluster: {cluster.cluster_key} (generation {cluster.generation})")
    print(f"Target version: {cluster.spec.version}")
    print(f"Running version: {cluster.status.running_version or '-'}")

    signal = asyncio.run(run_tick(cluster, args.admin_url, args.timeout))

    print(f"\nDecision: {signal}")
    if signal.is_error:
        sys.exit(1)


if __name__ == "__main__":
    main()
