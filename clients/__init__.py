# ============================================================================
# CLIENTS MODULE
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Infrastructure - External service clients
# PURPOSE: Concrete AdminClient implementations
# CREATED: 18 OCT 2026
# ============================================================================
"""
Clients Module

Usage:
    from clients import HttpAdminClient

    async with HttpAdminClient("http://admin:8080/clusters/default/sample") as client:
        status = await client.get_status()
"""

from .admin_client import HttpAdminClient, http_admin_client_factory

__all__ = [
    "HttpAdminClient",
    "http_admin_client_factory",
]
