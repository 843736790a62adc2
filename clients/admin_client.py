# ============================================================================
# ADMIN HTTP CLIENT
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# STATUS: Infrastructure - Async HTTP client for the management plane
# PURPOSE: Fetch live status and send kill requests for one cluster
# CREATED: 18 OCT 2026
# ============================================================================
"""
Admin HTTP Client

Async httpx client against a cluster's management-plane API:

    GET  {base_url}/status   machine-readable status document
    POST {base_url}/kill     {"addresses": ["10.1.2.3:4500:tls", ...]}

Transport failures and non-2xx responses raise AdminClientError; the
pipeline turns them into ERROR signals.
"""

import logging
from typing import Callable, Optional, Sequence

import httpx
from pydantic import ValidationError

from core.config import get_defaults
from core.errors import AdminClientError
from core.interfaces import AdminClient
from core.models import DatabaseStatus, FoundationDBCluster, ProcessAddress

logger = logging.getLogger(__name__)


def _default_timeout() -> httpx.Timeout:
    defaults = get_defaults().admin
    return httpx.Timeout(
        connect=defaults.connect_timeout,
        read=defaults.read_timeout,
        write=defaults.read_timeout,
        pool=defaults.connect_timeout,
    )


class HttpAdminClient(AdminClient):
    """AdminClient for one cluster over HTTP."""

    def __init__(
        self,
        base_url: str,
        timeout: Optional[httpx.Timeout] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout or _default_timeout(),
            transport=transport,
        )

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        url = f"{self._base_url}{path}"
        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"Admin API timeout: {url}: {e}")
            raise AdminClientError(f"timeout calling {url}: {e}") from e
        except httpx.HTTPError as e:
            logger.error(f"Cannot reach admin API at {url}: {e}")
            raise AdminClientError(f"error calling {url}: {e}") from e

        if resp.status_code >= 400:
            logger.error(f"Admin API error {resp.status_code}: {method} {path} -> {resp.text}")
            raise AdminClientError(
                f"{method} {url} returned {resp.status_code}",
                status_code=resp.status_code,
            )
        return resp

    async def get_status(self) -> DatabaseStatus:
        resp = await self._request("GET", "/status")
        try:
            return DatabaseStatus.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise AdminClientError(f"invalid status document: {e}") from e

    async def kill_processes(self, addresses: Sequence[ProcessAddress]) -> None:
        body = {"addresses": [str(a) for a in addresses]}
        await self._request("POST", "/kill", json=body)
        logger.debug(f"Kill request accepted for {len(body['addresses'])} addresses")

    async def close(self) -> None:
        await self._client.aclose()


def http_admin_client_factory(
    base_url: Optional[str] = None,
    timeout: Optional[httpx.Timeout] = None,
) -> Callable[[FoundationDBCluster], HttpAdminClient]:
    """
    Build a factory that opens an HttpAdminClient per cluster.

    Clusters are addressed as {base_url}/clusters/{namespace}/{name}.
    """
    root = (base_url or get_defaults().admin.base_url).rstrip("/")

    def factory(cluster: FoundationDBCluster) -> HttpAdminClient:
        return HttpAdminClient(
            f"{root}/clusters/{cluster.namespace}/{cluster.name}",
            timeout=timeout,
        )

    return factory


__all__ = ["HttpAdminClient", "http_admin_client_factory"]
