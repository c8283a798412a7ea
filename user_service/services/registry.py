"""Consul service registration over the agent HTTP API."""

import logging
import socket
from typing import Any
from uuid import uuid4

import httpx

from user_service.config import Settings

logger = logging.getLogger(__name__)


class ConsulRegistry:
    """Registers this instance with the local Consul agent and removes it on shutdown."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        self.base_url = settings.consul_url
        self.service_name = settings.service_name
        self.service_id = f"{self.service_name}-{socket.gethostname()}-{uuid4()}"
        self.timeout = 5.0
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self._transport
        )

    def service_definition(self) -> dict[str, Any]:
        """Build the agent service registration payload."""
        address = self.settings.host
        if address in ("0.0.0.0", "::"):  # noqa: S104
            address = "localhost"
        return {
            "Name": self.service_name,
            "ID": self.service_id,
            "Address": address,
            "Port": self.settings.port,
            "Tags": [self.service_name, "api"],
            "Check": {
                "HTTP": f"http://{address}:{self.settings.port}/health",
                "Interval": "10s",
                "Timeout": "5s",
                "DeregisterCriticalServiceAfter": "30s",
            },
        }

    async def register(self) -> bool:
        """Register the service. Failures are logged and reported, not raised."""
        try:
            async with self._client() as client:
                response = await client.put(
                    "/v1/agent/service/register", json=self.service_definition()
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(
                f"Failed to register service {self.service_id} with Consul at {self.base_url}: {e}"
            )
            return False

        logger.info(f"Service {self.service_id} registered with Consul at {self.base_url}")
        return True

    async def deregister(self) -> bool:
        """Deregister the service so shutdown can continue even if Consul is down."""
        try:
            async with self._client() as client:
                response = await client.put(f"/v1/agent/service/deregister/{self.service_id}")
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Failed to deregister service {self.service_id} from Consul: {e}")
            return False

        logger.info(f"Service {self.service_id} deregistered from Consul")
        return True
