"""REST transport: protocol seam and the httpx-based RestService."""

from registry_client.infrastructure.rest.protocol import TransportProtocol
from registry_client.infrastructure.rest.rest_service import RestService

__all__ = ["RestService", "TransportProtocol"]
