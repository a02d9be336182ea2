"""Thin schema registry REST transport.

All HTTP calls use httpx.AsyncClient so they do not block the event loop.
Non-success responses become TransportError (status + decoded body);
connection-level failures and timeouts become NetworkError. No retries:
the caller decides what to do with a failure.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

import httpx

from registry_client.core.constants import (
    DEFAULT_TIMEOUT_SECONDS,
    FORWARD_HEADER,
    REGISTRY_CONTENT_TYPE,
)
from registry_client.domain.enums import HttpMethod
from registry_client.domain.exceptions import NetworkError, TransportError
from registry_client.domain.models import RegistryModel
from registry_client.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)


def _encode_body(body: Any) -> Any:
    """Convert models and enums to JSON-ready data; pass everything else through."""
    if isinstance(body, RegistryModel):
        return body.to_wire()
    if isinstance(body, Enum):
        return body.value
    return body


def _decode_body(resp: httpx.Response) -> Any:
    """Decode a JSON response body; empty bodies are None, non-JSON stays text."""
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text


class RestService:
    """HTTP collaborator for SchemaRegistryClient (implements TransportProtocol)."""

    def __init__(
        self,
        base_urls: list[str],
        is_forward: bool = False,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Create the transport.

        Args:
            base_urls: Registry URLs; the first one is used.
            is_forward: Send X-Forward: true (request forwarding to the leader).
            timeout: Request timeout in seconds.
            http_client: Optional injected client (tests, shared pools); not closed by aclose().
        """
        if not base_urls:
            raise ValueError("base_urls must contain at least one URL")
        self.base_urls = list(base_urls)
        self._owns_http = http_client is None
        self._http = (
            http_client
            if http_client is not None
            else httpx.AsyncClient(base_url=self.base_urls[0], timeout=timeout)
        )
        if http_client is not None and not str(self._http.base_url):
            self._http.base_url = self.base_urls[0]
        self._http.headers["Content-Type"] = REGISTRY_CONTENT_TYPE
        if is_forward:
            self._http.headers[FORWARD_HEADER] = "true"

    @traced("schema_registry.request")
    async def send_http_request(
        self,
        path: str,
        method: HttpMethod | str,
        body: Any = None,
    ) -> Any:
        """Send one request to the registry and return the decoded JSON body.

        Args:
            path: Path relative to the base URL, query string included.
            method: GET, POST, PUT or DELETE.
            body: Optional JSON body (pydantic models are dumped by alias).

        Returns:
            Decoded response body, or None when the response is empty.

        Raises:
            TransportError: Registry answered with a 4xx/5xx status.
            NetworkError: Registry unreachable or request timed out.
        """
        method_value = method.value if isinstance(method, HttpMethod) else method.upper()
        payload = _encode_body(body)
        try:
            if payload is None:
                resp = await self._http.request(method_value, path)
            else:
                resp = await self._http.request(method_value, path, json=payload)
        except httpx.RequestError as e:
            logger.warning("Registry unreachable: %s %s (%s)", method_value, path, e)
            raise NetworkError(str(e) or type(e).__name__) from e
        if resp.is_error:
            decoded = _decode_body(resp)
            logger.warning(
                "Registry error: %s %s -> %s", method_value, path, resp.status_code
            )
            raise TransportError(resp.status_code, decoded)
        return _decode_body(resp)

    def set_headers(self, headers: dict[str, str]) -> None:
        """Merge headers into every subsequent request."""
        self._http.headers.update(headers)

    def set_auth(
        self, basic_auth: str | None = None, bearer_token: str | None = None
    ) -> None:
        """Set the Authorization header; a bearer token wins over basic auth.

        Args:
            basic_auth: Base64-encoded "user:password".
            bearer_token: OAuth bearer token.
        """
        if basic_auth:
            self._http.headers["Authorization"] = f"Basic {basic_auth}"
        if bearer_token:
            self._http.headers["Authorization"] = f"Bearer {bearer_token}"

    def set_timeout(self, timeout: float) -> None:
        """Set the request timeout in seconds."""
        self._http.timeout = httpx.Timeout(timeout)

    def set_base_url(self, base_url: str) -> None:
        self._http.base_url = base_url

    @property
    def headers(self) -> httpx.Headers:
        return self._http.headers

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()
