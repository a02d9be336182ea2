"""Transport protocol (DIP). Implementation: RestService."""

from typing import Any, Protocol

from registry_client.domain.enums import HttpMethod


class TransportProtocol(Protocol):
    """Protocol for the HTTP collaborator the client delegates all I/O to."""

    async def send_http_request(
        self,
        path: str,
        method: HttpMethod | str,
        body: Any = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (None when empty).

        Raises TransportError for non-success statuses and NetworkError when
        the registry cannot be reached.
        """
        ...
