"""Client factory: wires RestService and SchemaRegistryClient from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from registry_client.infrastructure.rest.rest_service import RestService
from registry_client.services.schema_registry_client import SchemaRegistryClient

if TYPE_CHECKING:
    import httpx

    from registry_client.core.config import Settings


class ClientFactory:
    """Factory for schema registry clients based on configuration."""

    @staticmethod
    def create_rest_service(
        settings: "Settings | None" = None,
        http_client: "httpx.AsyncClient | None" = None,
    ) -> RestService:
        """Create the HTTP transport from settings.

        Args:
            settings: Client settings; if None, uses get_settings().
            http_client: Optional injected httpx client.

        Returns:
            RestService with timeout and auth applied.
        """
        from registry_client.core.config import get_settings

        s = settings or get_settings()
        rest = RestService(
            s.base_urls,
            s.forward,
            timeout=s.request_timeout_seconds,
            http_client=http_client,
        )
        rest.set_auth(
            basic_auth=s.basic_auth.get_secret_value() if s.basic_auth else None,
            bearer_token=s.bearer_token.get_secret_value() if s.bearer_token else None,
        )
        return rest

    @staticmethod
    def create_client(
        settings: "Settings | None" = None,
        http_client: "httpx.AsyncClient | None" = None,
    ) -> SchemaRegistryClient:
        """Create a SchemaRegistryClient with its own cache.

        Args:
            settings: Client settings; if None, uses get_settings().
            http_client: Optional injected httpx client.

        Returns:
            SchemaRegistryClient sized by cache_capacity / cache_max_age_seconds.
        """
        from registry_client.core.config import get_settings

        s = settings or get_settings()
        return SchemaRegistryClient(
            ClientFactory.create_rest_service(s, http_client),
            cache_capacity=s.cache_capacity,
            cache_max_age=s.cache_max_age_seconds,
        )


def create_client(settings: "Settings | None" = None) -> SchemaRegistryClient:
    """Shortcut for ClientFactory.create_client(settings)."""
    return ClientFactory.create_client(settings)
