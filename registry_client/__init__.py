"""Caching client for a schema registry.

Resolutions (schema -> id, id -> schema, version -> schema, ...) are cached
per client instance with at most one in-flight registry call per key.
"""

from registry_client.domain import (
    Compatibility,
    KeyEncodingError,
    Metadata,
    NetworkError,
    Reference,
    Rule,
    RuleSet,
    SchemaInfo,
    SchemaMetadata,
    SchemaRegistryException,
    SchemaType,
    ServerConfig,
    TransportError,
)
from registry_client.infrastructure.cache import (
    BoundedStore,
    CacheDomain,
    SchemaRegistryClientCache,
)
from registry_client.infrastructure.factory import ClientFactory, create_client
from registry_client.infrastructure.rest import RestService, TransportProtocol
from registry_client.services import SchemaRegistryClient

__all__ = [
    "BoundedStore",
    "CacheDomain",
    "ClientFactory",
    "Compatibility",
    "KeyEncodingError",
    "Metadata",
    "NetworkError",
    "Reference",
    "RestService",
    "Rule",
    "RuleSet",
    "SchemaInfo",
    "SchemaMetadata",
    "SchemaRegistryClient",
    "SchemaRegistryClientCache",
    "SchemaRegistryException",
    "SchemaType",
    "ServerConfig",
    "TransportError",
    "TransportProtocol",
    "create_client",
]
