"""Domain layer: registry records, enums, and exceptions.

No dependencies on the cache or the transport.
"""

from registry_client.domain.enums import Compatibility, HttpMethod, SchemaType
from registry_client.domain.exceptions import (
    KeyEncodingError,
    NetworkError,
    SchemaRegistryException,
    TransportError,
)
from registry_client.domain.models import (
    Metadata,
    Reference,
    Rule,
    RuleSet,
    SchemaInfo,
    SchemaMetadata,
    ServerConfig,
)

__all__ = [
    # Enums
    "Compatibility",
    "HttpMethod",
    "SchemaType",
    # Exceptions
    "KeyEncodingError",
    "NetworkError",
    "SchemaRegistryException",
    "TransportError",
    # Models
    "Metadata",
    "Reference",
    "Rule",
    "RuleSet",
    "SchemaInfo",
    "SchemaMetadata",
    "ServerConfig",
]
