"""Cache: bounded stores, key builders, and guarded resolution domains.

Used by SchemaRegistryClient. Key shapes live in keys.py; the LRU store in
store.py; guards and invalidation sweeps in domain_cache.py.
"""

from registry_client.infrastructure.cache.domain_cache import (
    CacheDomain,
    ResolutionDomain,
    SchemaRegistryClientCache,
)
from registry_client.infrastructure.cache.keys import (
    CacheKey,
    SubjectIdKey,
    SubjectKey,
    SubjectMetadataKey,
    SubjectSchemaKey,
    SubjectVersionKey,
    id_key,
    latest_key,
    metadata_key,
    schema_key,
    version_key,
)
from registry_client.infrastructure.cache.store import BoundedStore

__all__ = [
    "BoundedStore",
    "CacheDomain",
    "CacheKey",
    "ResolutionDomain",
    "SchemaRegistryClientCache",
    "SubjectIdKey",
    "SubjectKey",
    "SubjectMetadataKey",
    "SubjectSchemaKey",
    "SubjectVersionKey",
    "id_key",
    "latest_key",
    "metadata_key",
    "schema_key",
    "version_key",
]
