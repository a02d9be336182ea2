"""Schema registry client with per-domain guarded caching.

Lookups that resolve to immutable registry facts (schema -> id, id ->
schema, version -> schema, ...) go through SchemaRegistryClientCache: the
first caller for a key performs the transport call while concurrent callers
for that domain wait, then read the populated entry. Listing, compatibility
and configuration calls are passed straight to the transport.

Deletes invalidate the affected cache entries before the transport DELETE
is issued.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from registry_client.core.constants import (
    DEFAULT_CACHE_CAPACITY,
    PATH_COMPATIBILITY_LATEST,
    PATH_COMPATIBILITY_VERSION,
    PATH_GLOBAL_CONFIG,
    PATH_LATEST,
    PATH_METADATA,
    PATH_REGISTER,
    PATH_SUBJECT_COMPATIBILITY,
    PATH_SUBJECT_CONFIG,
    PATH_SUBJECT_DELETE,
    PATH_SUBJECT_LOOKUP,
    PATH_SUBJECTS,
    PATH_VERSION,
    PATH_VERSION_DELETE,
    PATH_VERSION_DELETED,
    PATH_VERSIONS,
)
from registry_client.domain.enums import Compatibility, HttpMethod
from registry_client.domain.exceptions import KeyEncodingError
from registry_client.domain.models import (
    Metadata,
    SchemaInfo,
    SchemaMetadata,
    ServerConfig,
)
from registry_client.infrastructure.cache.domain_cache import SchemaRegistryClientCache
from registry_client.infrastructure.cache.keys import (
    id_key,
    latest_key,
    metadata_key,
    schema_key,
    version_key,
)
from registry_client.infrastructure.rest.protocol import TransportProtocol
from registry_client.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _segment(subject: str) -> str:
    """Percent-encode a subject for use as one path segment."""
    return quote(subject, safe="")


def _flag(value: bool) -> str:
    """Render a boolean query parameter the way the registry expects it."""
    return "true" if value else "false"


def _coerce(model: type[M], value: M | Mapping[str, Any]) -> M:
    """Accept a model instance or a plain mapping; validate the mapping.

    Raises:
        KeyEncodingError: mapping does not describe a valid model.
    """
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except ValidationError as e:
        raise KeyEncodingError(f"invalid {model.__name__}: {e}") from e


def _field_as_int(body: Any, field: str) -> int:
    """Extract an int field from a response body ({"id": 7}) or a bare number."""
    if isinstance(body, Mapping):
        return int(body[field])
    return int(body)


def _as_compatibility(body: Any) -> Compatibility:
    """Parse a compatibility response ({"compatibilityLevel": ...} or a bare string)."""
    if isinstance(body, Mapping):
        body = body.get("compatibilityLevel") or body.get("compatibility")
    return Compatibility(body)


def _as_is_compatible(body: Any) -> bool:
    if isinstance(body, Mapping):
        return bool(body.get("is_compatible"))
    return bool(body)


class SchemaRegistryClient:
    """Caching client for a remote schema registry.

    Each instance owns its own SchemaRegistryClientCache; two clients never
    share cached entries. All network I/O is delegated to the transport.
    """

    def __init__(
        self,
        transport: TransportProtocol,
        cache_capacity: int = DEFAULT_CACHE_CAPACITY,
        cache_max_age: float | None = None,
        *,
        cache: SchemaRegistryClientCache | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            transport: HTTP collaborator (RestService or a test double).
            cache_capacity: Maximum entries per resolution domain.
            cache_max_age: Optional entry lifetime in seconds.
            cache: Optional prebuilt cache (overrides capacity/max age).
        """
        self._transport = transport
        self.cache = cache or SchemaRegistryClientCache(cache_capacity, cache_max_age)

    async def __aenter__(self) -> SchemaRegistryClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Cached resolutions
    # ------------------------------------------------------------------

    async def register(
        self,
        subject: str,
        schema: SchemaInfo | Mapping[str, Any],
        normalize: bool = False,
    ) -> int:
        """Register schema under subject and return its global id."""
        metadata = await self.register_full_response(subject, schema, normalize)
        return metadata.id

    @traced("schema_registry.register")
    async def register_full_response(
        self,
        subject: str,
        schema: SchemaInfo | Mapping[str, Any],
        normalize: bool = False,
    ) -> SchemaMetadata:
        """Register schema under subject and return the registry's full answer.

        Registering an identical (subject, schema, normalize) again is served
        from the cache without contacting the registry.

        Raises:
            TransportError: e.g. 409 incompatible schema, 422 invalid schema.
            NetworkError: registry unreachable.
            KeyEncodingError: schema cannot be validated or canonicalized.
        """
        info = _coerce(SchemaInfo, schema)
        key = schema_key(subject, info, normalize)

        async def fetch() -> SchemaMetadata:
            body = await self._transport.send_http_request(
                PATH_REGISTER.format(subject=_segment(subject), normalize=_flag(normalize)),
                HttpMethod.POST,
                info,
            )
            return SchemaMetadata.model_validate(body)

        return await self.cache.info_to_schema_metadata.resolve(key, fetch)

    @traced("schema_registry.get_by_subject_and_id")
    async def get_by_subject_and_id(self, subject: str, schema_id: int) -> SchemaInfo:
        """Return the schema registered under subject with the given id."""
        key = id_key(subject, schema_id)

        async def fetch() -> SchemaInfo:
            body = await self._transport.send_http_request(
                PATH_VERSION.format(subject=_segment(subject), version=int(schema_id)),
                HttpMethod.GET,
            )
            return SchemaInfo.model_validate(body)

        return await self.cache.id_to_schema_info.resolve(key, fetch)

    @traced("schema_registry.get_id")
    async def get_id(
        self,
        subject: str,
        schema: SchemaInfo | Mapping[str, Any],
        normalize: bool = False,
    ) -> int:
        """Look up the id of an already registered schema (no registration)."""
        info = _coerce(SchemaInfo, schema)
        key = schema_key(subject, info, normalize)

        async def fetch() -> int:
            body = await self._transport.send_http_request(
                PATH_SUBJECT_LOOKUP.format(
                    subject=_segment(subject), normalize=_flag(normalize)
                ),
                HttpMethod.POST,
                info,
            )
            return _field_as_int(body, "id")

        return await self.cache.schema_to_id.resolve(key, fetch)

    @traced("schema_registry.get_latest_schema_metadata")
    async def get_latest_schema_metadata(self, subject: str) -> SchemaMetadata:
        """Return the latest registered version of subject.

        Cached until the subject (or that version) is deleted through this
        client, or the entry ages out when a max age is configured.
        """
        key = latest_key(subject)

        async def fetch() -> SchemaMetadata:
            body = await self._transport.send_http_request(
                PATH_LATEST.format(subject=_segment(subject)),
                HttpMethod.GET,
            )
            return SchemaMetadata.model_validate(body)

        return await self.cache.latest_to_schema_metadata.resolve(key, fetch)

    @traced("schema_registry.get_schema_metadata")
    async def get_schema_metadata(
        self,
        subject: str,
        version: int,
        deleted: bool = False,
    ) -> SchemaMetadata:
        """Return a specific version; deleted=True also sees soft-deleted versions."""
        key = version_key(subject, version, deleted)

        async def fetch() -> SchemaMetadata:
            body = await self._transport.send_http_request(
                PATH_VERSION_DELETED.format(
                    subject=_segment(subject), version=int(version), deleted=_flag(deleted)
                ),
                HttpMethod.GET,
            )
            return SchemaMetadata.model_validate(body)

        return await self.cache.version_to_schema_metadata.resolve(key, fetch)

    @traced("schema_registry.get_latest_with_metadata")
    async def get_latest_with_metadata(
        self,
        subject: str,
        metadata: Metadata | Mapping[str, Any],
        deleted: bool = False,
    ) -> SchemaMetadata:
        """Return the latest version of subject whose metadata matches."""
        wanted = _coerce(Metadata, metadata)
        key = metadata_key(subject, wanted, deleted)

        async def fetch() -> SchemaMetadata:
            body = await self._transport.send_http_request(
                PATH_METADATA.format(subject=_segment(subject), deleted=_flag(deleted)),
                HttpMethod.GET,
                wanted,
            )
            return SchemaMetadata.model_validate(body)

        return await self.cache.metadata_to_schema_metadata.resolve(key, fetch)

    @traced("schema_registry.get_version")
    async def get_version(
        self,
        subject: str,
        schema: SchemaInfo | Mapping[str, Any],
        normalize: bool = False,
    ) -> int:
        """Return the version under which schema is registered in subject."""
        info = _coerce(SchemaInfo, schema)
        key = schema_key(subject, info, normalize)

        async def fetch() -> int:
            body = await self._transport.send_http_request(
                PATH_SUBJECT_LOOKUP.format(
                    subject=_segment(subject), normalize=_flag(normalize)
                ),
                HttpMethod.POST,
                info,
            )
            return _field_as_int(body, "version")

        return await self.cache.schema_to_version.resolve(key, fetch)

    # ------------------------------------------------------------------
    # Deletes (invalidate first, then call the registry)
    # ------------------------------------------------------------------

    @traced("schema_registry.delete_subject")
    async def delete_subject(self, subject: str, permanent: bool = False) -> list[int]:
        """Delete subject (soft by default) and return the deleted versions.

        Every cached entry for subject is dropped from every domain before
        the DELETE is sent.
        """
        await self.cache.invalidate_subject(subject)
        body = await self._transport.send_http_request(
            PATH_SUBJECT_DELETE.format(subject=_segment(subject), permanent=_flag(permanent)),
            HttpMethod.DELETE,
        )
        logger.info("Deleted subject %r (permanent=%s)", subject, permanent)
        return list(body or [])

    @traced("schema_registry.delete_subject_version")
    async def delete_subject_version(
        self,
        subject: str,
        version: int,
        permanent: bool = False,
    ) -> int:
        """Delete one version of subject and return the deleted version number."""
        await self.cache.invalidate_version(subject, version)
        body = await self._transport.send_http_request(
            PATH_VERSION_DELETE.format(
                subject=_segment(subject), version=int(version), permanent=_flag(permanent)
            ),
            HttpMethod.DELETE,
        )
        logger.info(
            "Deleted subject %r version %s (permanent=%s)", subject, version, permanent
        )
        return _field_as_int(body, "version") if body is not None else int(version)

    # ------------------------------------------------------------------
    # Uncached pass-through calls
    # ------------------------------------------------------------------

    async def get_all_versions(self, subject: str) -> list[int]:
        body = await self._transport.send_http_request(
            PATH_VERSIONS.format(subject=_segment(subject)), HttpMethod.GET
        )
        return list(body or [])

    async def get_all_subjects(self) -> list[str]:
        body = await self._transport.send_http_request(PATH_SUBJECTS, HttpMethod.GET)
        return list(body or [])

    async def test_subject_compatibility(
        self, subject: str, schema: SchemaInfo | Mapping[str, Any]
    ) -> bool:
        """Check schema against the latest version of subject."""
        body = await self._transport.send_http_request(
            PATH_COMPATIBILITY_LATEST.format(subject=_segment(subject)),
            HttpMethod.POST,
            _coerce(SchemaInfo, schema),
        )
        return _as_is_compatible(body)

    async def test_compatibility(
        self,
        subject: str,
        version: int,
        schema: SchemaInfo | Mapping[str, Any],
    ) -> bool:
        """Check schema against a specific version of subject."""
        body = await self._transport.send_http_request(
            PATH_COMPATIBILITY_VERSION.format(subject=_segment(subject), version=int(version)),
            HttpMethod.POST,
            _coerce(SchemaInfo, schema),
        )
        return _as_is_compatible(body)

    async def get_compatibility(self, subject: str) -> Compatibility:
        body = await self._transport.send_http_request(
            PATH_SUBJECT_COMPATIBILITY.format(subject=_segment(subject)), HttpMethod.GET
        )
        return _as_compatibility(body)

    async def update_compatibility(
        self, subject: str, update: Compatibility | str
    ) -> Compatibility:
        level = Compatibility(update)
        body = await self._transport.send_http_request(
            PATH_SUBJECT_COMPATIBILITY.format(subject=_segment(subject)),
            HttpMethod.PUT,
            {"compatibility": level.value},
        )
        return _as_compatibility(body)

    async def get_default_compatibility(self) -> Compatibility:
        body = await self._transport.send_http_request(PATH_GLOBAL_CONFIG, HttpMethod.GET)
        return _as_compatibility(body)

    async def update_default_compatibility(
        self, update: Compatibility | str
    ) -> Compatibility:
        level = Compatibility(update)
        body = await self._transport.send_http_request(
            PATH_GLOBAL_CONFIG, HttpMethod.PUT, {"compatibility": level.value}
        )
        return _as_compatibility(body)

    async def get_config(self, subject: str) -> ServerConfig:
        body = await self._transport.send_http_request(
            PATH_SUBJECT_CONFIG.format(subject=_segment(subject)), HttpMethod.GET
        )
        return ServerConfig.model_validate(body)

    async def update_config(
        self, subject: str, update: ServerConfig | Mapping[str, Any]
    ) -> ServerConfig:
        body = await self._transport.send_http_request(
            PATH_SUBJECT_CONFIG.format(subject=_segment(subject)),
            HttpMethod.PUT,
            _coerce(ServerConfig, update),
        )
        return ServerConfig.model_validate(body)

    async def get_global_config(self) -> ServerConfig:
        body = await self._transport.send_http_request(PATH_GLOBAL_CONFIG, HttpMethod.GET)
        return ServerConfig.model_validate(body)

    async def update_global_config(
        self, update: ServerConfig | Mapping[str, Any]
    ) -> ServerConfig:
        body = await self._transport.send_http_request(
            PATH_GLOBAL_CONFIG, HttpMethod.PUT, _coerce(ServerConfig, update)
        )
        return ServerConfig.model_validate(body)

    async def close(self) -> None:
        """Release the transport's connections when it exposes aclose()."""
        aclose = getattr(self._transport, "aclose", None)
        if aclose is not None:
            await aclose()
