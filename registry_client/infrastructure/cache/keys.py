"""Cache key types and builders. Single place for key shape per domain.

Each key is a frozen dataclass with a fixed field order, so equal inputs
hash and compare equal. Structured inputs (schema info, metadata) are
folded into canonical JSON text before they become key material. Every
key carries ``subject`` so subject invalidation can match on it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from registry_client.shared.utils.canonical import canonical_json


@dataclass(frozen=True)
class SubjectKey:
    """Key for the latest registered version of a subject."""

    subject: str


@dataclass(frozen=True)
class SubjectSchemaKey:
    """Key for lookups by (subject, schema); normalize changes server-side matching."""

    subject: str
    schema: str
    normalize: bool = False


@dataclass(frozen=True)
class SubjectIdKey:
    subject: str
    id: int


@dataclass(frozen=True)
class SubjectVersionKey:
    """Key for a specific version; deleted decides whether soft-deleted versions are visible."""

    subject: str
    version: int
    deleted: bool = False


@dataclass(frozen=True)
class SubjectMetadataKey:
    subject: str
    metadata: str
    deleted: bool = False


CacheKey = (
    SubjectKey | SubjectSchemaKey | SubjectIdKey | SubjectVersionKey | SubjectMetadataKey
)


def _validate_subject(subject: str) -> None:
    """Raise ValueError if subject is not a non-empty string.

    Args:
        subject: Subject name used in a cache key.

    Raises:
        ValueError: If subject is empty or not a string.
    """
    if not isinstance(subject, str) or not subject:
        raise ValueError(f"Cache key subject must be a non-empty string, got {subject!r}")


def latest_key(subject: str) -> SubjectKey:
    """Cache key for the latest schema of a subject."""
    _validate_subject(subject)
    return SubjectKey(subject)


def schema_key(subject: str, schema: Any, normalize: bool = False) -> SubjectSchemaKey:
    """Cache key for (subject, schema info, normalize).

    Raises:
        KeyEncodingError: schema cannot be canonicalized.
    """
    _validate_subject(subject)
    return SubjectSchemaKey(subject, canonical_json(schema), bool(normalize))


def id_key(subject: str, schema_id: int) -> SubjectIdKey:
    """Cache key for (subject, schema id)."""
    _validate_subject(subject)
    return SubjectIdKey(subject, int(schema_id))


def version_key(subject: str, version: int, deleted: bool = False) -> SubjectVersionKey:
    """Cache key for (subject, version, deleted)."""
    _validate_subject(subject)
    return SubjectVersionKey(subject, int(version), bool(deleted))


def metadata_key(
    subject: str, metadata: Any, deleted: bool = False
) -> SubjectMetadataKey:
    """Cache key for (subject, metadata, deleted).

    Raises:
        KeyEncodingError: metadata cannot be canonicalized (e.g. circular).
    """
    _validate_subject(subject)
    return SubjectMetadataKey(subject, canonical_json(metadata), bool(deleted))
