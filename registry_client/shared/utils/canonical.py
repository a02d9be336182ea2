"""
Canonical JSON encoding for cache key material.

Logically equal inputs must encode to the same text regardless of the
insertion order of their mappings, so keys are sorted and separators are
fixed. Pydantic models are dumped by alias with None fields dropped, which
makes SchemaInfo(schema=...) and {"schema": ...} encode identically.
"""

import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel
from pydantic_core import PydanticSerializationError

from registry_client.domain.exceptions import KeyEncodingError


def _to_plain(value: Any) -> Any:
    """Convert pydantic models to plain JSON data; leave everything else alone."""
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, exclude_none=True, mode="json")
    return value


def _default(value: Any) -> Any:
    """json.dumps hook for models nested inside plain mappings."""
    if isinstance(value, BaseModel):
        return _to_plain(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=repr)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def canonical_json(value: Any) -> str:
    """
    Encode value as deterministic compact JSON.

    Args:
        value: JSON-compatible data, a pydantic model, or a mapping containing models

    Returns:
        Canonical JSON text (sorted keys, no whitespace)

    Raises:
        KeyEncodingError: value is circular or holds non-JSON data
    """
    try:
        plain = _to_plain(value)
        if isinstance(plain, Mapping) and not isinstance(plain, dict):
            plain = dict(plain)
        return json.dumps(
            plain,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
            default=_default,
        )
    except (PydanticSerializationError, TypeError, ValueError, RecursionError) as e:
        raise KeyEncodingError(str(e)) from e
