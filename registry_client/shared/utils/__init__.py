"""Shared utilities: canonical encoding."""

from registry_client.shared.utils.canonical import canonical_json

__all__ = ["canonical_json"]
