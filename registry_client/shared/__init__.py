"""Shared utilities: telemetry and canonical encoding. No registry logic."""

from registry_client.shared.utils import canonical_json

__all__ = ["canonical_json"]
