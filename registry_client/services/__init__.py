"""Services: the caching schema registry client."""

from registry_client.services.schema_registry_client import SchemaRegistryClient

__all__ = ["SchemaRegistryClient"]
