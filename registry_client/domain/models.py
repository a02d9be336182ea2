"""Registry records exchanged with the schema registry.

Models mirror the registry's camelCase wire format through field aliases and
are frozen: a cached SchemaMetadata is shared by every caller that hits it.
Unknown fields returned by newer registries are kept (extra="allow").
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from registry_client.domain.enums import Compatibility


class RegistryModel(BaseModel):
    """Base for registry records: frozen, alias-aware, tolerant of new fields."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON body the registry expects (camelCase, no nulls)."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Reference(RegistryModel):
    """Reference from one schema to a schema registered under another subject."""

    name: str
    subject: str
    version: int


class Metadata(RegistryModel):
    """User-defined schema metadata (tags, properties, sensitive field names)."""

    tags: dict[str, list[str]] | None = None
    properties: dict[str, str] | None = None
    sensitive: list[str] | None = None


class Rule(RegistryModel):
    """Data contract rule (migration or domain rule)."""

    name: str
    doc: str | None = None
    kind: str | None = None
    mode: str | None = None
    type: str | None = None
    tags: list[str] | None = None
    params: dict[str, str] | None = None
    expr: str | None = None
    on_success: str | None = Field(default=None, alias="onSuccess")
    on_failure: str | None = Field(default=None, alias="onFailure")
    disabled: bool | None = None


class RuleSet(RegistryModel):
    migration_rules: list[Rule] | None = Field(default=None, alias="migrationRules")
    domain_rules: list[Rule] | None = Field(default=None, alias="domainRules")


class SchemaInfo(RegistryModel):
    """Schema definition as registered: text, type, references, metadata, rules."""

    schema_str: str | None = Field(default=None, alias="schema")
    schema_type: str | None = Field(default=None, alias="schemaType")
    references: list[Reference] | None = None
    metadata: Metadata | None = None
    rule_set: RuleSet | None = Field(default=None, alias="ruleSet")


class SchemaMetadata(SchemaInfo):
    """SchemaInfo plus its registry identity (global id, subject, version)."""

    id: int
    subject: str | None = None
    version: int | None = None


class ServerConfig(RegistryModel):
    """Subject-level or global registry configuration."""

    alias: str | None = None
    normalize: bool | None = None
    compatibility: Compatibility | None = None
    compatibility_level: Compatibility | None = Field(
        default=None, alias="compatibilityLevel"
    )
    compatibility_group: str | None = Field(default=None, alias="compatibilityGroup")
    default_metadata: Metadata | None = Field(default=None, alias="defaultMetadata")
    override_metadata: Metadata | None = Field(default=None, alias="overrideMetadata")
    default_rule_set: RuleSet | None = Field(default=None, alias="defaultRuleSet")
    override_rule_set: RuleSet | None = Field(default=None, alias="overrideRuleSet")
