"""Tests for registry records (aliases, immutability, unknown fields)."""

import pytest
from pydantic import ValidationError

from registry_client.domain.enums import Compatibility
from registry_client.domain.models import (
    Metadata,
    Reference,
    Rule,
    RuleSet,
    SchemaInfo,
    SchemaMetadata,
    ServerConfig,
)


class TestSchemaInfo:
    def test_wire_format_uses_camel_case_and_drops_nulls(self) -> None:
        info = SchemaInfo(
            schema='{"type":"string"}',
            schema_type="AVRO",
            references=[Reference(name="Money", subject="money-value", version=1)],
            rule_set=RuleSet(domain_rules=[Rule(name="checkAmount", kind="CONDITION", on_failure="DLQ")]),
        )
        assert info.to_wire() == {
            "schema": '{"type":"string"}',
            "schemaType": "AVRO",
            "references": [{"name": "Money", "subject": "money-value", "version": 1}],
            "ruleSet": {
                "domainRules": [
                    {"name": "checkAmount", "kind": "CONDITION", "onFailure": "DLQ"}
                ]
            },
        }

    def test_parses_wire_payload(self) -> None:
        info = SchemaInfo.model_validate(
            {"schema": "x", "schemaType": "JSON", "metadata": {"sensitive": ["ssn"]}}
        )
        assert info.schema_str == "x"
        assert info.schema_type == "JSON"
        assert info.metadata == Metadata(sensitive=["ssn"])

    def test_is_frozen(self) -> None:
        info = SchemaInfo(schema="x")
        with pytest.raises(ValidationError):
            info.schema_str = "y"

    def test_unknown_fields_are_kept(self) -> None:
        info = SchemaInfo.model_validate({"schema": "x", "version": 3, "guid": "abc"})
        assert info.version == 3
        assert info.to_wire()["guid"] == "abc"


def test_schema_metadata_requires_id() -> None:
    with pytest.raises(ValidationError):
        SchemaMetadata.model_validate({"schema": "x"})
    meta = SchemaMetadata.model_validate({"id": 7, "subject": "orders", "version": 1})
    assert (meta.id, meta.subject, meta.version) == (7, "orders", 1)


def test_server_config_parses_levels() -> None:
    config = ServerConfig.model_validate(
        {"compatibilityLevel": "BACKWARD_TRANSITIVE", "compatibilityGroup": "app.major"}
    )
    assert config.compatibility_level is Compatibility.BACKWARD_TRANSITIVE
    assert config.compatibility_group == "app.major"
    assert config.to_wire() == {
        "compatibilityLevel": "BACKWARD_TRANSITIVE",
        "compatibilityGroup": "app.major",
    }


def test_compatibility_values() -> None:
    assert Compatibility.values() == [
        "NONE",
        "BACKWARD",
        "FORWARD",
        "FULL",
        "BACKWARD_TRANSITIVE",
        "FORWARD_TRANSITIVE",
        "FULL_TRANSITIVE",
    ]
