"""Tests for the validation gate and validators."""

import pytest

from docservice import ConfigurationError, JsonSchemaValidator, ValidationError, Violation
from docservice.core.payload import ModifierExpression, Replacement
from docservice.core.validation import NullValidator, ValidationGate

SCHEMA = {
    "type": "object",
    "properties": {
        "id": {"type": "string"},
        "age": {"type": "integer", "minimum": 0},
        "address": {
            "type": "object",
            "properties": {"city": {"type": "string"}},
            "required": ["city"],
        },
    },
    "required": ["id"],
}


def test_invalid_schema_is_configuration_error():
    with pytest.raises(ConfigurationError, match="Invalid JSON Schema"):
        JsonSchemaValidator({"type": "invalid_type", "properties": {"id": {"type": "string"}}})


def test_valid_record():
    validator = JsonSchemaValidator(SCHEMA)
    assert validator.validate({"id": "123", "age": 25}) == []


def test_missing_required_field():
    validator = JsonSchemaValidator(SCHEMA)

    assert validator.validate({}) == [
        Violation(field="id", kind="required", message="'id' is a required property")
    ]


def test_wrong_type_and_minimum():
    validator = JsonSchemaValidator(SCHEMA)

    violations = validator.validate({"id": "123", "age": "not-a-number"})
    assert [(v.field, v.kind) for v in violations] == [("age", "type")]

    violations = validator.validate({"id": "123", "age": -1})
    assert [(v.field, v.kind) for v in violations] == [("age", "minimum")]


def test_nested_fields_use_dotted_paths():
    validator = JsonSchemaValidator(SCHEMA)

    violations = validator.validate({"id": "1", "address": {}})

    assert [(v.field, v.kind) for v in violations] == [("address.city", "required")]


def test_partial_skips_top_level_required():
    validator = JsonSchemaValidator(SCHEMA)

    assert validator.validate({"age": 3}, partial=True) == []
    assert [v.kind for v in validator.validate({"age": "x"}, partial=True)] == ["type"]


def test_null_validator_accepts_anything():
    assert NullValidator().validate({"anything": object()}) == []


def test_gate_without_schema_is_passthrough():
    gate = ValidationGate.from_schema(None)

    gate.check_create([{}, {"age": "x"}])
    gate.check_update(Replacement({}))
    gate.check_patch(ModifierExpression({"$set": {"age": "x"}}))


def test_gate_collects_violations_across_records():
    gate = ValidationGate.from_schema(SCHEMA)

    with pytest.raises(ValidationError) as exc_info:
        gate.check_create([{"id": "1"}, {}, {"id": 2}])

    assert [(v.field, v.kind) for v in exc_info.value.violations] == [
        ("id", "required"),
        ("id", "type"),
    ]


def test_gate_update_is_full_patch_is_partial():
    gate = ValidationGate.from_schema(SCHEMA)

    with pytest.raises(ValidationError):
        gate.check_update(Replacement({"age": 1}))
    gate.check_patch(Replacement({"age": 1}))


def test_gate_validates_set_operand_only():
    gate = ValidationGate.from_schema(SCHEMA)

    gate.check_update(ModifierExpression({"$push": {"tags": 1}}))
    with pytest.raises(ValidationError):
        gate.check_patch(ModifierExpression({"$set": {"age": "old"}}))


def test_gate_rejects_removing_required_fields():
    gate = ValidationGate.from_schema(SCHEMA)

    gate.check_update(ModifierExpression({"$unset": {"age": ""}}))
    with pytest.raises(ValidationError) as exc_info:
        gate.check_update(ModifierExpression({"$unset": {"id": ""}}))
    assert exc_info.value.violations == [
        Violation(field="id", kind="required", message="'id' is a required property")
    ]
    with pytest.raises(ValidationError):
        gate.check_patch(ModifierExpression({"$rename": {"id": "key"}}))


def test_gate_without_schema_allows_removals():
    ValidationGate().check_update(ModifierExpression({"$unset": {"id": ""}}))


class RejectEverything:
    """Custom validator plugged in instead of a schema."""

    def validate(self, record, partial=False):
        return [Violation(kind="custom", message="rejected")]


def test_gate_accepts_custom_validator():
    gate = ValidationGate(RejectEverything())

    with pytest.raises(ValidationError, match="Data does not match schema"):
        gate.check_create([{"id": "1"}])
