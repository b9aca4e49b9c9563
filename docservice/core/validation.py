"""Schema validation gate for create, update and patch payloads."""

import logging
from typing import Any, Mapping, Optional, Protocol, Sequence

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError
from pydantic import BaseModel

from docservice.core.payload import ModifierExpression, Payload, Replacement
from docservice.errors import ConfigurationError, ValidationError

logger = logging.getLogger(__name__)


class Violation(BaseModel):
    """A single failed constraint."""

    field: Optional[str] = None
    kind: str  # JSON Schema keyword, e.g. "required", "type"
    message: str


class RecordValidator(Protocol):
    """Anything that can check one record and list what is wrong with it."""

    def validate(self, record: Mapping[str, Any], partial: bool = False) -> list[Violation]:
        """Return violations; partial=True skips required-field checks."""
        ...


class NullValidator:
    """Accepts every record."""

    required: Sequence[str] = ()

    def validate(self, record: Mapping[str, Any], partial: bool = False) -> list[Violation]:
        return []


class JsonSchemaValidator:
    """Validates records against a JSON Schema (Draft 7)."""

    def __init__(self, schema: dict[str, Any]) -> None:
        self.check_schema(schema)
        self.schema = schema
        self.required = list(schema.get("required", []))
        self._full = Draft7Validator(schema)
        # Partial updates only check the fields they carry
        self._partial = Draft7Validator(
            {key: value for key, value in schema.items() if key != "required"}
        )

    @staticmethod
    def check_schema(schema: dict[str, Any]) -> None:
        """
        Check that the schema itself is a valid JSON Schema.

        Raises:
            ConfigurationError: If the schema is invalid
        """
        try:
            Draft7Validator.check_schema(schema)
        except SchemaError as e:
            raise ConfigurationError(f"Invalid JSON Schema: {e.message}") from e

    def validate(self, record: Mapping[str, Any], partial: bool = False) -> list[Violation]:
        validator = self._partial if partial else self._full
        violations: list[Violation] = []
        seen: set[tuple[str, str]] = set()

        for error in validator.iter_errors(dict(record)):
            path = ".".join(str(p) for p in error.absolute_path)
            if error.validator == "required":
                # jsonschema reports each missing property separately
                for name in error.validator_value:
                    if name in error.instance or (path, name) in seen:
                        continue
                    seen.add((path, name))
                    violations.append(
                        Violation(
                            field=f"{path}.{name}" if path else name,
                            kind="required",
                            message=f"'{name}' is a required property",
                        )
                    )
                continue

            violations.append(
                Violation(field=path or None, kind=str(error.validator), message=error.message)
            )

        return violations


class ValidationGate:
    """Runs a RecordValidator over payloads before they reach the store."""

    def __init__(self, validator: Optional[RecordValidator] = None) -> None:
        self.validator = validator or NullValidator()

    @classmethod
    def from_schema(cls, schema: Optional[dict[str, Any]]) -> "ValidationGate":
        if schema is None:
            return cls()
        return cls(JsonSchemaValidator(schema))

    def _raise_if_any(self, violations: list[Violation]) -> None:
        if violations:
            logger.warning(
                "Rejected payload: %s",
                ", ".join(f"{v.field or '<record>'} ({v.kind})" for v in violations),
            )
            raise ValidationError("Data does not match schema", violations)

    def check_create(self, records: Sequence[Mapping[str, Any]]) -> None:
        violations: list[Violation] = []
        for record in records:
            violations.extend(self.validator.validate(record))
        self._raise_if_any(violations)

    def _check_modifier(self, payload: ModifierExpression) -> None:
        violations = list(self.validator.validate(payload.set_fields, partial=True))
        # Validators without a required list (custom ones) allow any removal
        required = getattr(self.validator, "required", ())
        for name in payload.removed_fields:
            if name in required:
                violations.append(
                    Violation(field=name, kind="required", message=f"'{name}' is a required property")
                )
        self._raise_if_any(violations)

    def check_update(self, payload: Payload) -> None:
        if isinstance(payload, Replacement):
            self._raise_if_any(self.validator.validate(payload.fields))
        elif isinstance(payload, ModifierExpression):
            self._check_modifier(payload)

    def check_patch(self, payload: Payload) -> None:
        if isinstance(payload, Replacement):
            self._raise_if_any(self.validator.validate(payload.fields, partial=True))
        elif isinstance(payload, ModifierExpression):
            self._check_modifier(payload)
