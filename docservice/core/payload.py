"""Update payloads: plain replacement documents vs store modifier expressions."""

from dataclasses import dataclass
from typing import Any, Mapping, Union

from docservice.errors import BadRequest

MODIFIER_PREFIX = "$"


@dataclass(frozen=True)
class Replacement:
    """Plain field values, merged (patch) or substituted (update)."""

    fields: dict[str, Any]


@dataclass(frozen=True)
class ModifierExpression:
    """Store-native modifier such as {"$push": {"tags": "x"}}, applied verbatim."""

    operators: dict[str, Any]

    @property
    def set_fields(self) -> dict[str, Any]:
        """Plain values assigned through $set, if any."""
        value = self.operators.get("$set")
        return dict(value) if isinstance(value, Mapping) else {}

    @property
    def removed_fields(self) -> list[str]:
        """Fields deleted through $unset or moved away through $rename."""
        removed: list[str] = []
        for operator in ("$unset", "$rename"):
            value = self.operators.get(operator)
            if isinstance(value, Mapping):
                removed.extend(str(name) for name in value)
        return removed


Payload = Union[Replacement, ModifierExpression]


def resolve_payload(data: Any) -> Payload:
    """
    Decide whether a mapping is a modifier expression or a plain document.

    Raises:
        BadRequest: If data is not a mapping or mixes operators with fields
    """
    if not isinstance(data, Mapping):
        raise BadRequest("Data must be an object")

    operators = [key for key in data if str(key).startswith(MODIFIER_PREFIX)]
    if not operators:
        return Replacement(dict(data))
    if len(operators) != len(data):
        raise BadRequest("Cannot mix modifier operators with plain fields")
    return ModifierExpression(dict(data))
