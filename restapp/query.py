"""Build service queries from REST query strings."""

import json
from typing import Any, Iterable

from docservice import BadRequest

# field__op=value maps to {"field": {"$op": value}}
OPERATORS = {
    "gt": "$gt",
    "gte": "$gte",
    "lt": "$lt",
    "lte": "$lte",
    "ne": "$ne",
    "in": "$in",
    "nin": "$nin",
}
LIST_OPERATORS = ("in", "nin")


def decode_value(raw: str) -> Any:
    """Decode a query string value as JSON, keeping it as a string otherwise."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def build_query(items: Iterable[tuple[str, str]]) -> dict[str, Any]:
    """
    Build a service query from query string pairs.

    Args:
        items: Pairs such as ("age__gte", "18"), ("$sort", "-age"), ("$select", "name")

    Returns:
        Query dict for DocumentService

    Raises:
        BadRequest: If an operator is combined with an equality on the same field
    """
    query: dict[str, Any] = {}
    sort: dict[str, int] = {}
    select: list[str] = []

    for key, value in items:
        if key == "$sort":
            for name in filter(None, value.split(",")):
                if name.startswith("-"):
                    sort[name[1:]] = -1
                else:
                    sort[name.lstrip("+")] = 1
        elif key == "$select":
            select.extend(name for name in value.split(",") if name)
        elif "__" in key and key.split("__", 1)[1] in OPERATORS:
            field, operator = key.split("__", 1)
            if operator in LIST_OPERATORS:
                operand = [decode_value(v) for v in value.split(",")]
            else:
                operand = decode_value(value)

            conditions = query.setdefault(field, {})
            if not isinstance(conditions, dict):
                raise BadRequest(f"Cannot combine equality and {operator} on {field}")
            conditions[OPERATORS[operator]] = operand
        else:
            # Simple equality, $limit, $skip and JSON-encoded operators like $or
            query[key] = decode_value(value)

    if sort:
        query["$sort"] = sort
    if select:
        query["$select"] = select
    return query
