"""Translate service queries into native store filters and options."""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from docservice.config import PaginateConfig
from docservice.errors import BadRequest

logger = logging.getLogger(__name__)

RESERVED_KEYS = ("$sort", "$select", "$limit", "$skip")
SORT_DIRECTIONS = (1, -1)


@dataclass(frozen=True)
class TranslatedQuery:
    """Native filter plus result shaping options."""

    filter: dict[str, Any]
    sort: Optional[list[tuple[str, int]]] = None
    limit: Optional[int] = None
    skip: int = 0
    select: Optional[list[str]] = None
    id_field: str = "_id"

    @property
    def projection(self) -> Optional[dict[str, int]]:
        """Inclusion projection for $select; the id field is always fetched."""
        if self.select is None:
            return None
        projection = {name: 1 for name in self.select}
        projection[self.id_field] = 1
        return projection


def _to_count(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise BadRequest(f"{key} must be a non-negative integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise BadRequest(f"{key} must be a non-negative integer")
    if number < 0 or (isinstance(value, float) and number != value):
        raise BadRequest(f"{key} must be a non-negative integer")
    return number


def _to_sort(value: Any) -> list[tuple[str, int]]:
    if not isinstance(value, Mapping):
        raise BadRequest("$sort must be a mapping of field to 1 or -1")

    sort = []
    for field, direction in value.items():
        if isinstance(direction, bool) or (
            isinstance(direction, float) and not direction.is_integer()
        ):
            raise BadRequest(f"Invalid sort direction for {field}: {direction!r}")
        try:
            direction = int(direction)
        except (TypeError, ValueError):
            raise BadRequest(f"Invalid sort direction for {field}: {direction!r}")
        if direction not in SORT_DIRECTIONS:
            raise BadRequest(f"Invalid sort direction for {field}: {direction!r}")
        sort.append((field, direction))
    return sort


def _to_select(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise BadRequest("$select must be a list of field names")
    return list(value)


def translate_query(
    query: Optional[Mapping[str, Any]], id_field: str = "_id"
) -> TranslatedQuery:
    """
    Split a service query into a native filter and shaping options.

    Args:
        query: Filter with optional $sort, $select, $limit and $skip keys
        id_field: Name of the identifier field

    Returns:
        TranslatedQuery

    Raises:
        BadRequest: If a shaping key has an invalid value
    """
    if query is None:
        query = {}
    if not isinstance(query, Mapping):
        raise BadRequest("Query must be a mapping")

    # Operators other than the reserved keys are passed to the store as-is
    native = {key: value for key, value in query.items() if key not in RESERVED_KEYS}

    translated = TranslatedQuery(
        filter=native,
        sort=_to_sort(query["$sort"]) if "$sort" in query else None,
        limit=_to_count("$limit", query["$limit"]) if "$limit" in query else None,
        skip=_to_count("$skip", query["$skip"]) if "$skip" in query else 0,
        select=_to_select(query["$select"]) if "$select" in query else None,
        id_field=id_field,
    )
    logger.debug("Translated query %s -> %s", dict(query), translated)
    return translated


def get_limit(limit: Optional[int], paginate: Optional[PaginateConfig]) -> Optional[int]:
    """Effective page size: the requested limit bounded by pagination settings."""
    if paginate is None:
        return limit

    if limit is None:
        limit = paginate.default
    if paginate.max is not None:
        limit = paginate.max if limit is None else min(limit, paginate.max)
    return limit


def select_fields(record: Mapping[str, Any], select: Optional[list[str]]) -> dict[str, Any]:
    """Keep only selected fields; the id field survives only when selected."""
    if select is None:
        return dict(record)

    wanted = {name.split(".", 1)[0] for name in select}
    return {key: value for key, value in record.items() if key in wanted}
