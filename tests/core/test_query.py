"""Tests for query translation."""

import pytest

from docservice import BadRequest, PaginateConfig
from docservice.core.query import get_limit, select_fields, translate_query


def test_translate_empty():
    query = translate_query(None)

    assert query.filter == {}
    assert query.sort is None
    assert query.limit is None
    assert query.skip == 0
    assert query.projection is None


def test_reserved_keys_are_removed_from_filter():
    query = translate_query(
        {
            "name": "Alice",
            "age": {"$gte": 18},
            "$sort": {"age": -1, "name": 1},
            "$limit": "10",
            "$skip": 5,
            "$select": ["name"],
        }
    )

    assert query.filter == {"name": "Alice", "age": {"$gte": 18}}
    assert query.sort == [("age", -1), ("name", 1)]
    assert query.limit == 10
    assert query.skip == 5
    assert query.select == ["name"]


def test_unknown_operators_pass_through():
    query = translate_query({"name": {"$regex": "^A"}, "$or": [{"a": 1}, {"b": 2}]})

    assert query.filter == {"name": {"$regex": "^A"}, "$or": [{"a": 1}, {"b": 2}]}


def test_projection_always_fetches_id():
    assert translate_query({"$select": ["name"]}).projection == {"name": 1, "_id": 1}
    assert translate_query({"$select": "name"}, id_field="customid").projection == {
        "name": 1,
        "customid": 1,
    }


def test_sort_directions_from_strings():
    assert translate_query({"$sort": {"name": "-1"}}).sort == [("name", -1)]


@pytest.mark.parametrize("direction", [1.5, -1.9, True, False, 0, "up"])
def test_invalid_sort_direction(direction):
    with pytest.raises(BadRequest, match="Invalid sort direction for name"):
        translate_query({"$sort": {"name": direction}})


@pytest.mark.parametrize("value", [-1, 1.5, True, "ten", None])
def test_invalid_limit(value):
    with pytest.raises(BadRequest, match=r"\$limit"):
        translate_query({"$limit": value})


def test_invalid_query_type():
    with pytest.raises(BadRequest):
        translate_query(["name"])  # type: ignore[arg-type]


def test_get_limit_without_pagination():
    assert get_limit(None, None) is None
    assert get_limit(5, None) == 5


def test_get_limit_with_pagination():
    paginate = PaginateConfig(default=10, max=50)

    assert get_limit(None, paginate) == 10
    assert get_limit(20, paginate) == 20
    assert get_limit(100, paginate) == 50
    assert get_limit(0, paginate) == 0
    assert get_limit(None, PaginateConfig(max=3)) == 3


def test_select_fields():
    record = {"_id": "1", "name": "Alice", "age": 19, "address": {"city": "Paris"}}

    assert select_fields(record, None) == record
    assert select_fields(record, ["name"]) == {"name": "Alice"}
    assert select_fields(record, ["name", "_id"]) == {"_id": "1", "name": "Alice"}
    assert select_fields(record, ["address.city"]) == {"address": {"city": "Paris"}}
