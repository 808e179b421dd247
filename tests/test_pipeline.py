import math

import pytest

from src.attestation.errors import SchemaValidationFailed
from src.attestation.pipeline import SchemaPipeline, cast_types, parse_int, validate
from src.attestation.schema import parse_schema

SIMPLE_SCHEMA = "uint256 eventId, string[] weights, string comment"


def test_validate_all_present():
    descriptor = parse_schema(SIMPLE_SCHEMA)
    result = validate(descriptor, {"eventId": 314, "weights": ["W1", "W2"], "comment": "Event-6"})
    assert result.status is True
    assert result.missing_keys == []


def test_validate_empty_values_count_as_present():
    descriptor = parse_schema(SIMPLE_SCHEMA)
    assert validate(descriptor, {"eventId": "", "weights": [], "comment": ""}).status is True


def test_validate_reports_missing_in_schema_order():
    descriptor = parse_schema(SIMPLE_SCHEMA)
    result = validate(descriptor, {"eventId": 1, "comment": "x"})
    assert result.status is False
    assert result.missing_keys == ["weights"]

    result = validate(descriptor, {})
    assert result.missing_keys == ["eventId", "weights", "comment"]


def test_validate_is_idempotent():
    descriptor = parse_schema(SIMPLE_SCHEMA)
    data = {"eventId": 1}
    assert validate(descriptor, data) == validate(descriptor, data)


def test_cast_int_fields():
    descriptor = parse_schema("int eventId, int[] weights")
    data = {"eventId": "1", "weights": ["1", "2", "3"]}
    cast_types(descriptor, data)
    assert data == {"eventId": 1, "weights": [1, 2, 3]}


def test_cast_leaves_other_tags_alone():
    descriptor = parse_schema("uint256 eventId, string[] weights, int n")
    data = {"eventId": "314", "weights": ["1", "2"], "n": "7"}
    cast_types(descriptor, data)
    assert data == {"eventId": "314", "weights": ["1", "2"], "n": 7}


def test_cast_twice_is_noop():
    descriptor = parse_schema("int eventId, int[] weights")
    data = {"eventId": "42", "weights": ["1", "2"]}
    cast_types(descriptor, data)
    cast_types(descriptor, data)
    assert data == {"eventId": 42, "weights": [1, 2]}


def test_cast_unparseable_becomes_nan():
    descriptor = parse_schema("int eventId, int[] weights")
    data = {"eventId": "abc", "weights": ["1", "x"]}
    cast_types(descriptor, data)
    assert math.isnan(data["eventId"])
    assert data["weights"][0] == 1
    assert math.isnan(data["weights"][1])


def test_cast_skips_absent_fields():
    descriptor = parse_schema("int eventId, int[] weights")
    data = {}
    cast_types(descriptor, data)
    assert data == {}


def test_cast_int_array_with_scalar_is_left_untouched():
    descriptor = parse_schema("int[] weights")
    data = {"weights": "1,2"}
    cast_types(descriptor, data)
    assert data == {"weights": "1,2"}


@pytest.mark.parametrize("value,expected", [
    ("12", 12),
    ("  -7", -7),
    ("+3", 3),
    ("12abc", 12),
    ("1.9", 1),
    (5, 5),
    (2.7, 2),
    ("007", 7),
])
def test_parse_int(value, expected):
    assert parse_int(value) == expected


@pytest.mark.parametrize("value", ["", "abc", None, True, float("nan"), float("inf"), "-"])
def test_parse_int_sentinel(value):
    assert math.isnan(parse_int(value))


def test_pipeline_require_valid_raises_with_missing_keys():
    pipeline = SchemaPipeline(SIMPLE_SCHEMA)
    with pytest.raises(SchemaValidationFailed) as exc:
        pipeline.require_valid({"comment": ""})
    assert exc.value.missing_keys == ["eventId", "weights"]


def test_pipeline_build_items_in_schema_order():
    pipeline = SchemaPipeline("int eventId, string[] weights, string comment")
    data = {"comment": "Event-6", "extra": 1, "weights": ["W1"], "eventId": "314"}
    pipeline.cast_types(data)
    items = pipeline.build_items(data)
    assert [item.as_dict() for item in items] == [
        {"name": "eventId", "type": "int", "value": 314},
        {"name": "weights", "type": "string[]", "value": ["W1"]},
        {"name": "comment", "type": "string", "value": "Event-6"},
    ]
