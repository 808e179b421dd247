import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from .errors import SchemaValidationFailed
from .schema import SchemaDescriptor, parse_schema

logger = logging.getLogger(__name__)

# Leading optional sign and digits; the rest of the string is ignored.
_LEADING_INT_RE = re.compile(r'^\s*([+-]?[0-9]+)')

INT_TAG = "int"
INT_ARRAY_TAG = "int[]"


@dataclass
class ValidationResult:
    status: bool
    missing_keys: List[str] = field(default_factory=list)


@dataclass
class SchemaItem:
    name: str
    type: str
    value: Any

    def as_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "type": self.type, "value": self.value}


def parse_int(value: Any) -> Union[int, float]:
    """
    Base-10 integer parse of a leading integer. Values that do not start
    with one come back as float('nan') instead of raising.
    """
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else math.nan
    match = _LEADING_INT_RE.match(str(value))
    if not match:
        return math.nan
    return int(match.group(1))


def validate(descriptor: SchemaDescriptor, data: Dict[str, Any]) -> ValidationResult:
    """
    Presence check only: empty strings and empty lists count as present.
    """
    missing_keys = [key for key in descriptor.keys if key not in data]
    if missing_keys:
        return ValidationResult(status=False, missing_keys=missing_keys)
    return ValidationResult(status=True)


def cast_types(descriptor: SchemaDescriptor, data: Dict[str, Any]) -> None:
    """
    Casts 'int' and 'int[]' fields of `data` in place. Every other tag,
    'uint256' included, is left as-is for the encoder.
    """
    for key in descriptor.keys:
        if key not in data:
            continue
        type_tag = descriptor.types[key]
        if type_tag == INT_TAG:
            data[key] = parse_int(data[key])
        elif type_tag == INT_ARRAY_TAG:
            value = data[key]
            if not isinstance(value, (list, tuple)):
                logger.warning("cast_types: field '%s' is int[] but holds %s", key, type(value).__name__)
                continue
            data[key] = [parse_int(item) for item in value]


class SchemaPipeline:
    """
    Parses a schema string once, then checks and prepares any number
    of data records against it.
    """

    def __init__(self, schema: str):
        self.schema = schema
        self.descriptor = parse_schema(schema)

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        return validate(self.descriptor, data)

    def require_valid(self, data: Dict[str, Any]) -> None:
        result = self.validate(data)
        if not result.status:
            raise SchemaValidationFailed(result.missing_keys)

    def cast_types(self, data: Dict[str, Any]) -> None:
        cast_types(self.descriptor, data)

    def build_items(self, data: Dict[str, Any]) -> List[SchemaItem]:
        """
        Returns the (name, type, value) triples in schema order.
        Record keys the schema does not declare are dropped.
        """
        extra = [key for key in data if key not in self.descriptor.types]
        if extra:
            logger.warning("build_items: dropping undeclared fields %s", extra)
        return [
            SchemaItem(name=key, type=type_tag, value=data[key])
            for key, type_tag in self.descriptor.fields()
            if key in data
        ]
