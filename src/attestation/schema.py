import logging
from dataclasses import dataclass, field
from typing import Dict, List

from .errors import MalformedSchemaSegment

logger = logging.getLogger(__name__)


@dataclass
class SchemaDescriptor:
    """
    Parsed form of a schema string such as
    'uint256 eventId, string[] weights, string comment'.

    `keys` keeps declaration order; `types` maps each name to its tag.
    Tags are opaque: only 'int' and 'int[]' mean anything to casting.
    """
    types: Dict[str, str] = field(default_factory=dict)
    keys: List[str] = field(default_factory=list)

    def fields(self) -> List[tuple]:
        return [(key, self.types[key]) for key in self.keys]


def parse_schema(schema: str) -> SchemaDescriptor:
    descriptor = SchemaDescriptor()
    for index, part in enumerate(schema.split(',')):
        segment = part.strip()
        tokens = segment.split()
        if len(tokens) != 2:
            raise MalformedSchemaSegment(segment, index)

        type_tag, name = tokens
        if name in descriptor.types:
            # Last type wins, first position is kept
            logger.warning(
                "parse_schema: duplicate field '%s' (%s -> %s)",
                name, descriptor.types[name], type_tag
            )
        else:
            descriptor.keys.append(name)
        descriptor.types[name] = type_tag
    return descriptor
