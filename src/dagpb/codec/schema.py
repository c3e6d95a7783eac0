"""Wire schema tables for DAG-PB.

This module describes the fixed two-level schema of a DAG-PB node: which
field numbers exist, what kind of value each carries and whether it may
repeat. The wire reader uses these tables to interpret length-delimited
payloads and to reject fields of the wrong wire type.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from ..exceptions import DagPBError

# Field numbers of the outer node message
DATA_FIELD = 1
LINKS_FIELD = 2

# Field numbers of the nested link message
HASH_FIELD = 1
NAME_FIELD = 2
TSIZE_FIELD = 3

MAX_FIELD_NUMBER = (1 << 29) - 1


class WireType(enum.IntEnum):
    """Protobuf wire types (low three bits of a field tag)."""

    VARINT = 0
    FIXED64 = 1
    LENGTH_DELIMITED = 2
    START_GROUP = 3
    END_GROUP = 4
    FIXED32 = 5


class FieldKind(enum.Enum):
    """Kind of value a schema position holds."""

    BYTES = "bytes"
    STRING = "string"
    UINT64 = "uint64"
    MESSAGE = "message"

    @property
    def wire_type(self) -> WireType:
        if self is FieldKind.UINT64:
            return WireType.VARINT
        return WireType.LENGTH_DELIMITED


@dataclass(frozen=True)
class FieldSchema:
    """Schema information for a single field.

    Attributes:
        number: Field number on the wire
        name: Human-readable field name, used in error messages
        kind: Kind of value carried by the field
        repeated: Whether the field may occur more than once
        message: Nested schema for MESSAGE fields
    """

    number: int
    name: str
    kind: FieldKind
    repeated: bool = False
    message: Optional["MessageSchema"] = None

    def __post_init__(self) -> None:
        if not 1 <= self.number <= MAX_FIELD_NUMBER:
            raise DagPBError(f"Field {self.name}: invalid field number {self.number}")
        if (self.kind is FieldKind.MESSAGE) != (self.message is not None):
            raise DagPBError(
                f"Field {self.name}: nested schema required exactly for message fields"
            )
        if self.repeated and self.kind is not FieldKind.MESSAGE:
            raise DagPBError(f"Field {self.name}: only message fields may repeat")

    @property
    def wire_type(self) -> WireType:
        return self.kind.wire_type


@dataclass(frozen=True)
class MessageSchema:
    """Schema information for an entire message.

    Example:
        >>> PBNODE_SCHEMA.get(LINKS_FIELD).name
        'Links'
    """

    name: str
    fields: Tuple[FieldSchema, ...]
    _by_number: Dict[int, FieldSchema] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        by_number: Dict[int, FieldSchema] = {}
        for field_schema in self.fields:
            if field_schema.number in by_number:
                raise DagPBError(
                    f"Message {self.name}: field number {field_schema.number} declared twice"
                )
            by_number[field_schema.number] = field_schema
        object.__setattr__(self, "_by_number", by_number)

    def get(self, number: int) -> Optional[FieldSchema]:
        """Return the schema of a field number, or None if it is unknown."""
        return self._by_number.get(number)


PBLINK_SCHEMA = MessageSchema(
    name="PBLink",
    fields=(
        FieldSchema(HASH_FIELD, "Hash", FieldKind.BYTES),
        FieldSchema(NAME_FIELD, "Name", FieldKind.STRING),
        FieldSchema(TSIZE_FIELD, "Tsize", FieldKind.UINT64),
    ),
)

PBNODE_SCHEMA = MessageSchema(
    name="PBNode",
    fields=(
        FieldSchema(DATA_FIELD, "Data", FieldKind.BYTES),
        FieldSchema(LINKS_FIELD, "Links", FieldKind.MESSAGE, repeated=True, message=PBLINK_SCHEMA),
    ),
)
