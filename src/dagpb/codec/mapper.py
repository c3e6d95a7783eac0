"""Mapping between DAG-PB nodes and tagged wire fields.

Encode direction: every link becomes a nested field 2 (hash, then name if
present, then size if present), followed by the data field 1 if present.
Links come before data on the wire even though their field number is
higher; encoders that follow field-number order produce different bytes.

Decode direction: field 1 must carry bytes, field 2 one or more nested link
sequences. Unknown field numbers are ignored.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

import pydantic
from multiformats import CID

from ..exceptions import (
    DecodeError,
    EncodeError,
    FieldTypeError,
    IdentifierError,
    MissingFieldError,
    ValidationError,
)
from ..models.node import UINT64_MAX, Link, Node
from .identifier import identifier_from_bytes, identifier_to_bytes
from .ordering import sorted_links
from .schema import DATA_FIELD, HASH_FIELD, LINKS_FIELD, NAME_FIELD, TSIZE_FIELD
from .validate import validate
from .wire import (
    BytesValue,
    NestedValue,
    RepeatedValue,
    StringValue,
    UInt64Value,
    WireField,
    WireValue,
)

logger = logging.getLogger(__name__)


def _kind(value: WireValue) -> str:
    return {
        BytesValue: "bytes",
        StringValue: "string",
        UInt64Value: "uint64",
        NestedValue: "nested sequence",
        RepeatedValue: "repeated sequence",
    }.get(type(value), type(value).__name__)


def link_to_fields(link: Link) -> Tuple[WireField, ...]:
    """Map one link to its nested field sequence.

    Raises:
        EncodeError: If the hash cannot be converted to bytes or the size
            hint is not an unsigned 64-bit integer
    """
    try:
        raw_hash = identifier_to_bytes(link.hash)
    except (TypeError, ValueError) as e:
        raise EncodeError(f"hash: {e}") from e

    fields = [WireField(HASH_FIELD, BytesValue(raw_hash))]

    if link.name is not None:
        if not isinstance(link.name, str):
            raise EncodeError(f"name: expected str, got {type(link.name).__name__}")
        try:
            link.name.encode("utf-8")
        except UnicodeEncodeError as e:
            raise EncodeError(f"name: not encodable as UTF-8: {e}") from e
        fields.append(WireField(NAME_FIELD, StringValue(link.name)))

    if link.tsize is not None:
        tsize = link.tsize
        if isinstance(tsize, bool) or not isinstance(tsize, int) or not 0 <= tsize <= UINT64_MAX:
            raise EncodeError(f"tsize: {tsize!r} is not an unsigned 64-bit integer")
        fields.append(WireField(TSIZE_FIELD, UInt64Value(tsize)))

    return tuple(fields)


def node_to_fields(node: Node) -> Tuple[WireField, ...]:
    """Map a node to its outer field sequence.

    Links are emitted in canonical order (see ordering.sorted_links), taken
    from a sorted copy, followed by the data field. The node is not
    validated here.

    Raises:
        EncodeError: With "link encoding failed" or "data encoding failed"
            context when part of the node cannot be represented
    """
    fields: List[WireField] = []

    for index, link in enumerate(sorted_links(node.links)):
        try:
            nested = link_to_fields(link)
        except EncodeError as e:
            raise EncodeError(f"link encoding failed: link {index} ({link.name!r}): {e}") from e
        fields.append(WireField(LINKS_FIELD, NestedValue(nested)))

    if node.data is not None:
        if not isinstance(node.data, (bytes, bytearray, memoryview)):
            raise EncodeError(
                f"data encoding failed: expected bytes, got {type(node.data).__name__}"
            )
        fields.append(WireField(DATA_FIELD, BytesValue(bytes(node.data))))

    return tuple(fields)


def fields_to_link(nested: NestedValue, index: int) -> Link:
    """Build a link from its nested field sequence.

    Args:
        nested: Nested sequence read from field 2
        index: Position of the link in the node, for error messages

    Raises:
        FieldTypeError: If a field holds the wrong kind of value
        IdentifierError: If the hash bytes are not a valid CID
        MissingFieldError: If the hash field is absent
        DecodeError: If the link cannot be constructed
    """
    label = f"link {index}"
    hash_: Optional[CID] = None
    name: Optional[str] = None
    tsize: Optional[int] = None

    for wire_field in nested.fields:
        value = wire_field.value

        if wire_field.number == HASH_FIELD:
            if not isinstance(value, BytesValue):
                raise FieldTypeError(
                    f"{label}: wrong type for hash: expected bytes, got {_kind(value)}"
                )
            try:
                hash_ = identifier_from_bytes(value.value)
            except IdentifierError as e:
                raise IdentifierError(f"{label} hash: {e}") from e

        elif wire_field.number == NAME_FIELD:
            if not isinstance(value, StringValue):
                raise FieldTypeError(
                    f"{label}: wrong type for name: expected string, got {_kind(value)}"
                )
            name = value.value

        elif wire_field.number == TSIZE_FIELD:
            if not isinstance(value, UInt64Value):
                raise FieldTypeError(
                    f"{label}: wrong type for tsize: expected uint64, got {_kind(value)}"
                )
            if not 0 <= value.value <= UINT64_MAX:
                raise FieldTypeError(f"{label}: tsize {value.value} out of uint64 range")
            tsize = value.value

        else:
            logger.debug("Ignoring unknown field %d in %s", wire_field.number, label)

    if hash_ is None:
        raise MissingFieldError(f"{label}: missing required hash")

    try:
        return Link(hash=hash_, name=name, tsize=tsize)
    except pydantic.ValidationError as e:
        raise DecodeError(f"{label}: {e}") from e


def _link_items(value: WireValue) -> Sequence[NestedValue]:
    if isinstance(value, NestedValue):
        return (value,)
    if isinstance(value, RepeatedValue):
        for item in value.items:
            if not isinstance(item, NestedValue):
                raise FieldTypeError(
                    "links field: wrong type for link: "
                    f"expected nested sequence, got {_kind(item)}"
                )
        return value.items
    raise FieldTypeError(
        f"links field: wrong type for links: expected nested sequence, got {_kind(value)}"
    )


def fields_to_node(fields: Sequence[WireField]) -> Node:
    """Build and validate a node from its outer field sequence.

    Links are kept in the order they were encountered. Field 2 may hold a
    single nested sequence or a RepeatedValue; both are flattened.

    Raises:
        FieldTypeError: If data or links hold the wrong kind of value
        DecodeError: If a link is invalid or the node fails validation
            ("node validation failed")
    """
    data: Optional[bytes] = None
    links: List[Link] = []

    for wire_field in fields:
        value = wire_field.value

        if wire_field.number == DATA_FIELD:
            if not isinstance(value, BytesValue):
                raise FieldTypeError(
                    f"data field: wrong type for data: expected bytes, got {_kind(value)}"
                )
            data = bytes(value.value)

        elif wire_field.number == LINKS_FIELD:
            for item in _link_items(value):
                links.append(fields_to_link(item, len(links)))

        else:
            logger.debug("Ignoring unknown field %d in node", wire_field.number)

    try:
        node = Node(data=data, links=tuple(links))
    except pydantic.ValidationError as e:
        raise DecodeError(f"node construction failed: {e}") from e

    try:
        validate(node)
    except ValidationError as e:
        raise DecodeError(f"node validation failed: {e}") from e

    return node
