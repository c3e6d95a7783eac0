"""Tagged-field wire codec.

This module provides the generic layer underneath the DAG-PB codec: a small
sum type for field values, protobuf-style varint and tag framing, a writer
that appends to a caller-owned buffer and a schema-driven reader that pulls
from any sequential binary stream.

Field order is preserved in both directions. The writer emits fields exactly
in the order given, which is what lets DAG-PB place its links before its data.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import BinaryIO, Dict, Iterable, List, Optional, Tuple, Union, cast

from ..exceptions import FieldTypeError, WireError
from .schema import MAX_FIELD_NUMBER, FieldKind, FieldSchema, MessageSchema, WireType

logger = logging.getLogger(__name__)

UINT64_MAX = (1 << 64) - 1
MAX_VARINT_LENGTH = 10

# Chunk size used when reading or skipping long payloads from a stream
_READ_CHUNK = 64 * 1024

BytesLike = Union[bytes, bytearray, memoryview]


@dataclass(frozen=True)
class BytesValue:
    """Opaque byte payload."""

    value: bytes


@dataclass(frozen=True)
class StringValue:
    """UTF-8 text payload."""

    value: str


@dataclass(frozen=True)
class UInt64Value:
    """Unsigned 64-bit integer, varint encoded."""

    value: int


@dataclass(frozen=True)
class NestedValue:
    """A nested field sequence, length-delimited on the wire."""

    fields: Tuple["WireField", ...]


@dataclass(frozen=True)
class RepeatedValue:
    """Several nested sequences sharing one field number."""

    items: Tuple[NestedValue, ...]


WireValue = Union[BytesValue, StringValue, UInt64Value, NestedValue, RepeatedValue]


@dataclass(frozen=True)
class WireField:
    """A (field number, typed value) pair."""

    number: int
    value: WireValue


def encode_varint(value: int) -> bytes:
    """Encode an unsigned integer as a base-128 varint.

    Raises:
        ValueError: If value is negative or does not fit in 64 bits
    """
    if value < 0 or value > UINT64_MAX:
        raise ValueError(f"varint value {value} outside unsigned 64-bit range")

    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def varint_size(value: int) -> int:
    """Return the number of bytes encode_varint() produces for value."""
    if value < 0 or value > UINT64_MAX:
        raise ValueError(f"varint value {value} outside unsigned 64-bit range")
    return max(1, (value.bit_length() + 6) // 7)


def tag_size(number: int) -> int:
    """Return the encoded size of the tag for a field number."""
    return varint_size(number << 3)


class WireWriter:
    """Appends tagged fields to a byte buffer.

    The buffer may be supplied by the caller, in which case it is appended to
    and never cleared.

    Example:
        >>> writer = WireWriter()
        >>> writer.write_field(WireField(1, BytesValue(b"hi")))
        >>> writer.to_bytes()
        b'\\n\\x02hi'
    """

    def __init__(self, sink: Optional[bytearray] = None) -> None:
        self._sink = sink if sink is not None else bytearray()
        self._start = len(self._sink)

    def write_varint(self, value: int) -> None:
        self._sink.extend(encode_varint(value))

    def write_tag(self, number: int, wire_type: WireType) -> None:
        if not 1 <= number <= MAX_FIELD_NUMBER:
            raise ValueError(f"invalid field number {number}")
        self.write_varint((number << 3) | int(wire_type))

    def write_length_delimited(self, number: int, payload: BytesLike) -> None:
        self.write_tag(number, WireType.LENGTH_DELIMITED)
        self.write_varint(len(payload))
        self._sink.extend(payload)

    def write_field(self, wire_field: WireField) -> None:
        """Write one field.

        Raises:
            TypeError: If the value is not a wire value or holds the wrong Python type
            ValueError: If an integer is out of range or text is not encodable
        """
        number = wire_field.number
        value = wire_field.value

        if isinstance(value, BytesValue):
            if not isinstance(value.value, (bytes, bytearray, memoryview)):
                raise TypeError(
                    f"field {number}: expected bytes, got {type(value.value).__name__}"
                )
            self.write_length_delimited(number, value.value)
        elif isinstance(value, StringValue):
            if not isinstance(value.value, str):
                raise TypeError(f"field {number}: expected str, got {type(value.value).__name__}")
            self.write_length_delimited(number, value.value.encode("utf-8"))
        elif isinstance(value, UInt64Value):
            if isinstance(value.value, bool) or not isinstance(value.value, int):
                raise TypeError(f"field {number}: expected int, got {type(value.value).__name__}")
            self.write_tag(number, WireType.VARINT)
            self.write_varint(value.value)
        elif isinstance(value, NestedValue):
            nested = WireWriter()
            nested.write_fields(value.fields)
            self.write_length_delimited(number, nested.to_bytes())
        elif isinstance(value, RepeatedValue):
            for item in value.items:
                self.write_field(WireField(number, item))
        else:
            raise TypeError(f"field {number}: unsupported wire value {type(value).__name__}")

    def write_fields(self, fields: Iterable[WireField]) -> None:
        for wire_field in fields:
            self.write_field(wire_field)

    def bytes_written(self) -> int:
        """Return the number of bytes appended since construction."""
        return len(self._sink) - self._start

    def to_bytes(self) -> bytes:
        """Return the bytes appended since construction."""
        return bytes(self._sink[self._start :])


class WireReader:
    """Reads tagged fields from a sequential byte source.

    The source is either a bytes-like object or a binary stream; only
    ``read(n)`` is ever called on a stream, so pipes and sockets work.

    Example:
        >>> reader = WireReader(b"\\n\\x02hi")
        >>> reader.read_message(PBNODE_SCHEMA)
        (WireField(number=1, value=BytesValue(value=b'hi')),)
    """

    def __init__(self, source: Union[BytesLike, BinaryIO], limit: Optional[int] = None) -> None:
        if isinstance(source, (bytes, bytearray, memoryview)):
            source = io.BytesIO(bytes(source))
        self._stream: BinaryIO = source
        self._limit = limit
        self._position = 0

    def position(self) -> int:
        """Return the number of bytes consumed so far."""
        return self._position

    def _read(self, num_bytes: int) -> bytes:
        allowed = num_bytes
        if self._limit is not None:
            allowed = min(num_bytes, self._limit - self._position)

        data = self._read_stream(allowed)
        # Input ending exactly at the limit is fine; one more byte is not
        if allowed < num_bytes and len(data) == allowed and self._stream.read(1):
            raise WireError(f"input exceeds limit of {self._limit} bytes")
        return data

    def _read_stream(self, num_bytes: int) -> bytes:
        chunks: List[bytes] = []
        remaining = num_bytes
        while remaining > 0:
            chunk = self._stream.read(min(remaining, _READ_CHUNK))
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        data = b"".join(chunks)
        self._position += len(data)
        return data

    def _read_exact(self, num_bytes: int, what: str) -> bytes:
        data = self._read(num_bytes)
        if len(data) != num_bytes:
            raise WireError(
                f"truncated {what}: need {num_bytes} bytes, have {len(data)}"
            )
        return data

    def read_varint(self, what: str = "varint") -> int:
        """Read one varint.

        Raises:
            WireError: If the varint is truncated or does not fit in 64 bits
        """
        result = 0
        for index in range(MAX_VARINT_LENGTH):
            raw = self._read(1)
            if not raw:
                raise WireError(f"truncated varint in {what}")
            byte = raw[0]
            if index == MAX_VARINT_LENGTH - 1 and byte > 0x01:
                raise WireError(f"invalid varint in {what}: overflows 64 bits")
            result |= (byte & 0x7F) << (7 * index)
            if not byte & 0x80:
                return result
        raise WireError(f"invalid varint in {what}: longer than {MAX_VARINT_LENGTH} bytes")

    def read_tag(self) -> Optional[Tuple[int, int]]:
        """Read a field tag, returning None at a clean end of input."""
        first = self._read(1)
        if not first:
            return None
        tag = first[0]
        if tag & 0x80:
            rest = self.read_varint("field tag")
            tag = (tag & 0x7F) | (rest << 7)
            if tag > UINT64_MAX:
                raise WireError("invalid varint in field tag: overflows 64 bits")

        number = tag >> 3
        wire_type = tag & 0x07
        if not 1 <= number <= MAX_FIELD_NUMBER:
            raise WireError(f"invalid field number {number}")
        return number, wire_type

    def skip(self, number: int, wire_type: int) -> None:
        """Skip the payload of an unknown field."""
        what = f"unknown field {number}"
        if wire_type == WireType.VARINT:
            self.read_varint(what)
        elif wire_type == WireType.FIXED64:
            self._read_exact(8, what)
        elif wire_type == WireType.FIXED32:
            self._read_exact(4, what)
        elif wire_type == WireType.LENGTH_DELIMITED:
            length = self.read_varint(f"{what} length")
            self._read_exact(length, what)
        else:
            raise WireError(f"{what}: unsupported wire type {wire_type}")

    def read_message(self, schema: MessageSchema) -> Tuple[WireField, ...]:
        """Read fields until end of input, interpreting them against schema.

        Unknown field numbers are skipped. A repeated field is delivered as a
        single value when it occurs once and as a RepeatedValue otherwise, at
        the position of its first occurrence.

        Raises:
            WireError: If the framing is malformed or a field repeats unexpectedly
            FieldTypeError: If a known field arrives with the wrong wire type
        """
        order: List[int] = []
        collected: Dict[int, List[WireValue]] = {}

        while True:
            tag = self.read_tag()
            if tag is None:
                break
            number, wire_type = tag

            field_schema = schema.get(number)
            if field_schema is None:
                logger.debug(
                    "Skipping unknown field %d (wire type %d) in %s", number, wire_type, schema.name
                )
                self.skip(number, wire_type)
                continue

            label = f"{schema.name}.{field_schema.name} (field {number})"
            if wire_type != field_schema.wire_type:
                raise FieldTypeError(
                    f"{label}: wrong type: expected {field_schema.kind.value} "
                    f"(wire type {int(field_schema.wire_type)}), got wire type {wire_type}"
                )
            if number in collected and not field_schema.repeated:
                raise WireError(f"{label}: occurs more than once")

            value = self._read_value(field_schema, label)
            if number not in collected:
                order.append(number)
                collected[number] = []
            collected[number].append(value)

        result: List[WireField] = []
        for number in order:
            values = collected[number]
            if len(values) == 1:
                result.append(WireField(number, values[0]))
            else:
                items = cast(Tuple[NestedValue, ...], tuple(values))
                result.append(WireField(number, RepeatedValue(items)))
        return tuple(result)

    def _read_value(self, field_schema: FieldSchema, label: str) -> WireValue:
        if field_schema.kind is FieldKind.UINT64:
            return UInt64Value(self.read_varint(label))

        length = self.read_varint(f"{label} length")
        payload = self._read_exact(length, label)

        if field_schema.kind is FieldKind.BYTES:
            return BytesValue(payload)

        if field_schema.kind is FieldKind.STRING:
            try:
                return StringValue(payload.decode("utf-8"))
            except UnicodeDecodeError as e:
                raise WireError(f"{label}: invalid UTF-8 encoding: {e}") from e

        if field_schema.message is None:
            raise WireError(f"{label}: no nested schema")
        try:
            return NestedValue(WireReader(payload).read_message(field_schema.message))
        except (WireError, FieldTypeError) as e:
            raise type(e)(f"{label}: {e}") from e
