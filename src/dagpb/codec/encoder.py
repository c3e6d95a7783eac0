"""DAG-PB encoder.

This module provides encode() and encode_into(), which turn a Node into its
canonical byte form: validate, sort a copy of the links, map to wire fields
and write them. The output is a pure function of the node's value after
canonical link ordering.
"""

from __future__ import annotations

import logging

from ..exceptions import EncodeError, ValidationError
from ..models.node import Node
from .mapper import node_to_fields
from .validate import validate
from .wire import WireWriter

logger = logging.getLogger(__name__)


def encode_into(sink: bytearray, node: Node) -> int:
    """Encode a node and append the bytes to a caller-owned buffer.

    The sink is appended to, never cleared. Nothing is appended when
    encoding fails.

    Args:
        sink: Buffer to append to
        node: Node to encode

    Returns:
        Number of bytes appended

    Raises:
        EncodeError: If the node fails validation ("node validation failed"),
            or a link or the data cannot be encoded

    Example:
        >>> sink = bytearray(b"header")
        >>> encode_into(sink, Node(data=b"x"))
        3
        >>> bytes(sink)
        b'header\\n\\x01x'
    """
    try:
        validate(node)
    except ValidationError as e:
        raise EncodeError(f"node validation failed: {e}") from e

    fields = node_to_fields(node)

    # Encode to a scratch buffer first so a failure leaves the sink untouched
    writer = WireWriter()
    try:
        writer.write_fields(fields)
    except (TypeError, ValueError) as e:
        raise EncodeError(f"wire encoding failed: {e}") from e

    sink.extend(writer.to_bytes())
    written = writer.bytes_written()
    logger.debug(
        "Encoded node with %d links, data=%s into %d bytes",
        len(node.links),
        "absent" if node.data is None else f"{len(node.data)} bytes",
        written,
    )
    return written


def encode(node: Node) -> bytes:
    """Encode a node to its canonical DAG-PB bytes.

    Args:
        node: Node to encode

    Returns:
        Canonical binary representation

    Raises:
        EncodeError: If the node fails validation or cannot be encoded

    Examples:
        ```python
        from dagpb import Link, Node, encode

        node = Node(
            data=b"\\x08\\x01",
            links=[
                Link(hash=cid_b, name="b.txt", tsize=12),
                Link(hash=cid_a, name="a.txt", tsize=30),
            ],
        )

        # Links are written as a.txt, b.txt regardless of input order
        data = encode(node)
        ```
    """
    sink = bytearray()
    encode_into(sink, node)
    return bytes(sink)
