"""Encoded size calculation for nodes.

This module provides functions to compute the encoded size of a node
without encoding it.
"""

from __future__ import annotations

from ..codec.identifier import identifier_to_bytes
from ..codec.ordering import sorted_links
from ..codec.schema import DATA_FIELD, HASH_FIELD, LINKS_FIELD, NAME_FIELD, TSIZE_FIELD
from ..codec.wire import tag_size, varint_size
from ..models.node import Link, Node

# Per-field allowance for tags, length prefixes, the hash and the size hint
FIELD_OVERHEAD = 64


def estimate_size(node: Node) -> int:
    """Estimate the encoded size of a node in bytes.

    This is a cheap upper-bound style guess suitable for sizing a buffer: the
    data length plus name lengths plus a fixed allowance per field. It is not
    exact; use encoded_size() for that.

    Example:
        >>> estimate_size(Node(data=b"x" * 100))
        164
    """
    size = 0
    if node.data is not None:
        size += len(node.data) + FIELD_OVERHEAD
    for link in node.links:
        size += FIELD_OVERHEAD
        if link.name is not None:
            size += len(link.name.encode("utf-8", "surrogatepass"))
    return size


def _length_delimited_size(number: int, payload_length: int) -> int:
    return tag_size(number) + varint_size(payload_length) + payload_length


def link_size(link: Link) -> int:
    """Return the encoded size of a link's nested field sequence (without framing)."""
    size = _length_delimited_size(HASH_FIELD, len(identifier_to_bytes(link.hash)))
    if link.name is not None:
        size += _length_delimited_size(NAME_FIELD, len(link.name.encode("utf-8")))
    if link.tsize is not None:
        size += tag_size(TSIZE_FIELD) + varint_size(link.tsize)
    return size


def encoded_size(node: Node) -> int:
    """Calculate the exact encoded size of a node in bytes.

    The result equals ``len(encode(node))`` for any node that encodes.

    Raises:
        TypeError: If a link hash is not a CID
        ValueError: If a size hint is out of range or a name is not UTF-8 encodable

    Example:
        >>> encoded_size(Node())
        0
        >>> encoded_size(Node(data=b""))
        2
    """
    size = 0
    for link in sorted_links(node.links):
        size += _length_delimited_size(LINKS_FIELD, link_size(link))
    if node.data is not None:
        size += _length_delimited_size(DATA_FIELD, len(node.data))
    return size
