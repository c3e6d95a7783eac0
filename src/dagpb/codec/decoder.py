"""DAG-PB decoder.

This module provides decode(), which parses DAG-PB bytes back into a Node.
Input is read sequentially, so a file or socket stream may be passed in place
of a bytes object. Links are returned in the order they appear in the input.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Optional, Union

from ..exceptions import DecodeError
from ..models.node import Node
from .config import DecoderConfig
from .mapper import fields_to_node
from .schema import PBNODE_SCHEMA
from .wire import WireReader

logger = logging.getLogger(__name__)


def decode(
    data: Union[bytes, bytearray, memoryview, BinaryIO],
    config: Optional[DecoderConfig] = None,
) -> Node:
    """Decode DAG-PB bytes to a Node.

    Args:
        data: Encoded node, as bytes or a binary stream read to its end
        config: Optional size limits (no limits when omitted)

    Returns:
        Decoded and validated node

    Raises:
        WireError: If the framing is malformed (truncation, bad varints,
            wrong wire type for a field)
        FieldTypeError: If a field holds the wrong kind of value
        MissingFieldError: If a link has no hash
        IdentifierError: If a link hash is not a valid CID
        DecodeError: If the node fails validation or exceeds a configured limit

    Examples:
        ```python
        from dagpb import decode

        node = decode(block_bytes)

        with open("block.bin", "rb") as f:
            node = decode(f)
        ```
    """
    if config is None:
        config = DecoderConfig()

    limit = config.max_block_size
    if limit is not None and isinstance(data, (bytes, bytearray)) and len(data) > limit:
        raise DecodeError(f"input of {len(data)} bytes exceeds max_block_size={limit}")

    reader = WireReader(data, limit=limit)
    fields = reader.read_message(PBNODE_SCHEMA)
    node = fields_to_node(fields)

    if config.max_links is not None and len(node.links) > config.max_links:
        raise DecodeError(
            f"node has {len(node.links)} links, exceeds max_links={config.max_links}"
        )

    logger.debug(
        "Decoded node with %d links from %d bytes", len(node.links), reader.position()
    )
    return node
