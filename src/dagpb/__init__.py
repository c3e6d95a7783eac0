"""dagpb: DAG-PB Node Codec

A Python library for the DAG-PB block format used by content-addressed
storage systems such as IPFS. A node carries optional opaque data and an
ordered collection of named links to other nodes.

Key Features:
- Pydantic-based immutable Node and Link models
- Deterministic, canonical encoding (links sorted by name)
- Full structural validation on decode, with typed errors
- Streaming decode from any binary file-like object

Quick Start:
    >>> from dagpb import Link, Node, decode, encode, node_cid
    >>>
    >>> node = Node(
    ...     data=b"\\x08\\x01",
    ...     links=[Link(hash="QmUNLLsPACCz1vLxQVkXqqLX5R1X345qqfHbsf67hvA3Nn", name="empty")],
    ... )
    >>> data = encode(node)
    >>> decoded = decode(data)
    >>> cid = node_cid(decoded)
"""

from __future__ import annotations

from .codec import DecoderConfig, decode, encode, encode_into, sorted_links, validate
from .exceptions import (
    DagPBError,
    DecodeError,
    DuplicateLinkNameError,
    EncodeError,
    FieldTypeError,
    IdentifierError,
    MissingFieldError,
    ValidationError,
    WireError,
)
from .models import Link, Node
from .utils import encoded_size, estimate_size, node_cid

__version__ = "0.1.0"

__all__ = [
    # Core API
    "Node",
    "Link",
    "encode",
    "encode_into",
    "decode",
    "validate",
    "sorted_links",
    # Configuration
    "DecoderConfig",
    # Exceptions
    "DagPBError",
    "ValidationError",
    "DuplicateLinkNameError",
    "EncodeError",
    "DecodeError",
    "WireError",
    "FieldTypeError",
    "MissingFieldError",
    "IdentifierError",
    # Sizing
    "encoded_size",
    "estimate_size",
    # Content addressing
    "node_cid",
    # Version
    "__version__",
]
