"""DAG-PB codec.

This module provides deterministic encoding and validating decoding of
DAG-PB nodes, on top of a small generic tagged-field wire codec.
"""

from __future__ import annotations

from .config import DecoderConfig
from .decoder import decode
from .encoder import encode, encode_into
from .ordering import link_sort_key, sorted_links
from .schema import FieldSchema, MessageSchema
from .validate import validate

__all__ = [
    "encode",
    "encode_into",
    "decode",
    "validate",
    "sorted_links",
    "link_sort_key",
    "DecoderConfig",
    "MessageSchema",
    "FieldSchema",
]
