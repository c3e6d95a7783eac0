"""Node and Link models for dagpb."""

from __future__ import annotations

from .node import UINT64_MAX, Link, Node

__all__ = [
    "Node",
    "Link",
    "UINT64_MAX",
]
