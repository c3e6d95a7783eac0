"""Utility functions for dagpb.

This module provides size calculation and content addressing helpers.
"""

from __future__ import annotations

from .cid import node_cid
from .sizing import encoded_size, estimate_size

__all__ = [
    "node_cid",
    "encoded_size",
    "estimate_size",
]
