"""Structural validation of nodes."""

from __future__ import annotations

from typing import Set

from ..exceptions import DuplicateLinkNameError
from ..models.node import Node


def validate(node: Node) -> None:
    """Check that a node is structurally valid.

    The only constraint is that no two links share a non-empty name. Names
    compare exactly (case-sensitive, no normalization). Links named ``""``
    or without a name may repeat freely.

    Args:
        node: Node to check

    Raises:
        DuplicateLinkNameError: If a non-empty link name occurs more than once
    """
    seen: Set[str] = set()
    for link in node.links:
        if not link.name:
            continue
        if link.name in seen:
            raise DuplicateLinkNameError(link.name)
        seen.add(link.name)
