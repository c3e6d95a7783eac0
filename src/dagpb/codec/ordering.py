"""Canonical link ordering.

Links are ordered by name only: absent names first, then present names by
the byte-wise order of their UTF-8 encoding. Hash and size are ignored, and
ties keep their input order.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from ..models.node import Link


def link_sort_key(link: Link) -> Tuple[bool, bytes]:
    """Return the sort key of a link.

    An absent name sorts before every present name, including ``""``.
    """
    if link.name is None:
        return (False, b"")
    # surrogatepass keeps sorting total; the encoder rejects such names later
    return (True, link.name.encode("utf-8", "surrogatepass"))


def sorted_links(links: Iterable[Link]) -> List[Link]:
    """Return a new list of links in canonical order.

    The sort is stable, so links with equal names (including repeated empty
    names) keep their relative order. The input is not modified.

    Example:
        >>> [link.name for link in sorted_links(node.links)]
        [None, '', 'a', 'b']
    """
    return sorted(links, key=link_sort_key)
