"""Unit tests for canonical link ordering."""

from __future__ import annotations

from typing import Callable, Optional

from multiformats import CID

from dagpb import Link, sorted_links
from dagpb.codec.ordering import link_sort_key


def _link(cid: CID, name: Optional[str]) -> Link:
    return Link(hash=cid, name=name)


class TestLinkOrdering:
    """Test the sort order used before encoding."""

    def test_absent_before_empty_before_names(self, test_cid: CID) -> None:
        """Test absent names sort first, then the empty name, then others."""
        links = [_link(test_cid, n) for n in ("b", "", None, "a")]
        assert [link.name for link in sorted_links(links)] == [None, "", "a", "b"]

    def test_bytewise_not_case_insensitive(self, test_cid: CID) -> None:
        """Test uppercase sorts before lowercase (byte order)."""
        links = [_link(test_cid, n) for n in ("a", "B", "A", "b")]
        assert [link.name for link in sorted_links(links)] == ["A", "B", "a", "b"]

    def test_utf8_byte_order(self, test_cid: CID) -> None:
        """Test non-ASCII names sort after ASCII by UTF-8 bytes."""
        links = [_link(test_cid, n) for n in ("é", "z", "ab", "a")]
        assert [link.name for link in sorted_links(links)] == ["a", "ab", "z", "é"]

    def test_stable_on_ties(self, cid_factory: Callable[[int], CID]) -> None:
        """Test links with equal names keep their input order regardless of hash."""
        first = Link(hash=cid_factory(9), name="")
        second = Link(hash=cid_factory(1), name="")
        third = Link(hash=cid_factory(5))
        fourth = Link(hash=cid_factory(2))

        result = sorted_links([first, second, third, fourth])
        assert result == [third, fourth, first, second]

    def test_ignores_hash_and_tsize(self, cid_factory: Callable[[int], CID]) -> None:
        """Test the sort key depends on the name only."""
        a = Link(hash=cid_factory(1), name="x", tsize=1)
        b = Link(hash=cid_factory(2), name="x", tsize=99)
        assert link_sort_key(a) == link_sort_key(b)

    def test_input_not_mutated(self, test_cid: CID) -> None:
        """Test sorting returns a copy."""
        links = [_link(test_cid, "b"), _link(test_cid, "a")]
        sorted_links(links)
        assert [link.name for link in links] == ["b", "a"]
