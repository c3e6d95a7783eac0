"""Unit tests for mapping between nodes and wire fields."""

from __future__ import annotations

from typing import Callable

import pytest
from multiformats import CID

from dagpb import (
    DecodeError,
    DuplicateLinkNameError,
    EncodeError,
    FieldTypeError,
    IdentifierError,
    Link,
    MissingFieldError,
    Node,
)
from dagpb.codec.mapper import fields_to_node, link_to_fields, node_to_fields
from dagpb.codec.wire import (
    BytesValue,
    NestedValue,
    RepeatedValue,
    StringValue,
    UInt64Value,
    WireField,
)


def _hash_field(cid: CID) -> WireField:
    return WireField(1, BytesValue(bytes(cid)))


class TestNodeToFields:
    """Test the encode direction."""

    def test_empty_node(self) -> None:
        """Test an empty node maps to no fields."""
        assert node_to_fields(Node()) == ()

    def test_link_fields(self, test_cid: CID) -> None:
        """Test hash, name and tsize map to fields 1, 2 and 3."""
        fields = link_to_fields(Link(hash=test_cid, name="a", tsize=0))
        assert fields == (
            _hash_field(test_cid),
            WireField(2, StringValue("a")),
            WireField(3, UInt64Value(0)),
        )

    def test_absent_optionals_omitted(self, test_cid: CID) -> None:
        """Test absent name and tsize emit no fields."""
        assert link_to_fields(Link(hash=test_cid)) == (_hash_field(test_cid),)

    def test_empty_name_emitted(self, test_cid: CID) -> None:
        """Test a present empty name is emitted."""
        fields = link_to_fields(Link(hash=test_cid, name=""))
        assert fields[1] == WireField(2, StringValue(""))

    def test_links_before_data(self, test_cid: CID) -> None:
        """Test link fields precede the data field."""
        fields = node_to_fields(Node(data=b"d", links=[Link(hash=test_cid)]))
        assert [f.number for f in fields] == [2, 1]
        assert fields[1] == WireField(1, BytesValue(b"d"))

    def test_links_sorted(self, cid_factory: Callable[[int], CID]) -> None:
        """Test link fields are in canonical order."""
        node = Node(
            links=[
                Link(hash=cid_factory(1), name="b"),
                Link(hash=cid_factory(2)),
                Link(hash=cid_factory(3), name="a"),
            ]
        )
        fields = node_to_fields(node)
        hashes = [f.value.fields[0] for f in fields]  # type: ignore[union-attr]
        assert hashes == [_hash_field(cid_factory(i)) for i in (2, 3, 1)]

    def test_tsize_out_of_range(self, test_cid: CID) -> None:
        """Test an out-of-range tsize bypassing validation is reported."""
        link = Link.model_construct(hash=test_cid, name="big", tsize=1 << 64)
        node = Node.model_construct(data=None, links=(link,))

        with pytest.raises(EncodeError, match="link encoding failed: link 0 \\('big'\\): tsize"):
            node_to_fields(node)

    def test_unencodable_hash(self) -> None:
        """Test a hash that is not a CID is reported."""
        link = Link.model_construct(hash="QmNotAnObject", name=None, tsize=None)
        node = Node.model_construct(data=None, links=(link,))

        with pytest.raises(EncodeError, match="link encoding failed: .*hash"):
            node_to_fields(node)

    def test_surrogate_name(self, test_cid: CID) -> None:
        """Test a name that cannot be UTF-8 encoded is reported."""
        link = Link.model_construct(hash=test_cid, name="\ud800", tsize=None)
        node = Node.model_construct(data=None, links=(link,))

        with pytest.raises(EncodeError, match="link encoding failed: .*name"):
            node_to_fields(node)


class TestFieldsToNode:
    """Test the decode direction."""

    def test_empty(self) -> None:
        """Test no fields map to an empty node."""
        assert fields_to_node(()) == Node()

    def test_single_nested_link(self, test_cid: CID) -> None:
        """Test field 2 holding one nested sequence."""
        fields = (
            WireField(
                2,
                NestedValue(
                    (
                        _hash_field(test_cid),
                        WireField(2, StringValue("")),
                        WireField(3, UInt64Value(7)),
                    )
                ),
            ),
        )
        assert fields_to_node(fields) == Node(links=[Link(hash=test_cid, name="", tsize=7)])

    def test_repeated_links(self, cid_factory: Callable[[int], CID]) -> None:
        """Test field 2 holding a repeated sequence keeps encountered order."""
        items = tuple(NestedValue((_hash_field(cid_factory(i)),)) for i in (3, 1))
        node = fields_to_node((WireField(2, RepeatedValue(items)),))
        assert [link.hash for link in node.links] == [cid_factory(3), cid_factory(1)]

    def test_single_and_repeated_flattened(self, cid_factory: Callable[[int], CID]) -> None:
        """Test several field 2 entries are flattened into one links tuple."""
        fields = (
            WireField(2, NestedValue((_hash_field(cid_factory(1)),))),
            WireField(2, RepeatedValue((NestedValue((_hash_field(cid_factory(2)),)),))),
        )
        assert len(fields_to_node(fields).links) == 2

    def test_unknown_fields_ignored(self, test_cid: CID) -> None:
        """Test unknown field numbers at both levels are skipped."""
        fields = (
            WireField(9, UInt64Value(1)),
            WireField(2, NestedValue((_hash_field(test_cid), WireField(8, BytesValue(b"?"))))),
            WireField(1, BytesValue(b"d")),
        )
        assert fields_to_node(fields) == Node(data=b"d", links=[Link(hash=test_cid)])

    def test_data_wrong_type(self) -> None:
        """Test a non-bytes value at field 1."""
        with pytest.raises(FieldTypeError, match="wrong type for data"):
            fields_to_node((WireField(1, StringValue("text")),))

    def test_links_wrong_type(self) -> None:
        """Test a non-nested value at field 2."""
        with pytest.raises(FieldTypeError, match="wrong type for links"):
            fields_to_node((WireField(2, BytesValue(b"")),))

    def test_missing_hash(self) -> None:
        """Test a link without field 1."""
        fields = (WireField(2, NestedValue((WireField(2, StringValue("a")),))),)
        with pytest.raises(MissingFieldError, match="link 0: missing required hash"):
            fields_to_node(fields)

    def test_hash_wrong_type(self) -> None:
        """Test a non-bytes hash."""
        fields = (WireField(2, NestedValue((WireField(1, StringValue("Qm")),))),)
        with pytest.raises(FieldTypeError, match="wrong type for hash"):
            fields_to_node(fields)

    def test_name_wrong_type(self, test_cid: CID) -> None:
        """Test a name that is not a string."""
        fields = (
            WireField(2, NestedValue((_hash_field(test_cid), WireField(2, UInt64Value(1))))),
        )
        with pytest.raises(FieldTypeError, match="wrong type for name: expected string"):
            fields_to_node(fields)

    def test_tsize_wrong_type(self, test_cid: CID) -> None:
        """Test a tsize that is not an integer."""
        fields = (
            WireField(2, NestedValue((_hash_field(test_cid), WireField(3, StringValue("1"))))),
        )
        with pytest.raises(FieldTypeError, match="wrong type for tsize"):
            fields_to_node(fields)

    def test_cidv1_hash_is_base32(self) -> None:
        """Test a CIDv1 link hash renders in base32."""
        cid = CID("base58btc", 1, "dag-pb", ("sha2-256", b"\x02" * 32))
        fields = (WireField(2, NestedValue((_hash_field(cid),))),)
        hash_ = fields_to_node(fields).links[0].hash

        assert hash_ == cid
        assert hash_.encode() == cid.encode("base32")

    def test_invalid_identifier(self) -> None:
        """Test hash bytes that are not a CID."""
        truncated_digest = BytesValue(b"\x01\x70\x12\x20\xab")
        fields = (WireField(2, NestedValue((WireField(1, truncated_digest),))),)
        with pytest.raises(IdentifierError, match="link 0 hash"):
            fields_to_node(fields)

    def test_duplicate_names(self, cid_factory: Callable[[int], CID]) -> None:
        """Test a decoded node with duplicate names fails validation."""
        items = tuple(
            NestedValue((_hash_field(cid_factory(i)), WireField(2, StringValue("x"))))
            for i in (1, 2)
        )
        with pytest.raises(DecodeError, match="node validation failed") as excinfo:
            fields_to_node((WireField(2, RepeatedValue(items)),))
        assert isinstance(excinfo.value.__cause__, DuplicateLinkNameError)
