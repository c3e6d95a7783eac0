"""Node and Link value models.

A DAG-PB node carries optional opaque data and an ordered collection of
links. Both models are frozen Pydantic models: they compare by value and
cannot be mutated once built.

Optional attributes are modelled as ``None`` when absent. An empty name or
empty data is a present value and encodes differently from an absent one.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple

from multiformats import CID
from pydantic import BaseModel, ConfigDict, Field, field_validator

UINT64_MAX = (1 << 64) - 1

_NODE_KEYS = frozenset({"Data", "Links"})
_LINK_KEYS = frozenset({"Hash", "Name", "Tsize"})


class Link(BaseModel):
    """A reference from one node to another.

    Attributes:
        hash: Content identifier of the target node
        name: Optional display name; ``""`` is a present, empty name
        tsize: Optional cumulative size hint of the target subtree (not verified)

    Example:
        >>> link = Link(hash="QmUNLLsPACCz1vLxQVkXqqLX5R1X345qqfHbsf67hvA3Nn", name="docs")
        >>> link.tsize is None
        True
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
        extra="forbid",
    )

    hash: CID
    name: Optional[str] = Field(default=None, strict=True)
    tsize: Optional[int] = Field(default=None, ge=0, le=UINT64_MAX, strict=True)

    @field_validator("hash", mode="before")
    @classmethod
    def _coerce_hash(cls, value: Any) -> Any:
        """Accept a CID in its text or binary form as well as a CID instance."""
        if isinstance(value, (str, bytes, bytearray, memoryview)):
            raw = value if isinstance(value, str) else bytes(value)
            try:
                cid = CID.decode(raw)
            except (ValueError, KeyError, IndexError) as e:
                raise ValueError(f"invalid content identifier: {e}") from e
            if isinstance(raw, bytes) and cid.version == 1:
                cid = cid.set(base="base32")
            return cid
        return value


class Node(BaseModel):
    """A DAG-PB graph vertex.

    The ``links`` tuple keeps the order it was given in. Encoding sorts a
    copy into canonical order; the node itself is never reordered.

    Attributes:
        data: Optional opaque payload; ``b""`` is present and empty
        links: Links to other nodes

    Example:
        >>> node = Node(data=b"\\x08\\x01")
        >>> node.links
        ()
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
        extra="forbid",
    )

    data: Optional[bytes] = Field(default=None, strict=True)
    links: Tuple[Link, ...] = ()

    @field_validator("data", mode="before")
    @classmethod
    def _coerce_data(cls, value: Any) -> Any:
        if isinstance(value, (bytearray, memoryview)):
            return bytes(value)
        return value

    def to_ipld(self) -> Dict[str, Any]:
        """Return the IPLD data model form of this node.

        Absent optional attributes are omitted rather than set to None.

        Example:
            >>> Node(data=b"").to_ipld()
            {'Links': [], 'Data': b''}
        """
        links: List[Dict[str, Any]] = []
        for link in self.links:
            entry: Dict[str, Any] = {"Hash": link.hash}
            if link.name is not None:
                entry["Name"] = link.name
            if link.tsize is not None:
                entry["Tsize"] = link.tsize
            links.append(entry)

        result: Dict[str, Any] = {"Links": links}
        if self.data is not None:
            result["Data"] = self.data
        return result

    @classmethod
    def from_ipld(cls, obj: Mapping[str, Any]) -> Node:
        """Build a node from its IPLD data model form.

        Args:
            obj: Mapping with optional "Data" and "Links" keys; each link is a
                mapping with a required "Hash" and optional "Name"/"Tsize"

        Raises:
            TypeError: If obj or a link entry is not a mapping
            ValueError: If unknown keys are present, a hash is missing, or a
                value fails model validation
        """
        if not isinstance(obj, Mapping):
            raise TypeError(f"node must be a mapping, got {type(obj).__name__}")
        unknown = set(obj) - _NODE_KEYS
        if unknown:
            raise ValueError(f"node contains unrecognized keys: {sorted(unknown)}")

        raw_links = obj.get("Links", ())
        if isinstance(raw_links, (str, bytes)) or not isinstance(raw_links, (list, tuple)):
            raise TypeError(f"Links must be a list, got {type(raw_links).__name__}")

        links = []
        for index, entry in enumerate(raw_links):
            if not isinstance(entry, Mapping):
                raise TypeError(f"link {index} must be a mapping, got {type(entry).__name__}")
            unknown = set(entry) - _LINK_KEYS
            if unknown:
                raise ValueError(f"link {index} contains unrecognized keys: {sorted(unknown)}")
            if "Hash" not in entry:
                raise ValueError(f"link {index} is missing required Hash")
            links.append(
                Link(hash=entry["Hash"], name=entry.get("Name"), tsize=entry.get("Tsize"))
            )

        return cls(data=obj.get("Data"), links=tuple(links))
