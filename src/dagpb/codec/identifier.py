"""Conversion between content identifiers and their binary form."""

from __future__ import annotations

from multiformats import CID

from ..exceptions import IdentifierError


def identifier_to_bytes(cid: CID) -> bytes:
    """Return the binary encoding of a CID (bare multihash for CIDv0).

    Raises:
        TypeError: If cid is not a CID
    """
    if not isinstance(cid, CID):
        raise TypeError(f"expected CID, got {type(cid).__name__}")
    return bytes(cid)


def identifier_from_bytes(raw: bytes) -> CID:
    """Parse a binary CID.

    CIDv1 results render in base32, the same text form node_cid() returns.

    Raises:
        IdentifierError: If the bytes are not a valid CID
    """
    try:
        cid = CID.decode(raw)
    except (ValueError, KeyError, IndexError, TypeError) as e:
        raise IdentifierError(f"invalid content identifier: {e}") from e
    if cid.version == 1:
        cid = cid.set(base="base32")
    return cid
