"""Content addressing of encoded nodes."""

from __future__ import annotations

from multiformats import CID, multihash

from ..codec.encoder import encode
from ..models.node import Node

DAG_PB_CODEC = "dag-pb"


def node_cid(node: Node, *, version: int = 1, hashfn: str = "sha2-256") -> CID:
    """Encode a node and return its content identifier.

    Args:
        node: Node to address
        version: CID version, 0 or 1. CIDv0 is rendered in base58btc and
            only supports sha2-256; CIDv1 is rendered in base32.
        hashfn: Multihash function name

    Returns:
        CID with the dag-pb codec

    Raises:
        ValueError: If version is unsupported or CIDv0 is requested with
            another hash function
        EncodeError: If the node cannot be encoded

    Example:
        >>> str(node_cid(Node(data=b"\\x08\\x01"), version=0))
        'QmUNLLsPACCz1vLxQVkXqqLX5R1X345qqfHbsf67hvA3Nn'
    """
    if version not in (0, 1):
        raise ValueError(f"CID version must be 0 or 1, got {version}")
    if version == 0 and hashfn != "sha2-256":
        raise ValueError(f"CIDv0 requires sha2-256, got {hashfn}")

    digest = multihash.digest(encode(node), hashfn)
    base = "base58btc" if version == 0 else "base32"
    return CID(base, version, DAG_PB_CODEC, digest)
