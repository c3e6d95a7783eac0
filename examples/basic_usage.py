"""Basic usage example for dagpb.

This example demonstrates:
1. Building a small directory node with links
2. Canonical encoding and content addressing
3. Decoding and inspecting the result
4. Handling invalid nodes and malformed input
"""

from __future__ import annotations

from dagpb import (
    DecodeError,
    EncodeError,
    Link,
    Node,
    decode,
    encode,
    encoded_size,
    node_cid,
)


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("dagpb Basic Usage Example")
    print("=" * 60)
    print()

    # UnixFS "file" payload and "directory" payload
    hello = Node(data=b"\x08\x02\x12\x05hello\x18\x05")
    world = Node(data=b"\x08\x02\x12\x05world\x18\x05")

    hello_cid = node_cid(hello)
    world_cid = node_cid(world)

    # Links given out of order; encoding sorts them by name
    directory = Node(
        data=b"\x08\x01",
        links=[
            Link(hash=world_cid, name="world.txt", tsize=encoded_size(world)),
            Link(hash=hello_cid, name="hello.txt", tsize=encoded_size(hello)),
        ],
    )

    print("1. Encoding")
    encoded = encode(directory)
    print(f"   Encoded size: {len(encoded)} bytes")
    print(f"   Hex: {encoded.hex()}")
    print(f"   CIDv1: {node_cid(directory)}")
    print(f"   CIDv0: {node_cid(directory, version=0)}")
    print()

    print("2. Decoding")
    decoded = decode(encoded)
    for link in decoded.links:
        print(f"   {link.name:<12} {link.tsize:>4} bytes  {link.hash}")
    print()

    print("3. Error handling")
    duplicate = Node(links=[Link(hash=hello_cid, name="a"), Link(hash=world_cid, name="a")])
    try:
        encode(duplicate)
    except EncodeError as e:
        print(f"   EncodeError: {e}")

    try:
        decode(encoded[:-3])
    except DecodeError as e:
        print(f"   DecodeError: {e}")


if __name__ == "__main__":
    main()
