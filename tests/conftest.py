"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import Callable

import pytest
from multiformats import CID

SHA2_256_PREFIX = b"\x12\x20"


def make_cid(fill: int) -> CID:
    """CIDv0 whose sha2-256 digest is 32 copies of one byte."""
    return CID.decode(SHA2_256_PREFIX + bytes([fill]) * 32)


@pytest.fixture
def cid_factory() -> Callable[[int], CID]:
    """Factory for distinct, deterministic test identifiers."""
    return make_cid


@pytest.fixture
def test_cid() -> CID:
    """Fixed test identifier."""
    return make_cid(0xAB)


@pytest.fixture
def other_cid() -> CID:
    """A second identifier distinct from test_cid."""
    return make_cid(0xCD)


@pytest.fixture
def test_cid_bytes(test_cid: CID) -> bytes:
    """Binary form of test_cid (bare multihash, 34 bytes)."""
    return SHA2_256_PREFIX + b"\xab" * 32
