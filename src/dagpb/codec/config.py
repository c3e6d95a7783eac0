"""Configuration for decoding untrusted input."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class DecoderConfig:
    """Limits applied by decode().

    Both limits are off by default, in which case decoding is bounded only by
    the size of the input.

    Attributes:
        max_block_size: Reject input longer than this many bytes. Checked
            before parsing for bytes input and while reading for streams.
        max_links: Reject nodes with more links than this.

    Examples:
        ```python
        from dagpb import DecoderConfig, decode

        # Typical block size limit of IPFS bitswap
        config = DecoderConfig(max_block_size=2 * 1024 * 1024)
        node = decode(data, config=config)
        ```
    """

    max_block_size: Optional[int] = None
    max_links: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.max_block_size is not None and self.max_block_size < 0:
            raise ValueError(f"max_block_size must be >= 0, got {self.max_block_size}")

        if self.max_links is not None and self.max_links < 0:
            raise ValueError(f"max_links must be >= 0, got {self.max_links}")
