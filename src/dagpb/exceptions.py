"""Exception hierarchy for dagpb.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from DagPBError for easy catching of any dagpb-specific error.
"""

from __future__ import annotations


class DagPBError(Exception):
    """Base exception for all dagpb errors."""

    pass


class ValidationError(DagPBError):
    """Raised when a node violates a structural invariant."""

    pass


class DuplicateLinkNameError(ValidationError):
    """Raised when two links of one node share a non-empty name.

    Attributes:
        name: The shared link name
    """

    def __init__(self, name: str) -> None:
        super().__init__(f"duplicate link name {name!r}")
        self.name = name


class EncodeError(DagPBError):
    """Raised when encoding a node fails.

    Examples:
        - Node fails validation (duplicate link names)
        - Link identifier cannot be converted to bytes
        - Link size hint does not fit in an unsigned 64-bit integer
    """

    pass


class DecodeError(DagPBError):
    """Raised when decoding binary data fails.

    Examples:
        - Truncated data or malformed varints
        - Field value of the wrong kind
        - Link without a hash
        - Decoded node fails validation
    """

    pass


class WireError(DecodeError):
    """Raised when the tagged-field framing of a byte stream is malformed."""

    pass


class FieldTypeError(DecodeError):
    """Raised when a field holds a value of the wrong kind for its position."""

    pass


class MissingFieldError(DecodeError):
    """Raised when a required field is absent."""

    pass


class IdentifierError(DecodeError):
    """Raised when link hash bytes are not a valid content identifier."""

    pass
