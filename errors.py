"""Errors raised by the input side of the digest pipeline.

The digest computation itself cannot fail for any message whose bit length
fits the 64-bit length field. These exceptions are raised before padding
starts.
"""

from __future__ import annotations


class DigestError(Exception):
    """Base class for errors that stop a digest before it is computed."""


class InputUnavailable(DigestError):
    """The input source could not be read."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"could not read '{source}': {reason}")
        self.source = source
        self.reason = reason


class InputTooLarge(DigestError):
    """The message bit length does not fit the 64-bit length field."""

    def __init__(self, length_bits: int) -> None:
        super().__init__(
            f"Message of {length_bits} bits does not fit the 64-bit length field"
        )
        self.length_bits = length_bits
