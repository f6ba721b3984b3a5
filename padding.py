"""SHA-256 message padding (FIPS 180-4, 5.1.1).

The padded message is the original bits, a single "1" bit, the minimum
number of "0" bits, and the original bit length as a 64-bit big-endian
integer, so that the total is a multiple of 512 bits.
"""

from __future__ import annotations

import logging

from errors import InputTooLarge


logger = logging.getLogger(__name__)

BLOCK_SIZE = 64
LENGTH_FIELD_SIZE = 8
MAX_MESSAGE_BITS = 2**64 - 1


def check_length(length_bits: int) -> int:
    """Return `length_bits` if it fits the length field, else raise `InputTooLarge`."""
    if length_bits < 0:
        raise ValueError(f"length_bits must be non-negative, got {length_bits}")
    if length_bits > MAX_MESSAGE_BITS:
        raise InputTooLarge(length_bits)
    return length_bits


def _zero_fill(used: int) -> int:
    """Number of 0x00 bytes to add after `used` bytes (message plus terminator)."""
    return (BLOCK_SIZE - LENGTH_FIELD_SIZE - used) % BLOCK_SIZE


def pad_message(message: bytes) -> bytes:
    """Pad a byte message to a multiple of 64 bytes.

    A 55-byte message fits in one block; from 56 bytes on, the terminator and
    length field spill into the next block.
    """
    length_bits = check_length(len(message) * 8)

    padded = bytearray(message)
    padded.append(0x80)
    padded.extend(b"\x00" * _zero_fill(len(padded)))
    padded.extend(length_bits.to_bytes(LENGTH_FIELD_SIZE, byteorder="big"))

    logger.debug(
        "padded %d-byte message to %d blocks", len(message), len(padded) // BLOCK_SIZE
    )
    return bytes(padded)


def pad_message_bits(message: bytes, length_bits: int) -> bytes:
    """Pad a message whose length in bits need not be a multiple of 8.

    Args:
        message: The message bytes. The message occupies the high
            `length_bits` bits; unused low bits of the last byte are ignored.
        length_bits: The actual message length in bits.

    Returns:
        Padded message as bytes (multiple of 64 bytes).
    """
    check_length(length_bits)
    expected_bytes = (length_bits + 7) // 8
    if expected_bytes != len(message):
        raise ValueError(
            f"{length_bits} bits need {expected_bytes} message bytes, got {len(message)}"
        )

    padded = bytearray(message)
    remaining_bits = length_bits % 8
    if remaining_bits == 0:
        padded.append(0x80)
    else:
        # Keep the message bits, set the one after them, clear the rest.
        mask = (0xFF << (8 - remaining_bits)) & 0xFF
        padded[-1] = (padded[-1] & mask) | (0x80 >> remaining_bits)

    padded.extend(b"\x00" * _zero_fill(len(padded)))
    padded.extend(length_bits.to_bytes(LENGTH_FIELD_SIZE, byteorder="big"))
    return bytes(padded)
