"""Block splitting and message schedule expansion."""

from __future__ import annotations

from typing import List, Sequence

from compress import MASK32, ROUNDS, _rotr, _shr
from padding import BLOCK_SIZE


def _small_sigma0(x: int) -> int:
    """SHA-256 function σ0 used in the message schedule."""
    return _rotr(x, 7) ^ _rotr(x, 18) ^ _shr(x, 3)


def _small_sigma1(x: int) -> int:
    """SHA-256 function σ1 used in the message schedule."""
    return _rotr(x, 17) ^ _rotr(x, 19) ^ _shr(x, 10)


def split_into_blocks(padded: bytes) -> List[bytes]:
    """Split a padded message into consecutive 64-byte blocks."""
    if len(padded) % BLOCK_SIZE != 0:
        raise ValueError(
            f"Padded message length must be a multiple of {BLOCK_SIZE} bytes, got {len(padded)}"
        )
    return [bytes(padded[i : i + BLOCK_SIZE]) for i in range(0, len(padded), BLOCK_SIZE)]


def init_message_schedule(block: bytes) -> List[int]:
    """Read the 16 big-endian words w[0..15] of a 64-byte block."""
    if len(block) != BLOCK_SIZE:
        raise ValueError(f"Expected {BLOCK_SIZE}-byte block, got {len(block)}")
    return [int.from_bytes(block[i : i + 4], byteorder="big") for i in range(0, BLOCK_SIZE, 4)]


def expand_message_schedule(w: Sequence[int]) -> List[int]:
    """Extend w[0..15] to the full 64-word schedule.

    Only the first 16 words of `w` are used; the caller's sequence is not
    modified.
    """
    if len(w) < 16:
        raise ValueError(f"Message schedule must contain at least 16 words, got {len(w)}")

    schedule = [word & MASK32 for word in w[:16]]
    for j in range(16, ROUNDS):
        schedule.append(
            (
                _small_sigma1(schedule[j - 2])
                + schedule[j - 7]
                + _small_sigma0(schedule[j - 15])
                + schedule[j - 16]
            )
            & MASK32
        )
    return schedule


def build_message_schedule(block: bytes) -> List[int]:
    """Given a 512-bit block, build the 64-word message schedule w[0..63]."""
    return expand_message_schedule(init_message_schedule(block))
