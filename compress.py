"""SHA-256 compression engine.

One round of the compression loop takes the working state `(a, ..., h)`, a
round constant `k` and a schedule word `w`:

    S1    = (e >>> 6) ^ (e >>> 11) ^ (e >>> 25)
    ch    = (e & f) ^ (~e & g)
    temp1 = h + S1 + ch + k + w
    S0    = (a >>> 2) ^ (a >>> 13) ^ (a >>> 22)
    maj   = (a & b) ^ (a & c) ^ (b & c)
    temp2 = S0 + maj

then shifts the registers down by one, with `a' = temp1 + temp2` and
`e' = d + temp1`. `compress64` runs the 64 rounds of one block and
`update_hash_state` folds the result back into the chaining value.

All additions are modulo 2**32.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple, Union


MASK32 = 0xFFFFFFFF

State = Tuple[int, int, int, int, int, int, int, int]

# Initial hash value H(0): first 32 bits of the fractional parts of the
# square roots of the first 8 primes 2..19 (FIPS 180-4, 5.3.3).
INITIAL_HASH: State = (
    0x6A09E667, 0xBB67AE85, 0x3C6EF372, 0xA54FF53A,
    0x510E527F, 0x9B05688C, 0x1F83D9AB, 0x5BE0CD19,
)

# Round constants K[0..63]: first 32 bits of the fractional parts of the
# cube roots of the first 64 primes 2..311 (FIPS 180-4, 4.2.2).
K_VALUES: Tuple[int, ...] = (
    0x428A2F98, 0x71374491, 0xB5C0FBCF, 0xE9B5DBA5,
    0x3956C25B, 0x59F111F1, 0x923F82A4, 0xAB1C5ED5,
    0xD807AA98, 0x12835B01, 0x243185BE, 0x550C7DC3,
    0x72BE5D74, 0x80DEB1FE, 0x9BDC06A7, 0xC19BF174,
    0xE49B69C1, 0xEFBE4786, 0x0FC19DC6, 0x240CA1CC,
    0x2DE92C6F, 0x4A7484AA, 0x5CB0A9DC, 0x76F988DA,
    0x983E5152, 0xA831C66D, 0xB00327C8, 0xBF597FC7,
    0xC6E00BF3, 0xD5A79147, 0x06CA6351, 0x14292967,
    0x27B70A85, 0x2E1B2138, 0x4D2C6DFC, 0x53380D13,
    0x650A7354, 0x766A0ABB, 0x81C2C92E, 0x92722C85,
    0xA2BFE8A1, 0xA81A664B, 0xC24B8B70, 0xC76C51A3,
    0xD192E819, 0xD6990624, 0xF40E3585, 0x106AA070,
    0x19A4C116, 0x1E376C08, 0x2748774C, 0x34B0BCB5,
    0x391C0CB3, 0x4ED8AA4A, 0x5B9CCA4F, 0x682E6FF3,
    0x748F82EE, 0x78A5636F, 0x84C87814, 0x8CC70208,
    0x90BEFFFA, 0xA4506CEB, 0xBEF9A3F7, 0xC67178F2,
)

ROUNDS = len(K_VALUES)


def _rotr(x: int, n: int) -> int:
    """Right-rotate a 32-bit word `x` by `n` bits."""
    x &= MASK32
    return ((x >> n) | (x << (32 - n))) & MASK32


def _shr(x: int, n: int) -> int:
    """Logical right shift of a 32-bit word."""
    return (x & MASK32) >> n


def _ch(x: int, y: int, z: int) -> int:
    # bitwise "if x then y else z"
    return ((x & y) ^ (~x & z)) & MASK32


def _maj(x: int, y: int, z: int) -> int:
    return (x & y) ^ (x & z) ^ (y & z)


def _big_sigma0(x: int) -> int:
    """SHA-256 function Σ0, applied to register `a`."""
    return _rotr(x, 2) ^ _rotr(x, 13) ^ _rotr(x, 22)


def _big_sigma1(x: int) -> int:
    """SHA-256 function Σ1, applied to register `e`."""
    return _rotr(x, 6) ^ _rotr(x, 11) ^ _rotr(x, 25)


def compression(
    a: int,
    b: int,
    c: int,
    d: int,
    e: int,
    f: int,
    g: int,
    h: int,
    w: int,
    k: int,
) -> State:
    """Perform one SHA-256 compression round.

    Parameters
    ----------
    a, b, c, d, e, f, g, h : int
        Working state before the round.
    w : int
        Message schedule word `w[i]` for this round.
    k : int
        Round constant `K[i]`.

    Returns
    -------
    tuple[int, ...]
        Working state after the round, every word reduced modulo 2**32.
    """
    temp1 = (h + _big_sigma1(e) + _ch(e, f, g) + k + w) & MASK32
    temp2 = (_big_sigma0(a) + _maj(a, b, c)) & MASK32

    return (
        (temp1 + temp2) & MASK32,
        a,
        b,
        c,
        (d + temp1) & MASK32,
        e,
        f,
        g,
    )


def compress64(
    a: int,
    b: int,
    c: int,
    d: int,
    e: int,
    f: int,
    g: int,
    h: int,
    ws: Sequence[int],
    track_h: bool = False,
) -> Union[State, Tuple[State, List[int]]]:
    """Run the 64-round compression loop for one block.

    Parameters
    ----------
    a, b, c, d, e, f, g, h : int
        Initial working state, normally the current hash value.
    ws : Sequence[int]
        The 64-word message schedule of the block.
    track_h : bool
        When set, also return the value of register `h` after every round.

    Returns
    -------
    tuple[int, ...] or (tuple[int, ...], list[int])
        Working state after the last round; with `track_h`, paired with the
        64 recorded `h` values.
    """
    if len(ws) != ROUNDS:
        raise ValueError(f"compress64 expects {ROUNDS} message schedule words, got {len(ws)}")

    state: State = tuple(word & MASK32 for word in (a, b, c, d, e, f, g, h))
    h_values: List[int] = []
    for i in range(ROUNDS):
        state = compression(*state, ws[i] & MASK32, K_VALUES[i])
        if track_h:
            h_values.append(state[7])

    if track_h:
        return state, h_values
    return state


def update_hash_state(prev_state: Sequence[int], working: Sequence[int]) -> State:
    """Add the post-compression working state into the chaining value.

        H_{i+1}[j] = (H_i[j] + working[j]) mod 2**32
    """
    if len(prev_state) != 8 or len(working) != 8:
        raise ValueError("hash state and working state must both have 8 words")
    return tuple((x + y) & MASK32 for x, y in zip(prev_state, working))
