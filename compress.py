"""SHA-256 compression function and its bitwise primitives.

One round of the compression loop takes the working registers
`(a, b, c, d, e, f, g, h)`, the round constant `k` and the schedule word
`w` and computes:

    temp1 = h + Σ1(e) + ch(e, f, g) + k + w
    temp2 = Σ0(a) + maj(a, b, c)

    a' = temp1 + temp2      e' = d + temp1
    b' = a   c' = b   d' = c   f' = e   g' = f   h' = g

`compress_block` runs 64 such rounds seeded from the hash state and folds
the registers back into it. All additions are modulo 2**32.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

MASK32 = 0xFFFFFFFF

HashState = Tuple[int, int, int, int, int, int, int, int]

# Called after every round with (round_index, registers a..h).
RoundCallback = Callable[[int, HashState], None]

# Initial hash value: first 32 bits of the fractional parts of the square
# roots of the first 8 primes 2..19 (FIPS 180-4, 5.3.3).
H0: HashState = (
    0x6A09E667,
    0xBB67AE85,
    0x3C6EF372,
    0xA54FF53A,
    0x510E527F,
    0x9B05688C,
    0x1F83D9AB,
    0x5BE0CD19,
)

# Round constants k[0..63]: first 32 bits of the fractional parts of the
# cube roots of the first 64 primes.
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


def _rotr(x: int, n: int) -> int:
    """Right-rotate a 32-bit word `x` by `n` bits."""
    x &= MASK32
    return ((x >> n) | (x << (32 - n))) & MASK32


def _shr(x: int, n: int) -> int:
    """Logical right shift of a 32-bit word."""
    return (x & MASK32) >> n


def big_sigma0(x: int) -> int:
    return _rotr(x, 2) ^ _rotr(x, 13) ^ _rotr(x, 22)


def big_sigma1(x: int) -> int:
    return _rotr(x, 6) ^ _rotr(x, 11) ^ _rotr(x, 25)


def ch(x: int, y: int, z: int) -> int:
    """Choice: bits of `y` where `x` is set, bits of `z` elsewhere."""
    return ((x & y) ^ (~x & z)) & MASK32


def maj(x: int, y: int, z: int) -> int:
    """Majority vote of each bit position."""
    return (x & y) ^ (x & z) ^ (y & z)


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
) -> HashState:
    """Perform one SHA-256 compression round.

    Parameters
    ----------
    a, b, c, d, e, f, g, h : int
        32-bit working registers before the round.
    w : int
        Message schedule word `w[t]`.
    k : int
        Round constant `k[t]`.

    Returns
    -------
    (a, b, c, d, e, f, g, h) : tuple[int, ...]
        Working registers after the round.
    """
    temp1 = (h + big_sigma1(e) + ch(e, f, g) + k + w) & MASK32
    temp2 = (big_sigma0(a) + maj(a, b, c)) & MASK32

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
    on_round: Optional[RoundCallback] = None,
) -> HashState:
    """Run the 64-round compression loop for one block.

    Parameters
    ----------
    a, b, c, d, e, f, g, h : int
        Initial working registers (normally the current hash state).
    ws : Sequence[int]
        The 64-word message schedule `w[0..63]`.
    on_round : callable, optional
        Invoked as ``on_round(t, registers)`` after each round.

    Returns
    -------
    (a, b, c, d, e, f, g, h) : tuple[int, ...]
        Working registers after round 63, before the fold.
    """
    if len(ws) != 64:
        raise ValueError(f"compress64 expects 64 message schedule words, got {len(ws)}")

    regs = (a, b, c, d, e, f, g, h)
    for t in range(64):
        regs = compression(*regs, ws[t], K_VALUES[t])
        if on_round is not None:
            on_round(t, regs)
    return regs


def compress_block(
    state: Sequence[int],
    schedule: Sequence[int],
    on_round: Optional[RoundCallback] = None,
) -> HashState:
    """Fold one block's schedule into the hash state.

    The working registers are seeded from `state`, mixed for 64 rounds and
    added word-wise back onto `state`. A new tuple is returned; `state`
    itself is left untouched.
    """
    if len(state) != 8:
        raise ValueError(f"Hash state must have 8 words, got {len(state)}")

    work = compress64(*state, schedule, on_round=on_round)
    return tuple((s + w) & MASK32 for s, w in zip(state, work))
