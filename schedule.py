"""Message schedule expansion: one 64-byte block into 64 words."""

from __future__ import annotations

import struct
from typing import Tuple

from compress import MASK32, _rotr, _shr


def small_sigma0(x: int) -> int:
    """SHA-256 function σ0 used in the message schedule."""
    return _rotr(x, 7) ^ _rotr(x, 18) ^ _shr(x, 3)


def small_sigma1(x: int) -> int:
    """SHA-256 function σ1 used in the message schedule."""
    return _rotr(x, 17) ^ _rotr(x, 19) ^ _shr(x, 10)


def build_message_schedule(block) -> Tuple[int, ...]:
    """Given a 512-bit block, build the 64-word message schedule w[0..63].

    ``block`` may be ``bytes``, ``bytearray`` or a ``memoryview`` slice of
    the padded buffer.
    """
    if len(block) != 64:
        raise ValueError(f"Expected 64-byte block, got {len(block)}")

    # First 16 words come directly from the block (big-endian).
    w = list(struct.unpack(">16L", block))

    for t in range(16, 64):
        s0 = small_sigma0(w[t - 15])
        s1 = small_sigma1(w[t - 2])
        w.append((s1 + w[t - 7] + s0 + w[t - 16]) & MASK32)

    return tuple(w)
