"""Message padding and block splitting (FIPS 180-4, 5.1.1 and 5.2.1).

The padded buffer is

    message || 0x80 || 0x00 * k || be64(len(message) * 8)

where ``k`` is the smallest count that makes the length before the
trailer congruent to 56 mod 64. The full 64-bit length field is
supported; longer messages are rejected with `InputTooLarge`.
"""

from __future__ import annotations

import logging
from typing import List

logger = logging.getLogger(__name__)

BLOCK_SIZE = 64
LENGTH_FIELD_BITS = 64
MAX_BIT_LENGTH = (1 << LENGTH_FIELD_BITS) - 1


class InputTooLarge(ValueError):
    """The message bit length does not fit in the 64-bit length trailer."""

    def __init__(self, bit_length: int):
        self.bit_length = bit_length
        super().__init__(
            f"Message of {bit_length} bits exceeds the SHA-256 limit of "
            f"{MAX_BIT_LENGTH} bits"
        )


def length_trailer(bit_length: int) -> bytes:
    """Return the 8-byte big-endian length field for `bit_length`."""
    if bit_length < 0:
        raise ValueError(f"Bit length must be non-negative, got {bit_length}")
    if bit_length > MAX_BIT_LENGTH:
        raise InputTooLarge(bit_length)
    return bit_length.to_bytes(8, byteorder="big")


def zero_padding_length(message_length: int) -> int:
    """Number of 0x00 bytes placed between the 0x80 marker and the trailer."""
    return (55 - message_length) % BLOCK_SIZE


def block_count(message_length: int) -> int:
    """Number of 64-byte blocks the padded form of a message occupies."""
    return (message_length + 9 + BLOCK_SIZE - 1) // BLOCK_SIZE


def pad_message(message: bytes) -> bytes:
    """Pad `message` so that its length is a multiple of 64 bytes.

    Args:
        message: The raw message bytes (may be empty)

    Returns:
        The padded buffer as ``bytes``

    Raises:
        InputTooLarge: if ``len(message) * 8`` does not fit in 64 bits
    """
    trailer = length_trailer(len(message) * 8)

    padded = bytearray(message)
    padded.append(0x80)
    padded.extend(b"\x00" * zero_padding_length(len(message)))
    padded.extend(trailer)

    logger.debug(
        "padded %d message bytes into %d blocks", len(message), len(padded) // BLOCK_SIZE
    )
    return bytes(padded)


def split_blocks(padded: bytes) -> List[memoryview]:
    """Split a padded buffer into 64-byte block views.

    The blocks share memory with `padded`; nothing is copied.
    """
    if len(padded) % BLOCK_SIZE != 0:
        raise ValueError(
            f"Padded message length must be a multiple of {BLOCK_SIZE} bytes, "
            f"got {len(padded)}"
        )

    view = memoryview(padded)
    return [view[i : i + BLOCK_SIZE] for i in range(0, len(padded), BLOCK_SIZE)]


def padding_summary(message_length: int) -> str:
    """Describe how the padded bit length is made up.

    For a 3-byte message:
    ``24 bits of the original message + 1 bit for the '1' padding + 423 bits
    of 0 padding + 64 bits for length = 512 bits``
    """
    bits = message_length * 8
    zero_bits = zero_padding_length(message_length) * 8 + 7
    total = bits + 1 + zero_bits + LENGTH_FIELD_BITS
    return (
        f"{bits} bits of the original message + 1 bit for the '1' padding + "
        f"{zero_bits} bits of 0 padding + {LENGTH_FIELD_BITS} bits for length = "
        f"{total} bits"
    )
