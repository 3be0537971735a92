import pytest

from padding import (
    MAX_BIT_LENGTH,
    InputTooLarge,
    block_count,
    length_trailer,
    pad_message,
    padding_summary,
    split_blocks,
    zero_padding_length,
)


# Lengths around the 55/56 byte boundary where an extra block is needed.
BOUNDARY_LENGTHS = [0, 1, 3, 55, 56, 57, 63, 64, 119, 120, 1000]


@pytest.mark.parametrize("length", BOUNDARY_LENGTHS)
def test_padded_length_and_trailer(length):
    message = bytes([0x61]) * length
    padded = pad_message(message)

    assert len(padded) % 64 == 0
    assert len(padded) >= length + 9
    assert padded[:length] == message
    assert padded[length] == 0x80
    assert int.from_bytes(padded[-8:], "big") == length * 8
    assert set(padded[length + 1 : -8]) <= {0}


@pytest.mark.parametrize("length", BOUNDARY_LENGTHS)
def test_block_count_matches_padding(length):
    padded = pad_message(bytes(length))
    assert len(padded) // 64 == block_count(length)
    assert block_count(length) == -(-(length + 9) // 64)


@pytest.mark.parametrize(
    "length,blocks",
    [(0, 1), (55, 1), (56, 2), (57, 2), (64, 2), (119, 2), (120, 3)],
)
def test_extra_block_boundaries(length, blocks):
    assert len(pad_message(bytes(length))) == blocks * 64


def test_abc_padding():
    padded = pad_message(b"abc")
    assert padded == b"abc\x80" + b"\x00" * 52 + b"\x00" * 7 + b"\x18"


def test_zero_padding_length():
    assert zero_padding_length(0) == 55
    assert zero_padding_length(55) == 0
    assert zero_padding_length(56) == 63


def test_length_trailer_uses_full_64_bits():
    assert length_trailer(0) == b"\x00" * 8
    assert length_trailer(2**32) == b"\x00\x00\x00\x01\x00\x00\x00\x00"
    assert length_trailer(MAX_BIT_LENGTH) == b"\xff" * 8


def test_length_trailer_rejects_overflow():
    with pytest.raises(InputTooLarge) as excinfo:
        length_trailer(2**64)
    assert excinfo.value.bit_length == 2**64
    assert isinstance(excinfo.value, ValueError)


def test_length_trailer_rejects_negative():
    with pytest.raises(ValueError):
        length_trailer(-8)


def test_pad_message_rejects_too_large_input():
    class Huge:
        def __len__(self):
            return 2**61

    with pytest.raises(InputTooLarge):
        pad_message(Huge())


def test_split_blocks_returns_views():
    padded = pad_message(b"a" * 70)
    blocks = split_blocks(padded)

    assert len(blocks) == 2
    assert all(isinstance(b, memoryview) and len(b) == 64 for b in blocks)
    assert all(b.obj is padded for b in blocks)
    assert b"".join(bytes(b) for b in blocks) == padded


def test_split_blocks_rejects_unaligned_buffer():
    with pytest.raises(ValueError):
        split_blocks(b"\x00" * 65)


def test_padding_summary():
    assert padding_summary(3) == (
        "24 bits of the original message + 1 bit for the '1' padding + "
        "423 bits of 0 padding + 64 bits for length = 512 bits"
    )
    assert padding_summary(56).endswith("= 1024 bits")
