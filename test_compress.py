import pytest

from compress import (
    H0,
    K_VALUES,
    MASK32,
    _rotr,
    _shr,
    big_sigma0,
    big_sigma1,
    ch,
    compress64,
    compress_block,
    compression,
    maj,
)
from padding import pad_message
from schedule import build_message_schedule


def _abc_schedule():
    return build_message_schedule(pad_message(b"abc"))


def test_constant_tables():
    assert len(K_VALUES) == 64
    assert len(H0) == 8
    assert K_VALUES[0] == 0x428A2F98
    assert K_VALUES[63] == 0xC67178F2
    assert H0[0] == 0x6A09E667
    assert all(0 <= k <= MASK32 for k in K_VALUES)


@pytest.mark.parametrize(
    "x,n,expected",
    [
        (0x00000001, 1, 0x80000000),
        (0x80000000, 31, 0x00000001),
        (0x12345678, 8, 0x78123456),
        (0xFFFFFFFF, 13, 0xFFFFFFFF),
    ],
)
def test_rotr(x, n, expected):
    assert _rotr(x, n) == expected


def test_shr_is_zero_fill():
    assert _shr(0x80000000, 3) == 0x10000000
    assert _shr(0xFFFFFFFF, 10) == 0x003FFFFF


def test_ch_selects_bits():
    assert ch(0xFFFFFFFF, 0x12345678, 0x9ABCDEF0) == 0x12345678
    assert ch(0x00000000, 0x12345678, 0x9ABCDEF0) == 0x9ABCDEF0
    assert ch(0xFFFF0000, 0xAAAAAAAA, 0x55555555) == 0xAAAA5555


def test_maj_is_bitwise_vote():
    assert maj(0xFFFFFFFF, 0xFFFFFFFF, 0) == 0xFFFFFFFF
    assert maj(0xF0F0F0F0, 0x0F0F0F0F, 0xFF00FF00) == 0xFF00FF00


def test_big_sigmas_stay_in_32_bits():
    for x in (0, 1, 0x80000000, MASK32, 0x6A09E667):
        assert 0 <= big_sigma0(x) <= MASK32
        assert 0 <= big_sigma1(x) <= MASK32


def test_first_round_of_abc_matches_fips_example():
    ws = _abc_schedule()
    regs = compression(*H0, ws[0], K_VALUES[0])
    assert regs == (
        0x5D6AEBCD,
        0x6A09E667,
        0xBB67AE85,
        0x3C6EF372,
        0xFA2A4622,
        0x510E527F,
        0x9B05688C,
        0x1F83D9AB,
    )


def test_compression_shifts_registers():
    a, b, c, d, e, f, g, h = 1, 2, 3, 4, 5, 6, 7, 8
    out = compression(a, b, c, d, e, f, g, h, 0x67452301, K_VALUES[10])
    assert out[1:4] == (a, b, c)
    assert out[5:8] == (e, f, g)
    assert all(0 <= word <= MASK32 for word in out)


def test_compress64_reports_every_round():
    seen = []
    result = compress64(*H0, _abc_schedule(), on_round=lambda t, regs: seen.append((t, regs)))
    assert [t for t, _ in seen] == list(range(64))
    assert seen[-1][1] == result


def test_compress64_rejects_short_schedule():
    with pytest.raises(ValueError):
        compress64(*H0, [0] * 63)


def test_compress_block_folds_into_state():
    state = compress_block(H0, _abc_schedule())
    assert state == (
        0xBA7816BF,
        0x8F01CFEA,
        0x414140DE,
        0x5DAE2223,
        0xB00361A3,
        0x96177A9C,
        0xB410FF61,
        0xF20015AD,
    )


def test_compress_block_does_not_mutate_input():
    state = list(H0)
    compress_block(state, _abc_schedule())
    assert tuple(state) == H0


def test_compress_block_rejects_bad_state():
    with pytest.raises(ValueError):
        compress_block(H0[:7], _abc_schedule())
