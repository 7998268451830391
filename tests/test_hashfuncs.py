import pytest
from hypothesis import given
from hypothesis import strategies as st

from opium.hashfuncs import djb2


def test_empty_key_hashes_to_zero():
    assert djb2(b"") == 0
    assert djb2("") == 0


def test_single_byte_value():
    assert djb2(b"a") == 177604


def test_str_hashes_as_utf8():
    assert djb2("héllo") == djb2("héllo".encode("utf-8"))


def test_bytes_like_inputs_agree():
    raw = b"opium"
    assert djb2(bytearray(raw)) == djb2(raw)
    assert djb2(memoryview(raw)) == djb2(raw)


def test_high_byte_is_sign_extended():
    assert djb2(b"\xff") >= 2**63


def test_order_matters():
    assert djb2(b"ab") != djb2(b"ba")
    assert djb2(b"ab") == djb2(b"ab")


def test_rejects_non_bytes():
    with pytest.raises(TypeError):
        djb2(12345)


@given(st.binary(min_size=1, max_size=64))
def test_result_fits_in_64_bits(data):
    result = djb2(data)
    assert 0 <= result < 2**64
    assert result == djb2(bytes(data))