import random

import pytest

from conftest import decode_symbols
from paybysquare.base32 import ALPHABET, encode_base32, encoded_length


def test_alphabet_is_not_rfc4648():
    assert ALPHABET == "0123456789ABCDEFGHIJKLMNOPQRSTUV"
    assert len(set(ALPHABET)) == 32


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"", ""),
        (b"\x00", "00"),
        (b"\xff", "VS"),
        (b"\xff" * 5, "VVVVVVVV"),
        (b"\x08\x42", "1110"),
        (b"\x00\x00\x40\x00", "0004000"),
    ],
)
def test_known_groupings(data, expected):
    assert encode_base32(data) == expected


def test_bits_are_grouped_across_byte_boundaries():
    # 10000 01000 00100 00010 00001 -> 16 8 4 2 1
    data = int("1000001000001000001000001" + "0" * 15, 2).to_bytes(5, "big")
    assert encode_base32(data) == "G8421000"


@pytest.mark.parametrize("length", [0, 1, 2, 3, 4, 5, 7, 64, 255, 300])
def test_round_trip_and_length(length):
    rng = random.Random(length)
    data = bytes(rng.randrange(256) for _ in range(length))

    encoded = encode_base32(data)

    assert len(encoded) == encoded_length(length) == -(-length * 8 // 5)
    assert set(encoded) <= set(ALPHABET)
    assert decode_symbols(encoded, length) == data
