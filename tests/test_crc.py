import zlib

import pytest

from conftest import GOLDEN_VECTORS
from paybysquare.crc import compute_checksum, crc32b


@pytest.mark.parametrize("name", sorted(GOLDEN_VECTORS))
def test_checksum_matches_reference_vectors(name):
    vector = GOLDEN_VECTORS[name]
    assert compute_checksum(vector.record).hex() == vector.checksum


@pytest.mark.parametrize("data", [b"", b"a", b"123456789", "Jörg Müller".encode("utf-8"), bytes(range(256))])
def test_reversed_checksum_is_big_endian_crc(data):
    checksum = compute_checksum(data)
    assert len(checksum) == 4
    assert checksum[::-1] == zlib.crc32(data).to_bytes(4, "big")


def test_crc32b_check_value():
    # Standard CRC-32 check value for the ASCII digits 1-9.
    assert crc32b(b"123456789") == 0xCBF43926
