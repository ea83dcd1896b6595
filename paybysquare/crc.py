"""CRC32 checksum helpers for PAY by square records."""
from __future__ import annotations

import zlib

CHECKSUM_SIZE = 4


def crc32b(data: bytes) -> int:
    """Compute the reflected CRC-32 (ISO-3309, "crc32b") of ``data``."""

    return zlib.crc32(data) & 0xFFFFFFFF


def compute_checksum(record: bytes) -> bytes:
    """Return the 4-byte checksum prepended to a serialized record.

    Scanners expect the big-endian digest with its byte order reversed,
    which is the little-endian encoding of the CRC value.
    """

    return crc32b(record).to_bytes(CHECKSUM_SIZE, "little")
