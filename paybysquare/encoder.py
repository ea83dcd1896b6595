"""PAY by square payload encoder.

Pipeline: record -> checksum -> frame -> raw LZMA1 -> length header ->
base-32 symbols.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from .base32 import encode_base32
from .compression import Compressor, LzmaCompressor
from .crc import compute_checksum
from .services.errors import err_payload_too_large

logger = logging.getLogger("paybysquare.encoder")

MAX_RAW_LENGTH = 0xFFFF
PACK_HEADER = b"\x00\x00"


@dataclass(frozen=True)
class EncodedPayload:
    payload: str
    checksum: bytes
    raw_length: int
    compressed_length: int


def frame(checksum: bytes, record: bytes) -> bytes:
    """Prepend the checksum to the serialized record."""

    return checksum + record


def pack(compressed: bytes, raw_length: int) -> str:
    """Prefix the compressed stream with its header and map it to symbols."""

    if not 0 <= raw_length <= MAX_RAW_LENGTH:
        raise ValueError(f"raw length {raw_length} does not fit in 16 bits")
    packed = PACK_HEADER + raw_length.to_bytes(2, "little") + compressed
    return encode_base32(packed)


class Encoder:
    def __init__(self, compressor: Compressor | None = None):
        self.compressor = compressor or LzmaCompressor()

    def encode(self, record: bytes) -> str:
        return self.encode_payload(record).payload

    def encode_payload(self, record: bytes) -> EncodedPayload:
        checksum = compute_checksum(record)
        framed = frame(checksum, record)
        raw_length = len(framed)
        if raw_length > MAX_RAW_LENGTH:
            raise err_payload_too_large(
                f"Framed record is {raw_length} bytes; at most {MAX_RAW_LENGTH} bytes can be encoded"
            )

        compressed = self.compressor.compress(framed)
        payload = pack(compressed, raw_length)
        logger.debug(
            "payload encoded",
            extra={
                "backend": self.compressor.name,
                "raw_length": raw_length,
                "compressed_length": len(compressed),
                "payload_length": len(payload),
            },
        )
        return EncodedPayload(
            payload=payload,
            checksum=checksum,
            raw_length=raw_length,
            compressed_length=len(compressed),
        )
