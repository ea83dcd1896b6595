"""Bit packer for the PAY by square 32-symbol alphabet."""
from __future__ import annotations

ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUV"
BITS_PER_SYMBOL = 5
_SYMBOL_MASK = (1 << BITS_PER_SYMBOL) - 1


def encoded_length(byte_count: int) -> int:
    """Number of symbols produced for ``byte_count`` input bytes."""

    return -(-byte_count * 8 // BITS_PER_SYMBOL)


def encode_base32(data: bytes) -> str:
    """Re-encode ``data`` as 5-bit groups, most significant bit first.

    The trailing group is right-padded with zero bits. This is not RFC 4648:
    the alphabet differs and no ``=`` padding is emitted.
    """

    symbols: list[str] = []
    buffer = 0
    pending = 0
    for byte in data:
        buffer = (buffer << 8) | byte
        pending += 8
        while pending >= BITS_PER_SYMBOL:
            pending -= BITS_PER_SYMBOL
            symbols.append(ALPHABET[(buffer >> pending) & _SYMBOL_MASK])
        buffer &= (1 << pending) - 1
    if pending:
        symbols.append(ALPHABET[(buffer << (BITS_PER_SYMBOL - pending)) & _SYMBOL_MASK])
    return "".join(symbols)
