"""Shared fixtures and reference vectors for the PAY by square tests."""
from __future__ import annotations

import os
import shutil
import stat
from dataclasses import dataclass
from pathlib import Path

import pytest

from paybysquare.base32 import ALPHABET
from paybysquare.compression import COMMON_XZ_PATHS
from paybysquare.models import BankAccount, Beneficiary, Payment, Symbols


@dataclass(frozen=True)
class GoldenVector:
    record: bytes
    checksum: str
    compressed: str
    payload: str


BASIC = GoldenVector(
    record=b"\t1\t1\t15\tEUR\t\t\t\t\t\t\t1\tSK2483300000002403097934\tFIOZSKBAXXX\t0\t0",
    checksum="bd6b846f",
    compressed=(
        "005e9acc86f048b3cc2cc957e00fa71a07aa0db5b115bb2d24bf3aa0000dc270"
        "1422158ee7a22959150dca3431c567f41719691121e4aef693fff89e6800"
    ),
    payload=(
        "00040000BQDCP1NG92PSOB69AVG0V9OQ0UL0RDDH2MTIQ95V7AG003E2E0A245CESUH2IM8L1N538CE5CVQ1E6B924"
        "GU9BNMIFVVH7J800"
    ),
)

FULL = GoldenVector(
    record=(
        b"\t1\t1\t123.45\tEUR\t20250301\t12345\t0308\t54321\t\tInvoice payment #12345\t1"
        b"\tSK2483300000002403097934\tFIOZSKBAXXX\t0\t0\tACME Corporation\t123 Main Street\t12345 Capital City"
    ),
    checksum="8729a609",
    compressed=(
        "00438a50c09c37fde8821f848e34ff7ab927c0b377b07297bed0c83c027b57238aba41e9be6e89aa9a707f4078"
        "2b2a992e506118f3c77400585b43775d3c60e447b6778f89fa36ce59c7c795e1fa239ab494b189fba4a46f02cb"
        "873770ea693a9d04c1d2047e6bbd23623a92c0ec84d202e60ed6e7cdabe8e9a2e56827253f1103ba234b7f7882"
        "77f571a4affefd197400"
    ),
    payload=(
        "000A80008E551G4S6VUUH0GVGI739VRQN4JS1CRNM1P9FFMGP0U04UQN4E5BKGF9NPN8JAKQE1VK0U1B5ACISK3133"
        "PSET00B1DK6TQT7HGE8HTMEU7OJUHMPPCSFHSLS7T276LKIIOOJUT4KHNG5IS76TOEKQ9QJK2C3KG4FPLRQ8R27A9C"
        "1R44Q81EC3MMSV6QNQ79KBIMG9P57S8G7EH39DVNH0JNULOQ9BVUVKCN800"
    ),
)

SPECIAL = GoldenVector(
    record=(
        "\t1\t1\t99.99\tEUR\t\t\t\t\t\tSpecial characters: áéíóúýčďěňřšťžů\t1"
        "\tDE89370400440532013000\tCOBADEFFXXX\t0\t0\tJörg Müller\tStraße des 17. Juni"
    ).encode("utf-8"),
    checksum="ff290050",
    compressed=(
        "007f8a3c04d848b3eb3c57cb46dfc84e272e2771a7148105d3232a47d9cbf80ac854537025ac81c9a5b59994e1"
        "e0daba37c675e82d8037fb464b8bdea725da27635e9fbc27b837788e9179d74072d40c46bc18a3fd5d12f5aba6"
        "095a3077d0c18343ea99c1272d283d4627d475df672ec1db29a4d454e6c4c301d5a838630472e33d4ce268e3bf"
        "d37f3b3ee955986e44f27dffb28fc000"
    ),
    payload=(
        "0009C000FU53O16O92PUMF2NPD3DVI2E4SN2ESD72I0GBKP3593TJIVO1B458KRG4MM83ID5MMCP9OF0RAT3FHJLT0"
        "MO0DVR8P5ONNL74ND2EOQUJUU2FE1NF2792UEN81PD8326NGCA7VAT2BQQN9G9B8O7FK61GD1UL6E14SMIGFA64VA7"
        "BNR75R0TMAD4QHAEDH6307AQGE330HPE6FACS9KE7FUJFSTJTQALJ1N49SJTVUP8VG00"
    ),
)

GOLDEN_VECTORS = {"basic": BASIC, "full": FULL, "special": SPECIAL}


def basic_payment() -> Payment:
    return Payment(
        amount=15.00,
        currency="EUR",
        bank_accounts=(BankAccount("SK2483300000002403097934", "FIOZSKBAXXX"),),
    )


def full_payment() -> Payment:
    return Payment(
        amount=123.45,
        currency="EUR",
        bank_accounts=(BankAccount("SK2483300000002403097934", "FIOZSKBAXXX"),),
        due_date="20250301",
        identifier=Symbols(variable="12345", constant="0308", specific="54321"),
        note="Invoice payment #12345",
        beneficiary=Beneficiary("ACME Corporation", "123 Main Street", "12345 Capital City"),
    )


def special_payment() -> Payment:
    return Payment(
        amount=99.99,
        currency="EUR",
        bank_accounts=(BankAccount("DE89370400440532013000", "COBADEFFXXX"),),
        note="Special characters: áéíóúýčďěňřšťžů",
        beneficiary=Beneficiary("Jörg Müller", "Straße des 17. Juni"),
    )


PAYMENT_FACTORIES = {"basic": basic_payment, "full": full_payment, "special": special_payment}


def decode_symbols(text: str, byte_count: int) -> bytes:
    """Reassemble bytes from 5-bit symbols, asserting the padding is zero."""

    bits = "".join(f"{ALPHABET.index(symbol):05b}" for symbol in text)
    padding = bits[byte_count * 8 :]
    assert len(padding) < 5
    assert set(padding) <= {"0"}
    return bytes(int(bits[i : i + 8], 2) for i in range(0, byte_count * 8, 8))


def find_xz() -> str | None:
    for candidate in COMMON_XZ_PATHS:
        if os.path.isfile(candidate) and os.access(candidate, os.X_OK):
            return candidate
    return shutil.which("xz")


requires_xz = pytest.mark.skipif(find_xz() is None, reason="xz binary not installed")
requires_posix = pytest.mark.skipif(os.name != "posix", reason="shell script stubs need a POSIX shell")


@pytest.fixture
def make_script(tmp_path: Path):
    """Write an executable shell script and return its path."""

    def _make(body: str, name: str = "fake-xz") -> str:
        script = tmp_path / name
        script.write_text("#!/bin/sh\n" + body + "\n", encoding="utf-8")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(script)

    return _make
