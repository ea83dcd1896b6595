"""Payment encoding and QR building services."""
from __future__ import annotations

import html
import logging
import time
from dataclasses import dataclass, replace
from decimal import Decimal
from pathlib import Path
from typing import Any, Mapping

from ..compression import build_compressor
from ..config import settings
from ..encoder import EncodedPayload, Encoder
from ..models import BankAccount, Beneficiary, Payment, Symbols
from ..monitoring import observe_encoding
from ..renderer import FORMAT_PNG, SUPPORTED_FORMATS, render, to_data_uri
from .errors import ServiceError, err_bad_payload

logger = logging.getLogger("paybysquare.generator")

REQUIRED_ATTRIBUTES = ("amount", "currencyCode", "iban")


@dataclass(slots=True)
class GenerateResult:
    payment: Payment
    encoded: EncodedPayload
    record_length: int


def payment_from_attributes(attributes: Mapping[str, Any]) -> Payment:
    """Build a payment from the flat camelCase attribute mapping.

    Keys: ``amount``, ``currencyCode`` and ``iban`` are required; ``bic``,
    ``variableSymbol``, ``constantSymbol``, ``specificSymbol``, ``reference``,
    ``paymentNote``, ``paymentDueDate``, ``paymentOption``,
    ``beneficiaryName`` and its ``beneficiaryAddressLine1``/``2`` are optional.
    Address lines are ignored without a beneficiary name.
    """

    missing = [key for key in REQUIRED_ATTRIBUTES if attributes.get(key) is None]
    if missing:
        raise ValueError("Payment attributes must include amount, currencyCode, and iban")

    symbols = Symbols(
        variable=attributes.get("variableSymbol"),
        constant=attributes.get("constantSymbol"),
        specific=attributes.get("specificSymbol"),
    )
    identifier: Symbols | None = symbols if symbols != Symbols() else None
    payment = Payment(
        amount=attributes["amount"],
        currency=attributes["currencyCode"],
        bank_accounts=(BankAccount(attributes["iban"], attributes.get("bic")),),
        option=attributes.get("paymentOption", 1),
        due_date=attributes.get("paymentDueDate"),
        identifier=identifier,
        note=attributes.get("paymentNote"),
    )
    if attributes.get("reference") is not None:
        payment = payment.with_reference(attributes["reference"])

    name = attributes.get("beneficiaryName")
    if name is not None:
        beneficiary = Beneficiary(
            name=name,
            address_line1=attributes.get("beneficiaryAddressLine1"),
            address_line2=attributes.get("beneficiaryAddressLine2"),
        )
        payment = replace(payment, beneficiary=beneficiary)
    return payment


class PayBySquareGenerator:
    def __init__(self, encoder: Encoder | None = None):
        self.encoder = encoder or Encoder(build_compressor(settings))

    @staticmethod
    def create_payment(
        amount: Decimal | float | str,
        currency: str,
        iban: str,
        bic: str | None = None,
    ) -> Payment:
        return Payment(amount=amount, currency=currency, bank_accounts=(BankAccount(iban, bic),))

    def generate(self, payment: Payment) -> GenerateResult:
        record = payment.to_record()
        backend = self.encoder.compressor.name
        start = time.perf_counter()
        try:
            encoded = self.encoder.encode_payload(record)
        except ServiceError as exc:
            observe_encoding(backend, "error", (time.perf_counter() - start) * 1000)
            logger.warning("payment encoding failed", extra={"code": exc.code, "backend": backend})
            raise
        observe_encoding(backend, "success", (time.perf_counter() - start) * 1000)
        return GenerateResult(payment=payment, encoded=encoded, record_length=len(record))

    def get_data(self, payment: Payment) -> str:
        """Return the PAY by square string to hand to a QR generator."""

        return self.generate(payment).encoded.payload

    def generate_qr_code(self, payment: Payment, fmt: str = FORMAT_PNG, box_size: int | None = None, border: int | None = None) -> bytes:
        if fmt not in SUPPORTED_FORMATS:
            raise err_bad_payload(f"Unknown file format: {fmt}")
        return render(self.get_data(payment), fmt, box_size=box_size, border=border)

    def get_data_uri(self, payment: Payment, fmt: str = FORMAT_PNG) -> str:
        return to_data_uri(self.generate_qr_code(payment, fmt), fmt)

    def get_html_img(self, payment: Payment, size: int = 300, alt: str = "QR Platba") -> str:
        data_uri = self.get_data_uri(payment)
        return f'<img src="{data_uri}" width="{size}" height="{size}" alt="{html.escape(alt, quote=True)}" />'

    def save_qr_image(self, payment: Payment, path: str | Path, fmt: str = FORMAT_PNG) -> Path:
        target = Path(path)
        target.write_bytes(self.generate_qr_code(payment, fmt))
        logger.info("qr image saved", extra={"path": str(target), "format": fmt})
        return target
