"""Pydantic schemas for API contracts."""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

from .models import BankAccount, Beneficiary, Payment, Reference, Symbols


class PaymentOptionEnum(str, Enum):
    PAYMENT_ORDER = "paymentorder"
    STANDING_ORDER = "standingorder"
    DIRECT_DEBIT = "directdebit"


class BankAccountSchema(BaseModel):
    iban: str = Field(min_length=5, max_length=34)
    bic: str | None = Field(default=None, max_length=11)


class BeneficiarySchema(BaseModel):
    name: str = Field(min_length=1, max_length=70)
    address_line1: str | None = Field(default=None, max_length=70)
    address_line2: str | None = Field(default=None, max_length=70)


class PaymentRequest(BaseModel):
    amount: Decimal | None = Field(default=None, ge=0)
    currency: str = Field(default="EUR", min_length=3, max_length=3)
    bank_accounts: list[BankAccountSchema] = Field(min_length=1)
    payment_option: PaymentOptionEnum = PaymentOptionEnum.PAYMENT_ORDER
    due_date: date | str | int | None = Field(default=None, description="Any recognizable date notation")
    variable_symbol: str | None = Field(default=None, max_length=10)
    constant_symbol: str | None = Field(default=None, max_length=4)
    specific_symbol: str | None = Field(default=None, max_length=10)
    reference: str | None = Field(default=None, max_length=35)
    note: str | None = Field(default=None, max_length=140)
    beneficiary: BeneficiarySchema | None = None

    @model_validator(mode="after")
    def _reference_excludes_symbols(self) -> PaymentRequest:
        has_symbols = any((self.variable_symbol, self.constant_symbol, self.specific_symbol))
        if self.reference and has_symbols:
            raise ValueError("reference cannot be combined with variable, constant or specific symbols")
        return self

    def to_payment(self) -> Payment:
        identifier: Symbols | Reference | None = None
        if self.reference:
            identifier = Reference(self.reference)
        elif any((self.variable_symbol, self.constant_symbol, self.specific_symbol)):
            identifier = Symbols(self.variable_symbol, self.constant_symbol, self.specific_symbol)

        beneficiary = None
        if self.beneficiary is not None:
            beneficiary = Beneficiary(
                name=self.beneficiary.name,
                address_line1=self.beneficiary.address_line1,
                address_line2=self.beneficiary.address_line2,
            )
        return Payment(
            amount=self.amount,
            currency=self.currency.upper(),
            bank_accounts=tuple(BankAccount(account.iban, account.bic) for account in self.bank_accounts),
            option=self.payment_option.value,
            due_date=self.due_date,
            identifier=identifier,
            note=self.note,
            beneficiary=beneficiary,
        )


class EncodeRequest(PaymentRequest):
    include_qr: bool = False


class EncodeResponse(BaseModel):
    payload: str
    checksum: str
    raw_length: int
    compressed_length: int
    record_length: int
    payment: dict[str, Any]
    qr_png_base64: str | None = None


class QRImageFormat(str, Enum):
    PNG = "png"
    SVG = "svg"


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    backend: str
