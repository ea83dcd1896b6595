"""Payment data model and its tab-delimited record serialization."""
from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable

from dateutil import parser as date_parser
from dateutil.relativedelta import FR, MO, SA, SU, TH, TU, WE, relativedelta

FIELD_SEPARATOR = "\t"
RECORD_VERSION = "1"
EXTENSION_PLACEHOLDERS = ("0", "0")

_FORBIDDEN_TEXT = re.compile(r"[\t\r\n]")
_COMPACT_DATE = re.compile(r"^\d{8}$")
_RELATIVE_OFFSET = re.compile(r"^([+-]?\d+)\s*(day|week|month|year)s?$", re.IGNORECASE)
_NEXT_WEEKDAY = re.compile(r"^next\s+([a-z]+)$", re.IGNORECASE)
_DAY_KEYWORDS = {"today": 0, "tomorrow": 1, "yesterday": -1}
_WEEKDAYS = {
    "monday": MO,
    "tuesday": TU,
    "wednesday": WE,
    "thursday": TH,
    "friday": FR,
    "saturday": SA,
    "sunday": SU,
}


class PaymentOption(int, enum.Enum):
    PAYMENT_ORDER = 1
    STANDING_ORDER = 2
    DIRECT_DEBIT = 4

    @classmethod
    def parse(cls, value: PaymentOption | str | int) -> PaymentOption:
        """Accept an enum member, its numeric code or a name like ``paymentorder``."""

        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                pass
        elif isinstance(value, str):
            key = value.strip().replace("_", "").replace(" ", "").lower()
            for option in cls:
                if option.name.replace("_", "").lower() == key:
                    return option
        available = ", ".join(option.name.replace("_", "").lower() for option in cls)
        raise ValueError(f'Invalid payment option "{value}". Available options: {available}')


@dataclass(frozen=True)
class BankAccount:
    iban: str
    bic: str | None = None


@dataclass(frozen=True)
class Symbols:
    """Czech/Slovak payment symbols; any subset may be present."""

    variable: str | None = None
    constant: str | None = None
    specific: str | None = None


@dataclass(frozen=True)
class Reference:
    """Originator's reference, used instead of payment symbols."""

    value: str


PaymentIdentifier = Symbols | Reference | None


@dataclass(frozen=True)
class Beneficiary:
    name: str
    address_line1: str | None = None
    address_line2: str | None = None


def parse_amount(value: Decimal | float | int | str | None) -> Decimal | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("Amount must be numeric")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    if amount < 0:
        raise ValueError("Amount must not be negative")
    return amount


def format_amount(amount: Decimal | None) -> str:
    """Render an amount as the shortest plain decimal, ``15.00`` -> ``15``."""

    if amount is None:
        return ""
    return format(amount.normalize(), "f")


def parse_due_date(value: date | datetime | int | str, *, today: date | None = None) -> date:
    """Best-effort conversion of a due date given in any common notation.

    Integers are Unix timestamps (UTC). Strings may be ``YYYYMMDD``,
    anything ``dateutil`` parses, ``today``/``tomorrow``/``yesterday``,
    offsets such as ``+30 days`` and ``next monday``.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc).date()
        except (OverflowError, OSError, ValueError) as exc:
            raise ValueError(f"Invalid payment due date timestamp: {value}") from exc
    if not isinstance(value, str):
        raise ValueError("Payment due date must be a string, integer timestamp, or date")

    text = value.strip()
    base = today or date.today()
    try:
        if _COMPACT_DATE.match(text):
            return datetime.strptime(text, "%Y%m%d").date()

        lowered = text.lower()
        if lowered in _DAY_KEYWORDS:
            return base + timedelta(days=_DAY_KEYWORDS[lowered])

        match = _RELATIVE_OFFSET.match(text)
        if match:
            count, unit = int(match.group(1)), match.group(2).lower()
            return base + relativedelta(**{f"{unit}s": count})

        match = _NEXT_WEEKDAY.match(text)
        if match and match.group(1).lower() in _WEEKDAYS:
            return base + relativedelta(days=1, weekday=_WEEKDAYS[match.group(1).lower()])

        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"Invalid payment due date format: {value}. Use any recognizable date format.") from exc


def _check_text(name: str, value: str | None) -> None:
    if value is not None and _FORBIDDEN_TEXT.search(value):
        raise ValueError(f"{name} must not contain tabs or line breaks")


@dataclass(frozen=True)
class Payment:
    amount: Decimal | None = None
    currency: str = "EUR"
    bank_accounts: tuple[BankAccount, ...] = field(default_factory=tuple)
    option: PaymentOption = PaymentOption.PAYMENT_ORDER
    due_date: date | None = None
    identifier: PaymentIdentifier = None
    note: str | None = None
    beneficiary: Beneficiary | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", parse_amount(self.amount))
        object.__setattr__(self, "option", PaymentOption.parse(self.option))
        object.__setattr__(self, "bank_accounts", tuple(self.bank_accounts))
        if self.due_date is not None:
            object.__setattr__(self, "due_date", parse_due_date(self.due_date))

        for name, value in self._text_fields():
            _check_text(name, value)

    def _text_fields(self) -> Iterable[tuple[str, str | None]]:
        yield "currency", self.currency
        yield "note", self.note
        for account in self.bank_accounts:
            yield "iban", account.iban
            yield "bic", account.bic
        if isinstance(self.identifier, Symbols):
            yield "variable symbol", self.identifier.variable
            yield "constant symbol", self.identifier.constant
            yield "specific symbol", self.identifier.specific
        elif isinstance(self.identifier, Reference):
            yield "reference", self.identifier.value
        if self.beneficiary is not None:
            yield "beneficiary name", self.beneficiary.name
            yield "beneficiary address", self.beneficiary.address_line1
            yield "beneficiary address", self.beneficiary.address_line2

    @property
    def symbols(self) -> Symbols:
        return self.identifier if isinstance(self.identifier, Symbols) else Symbols()

    @property
    def reference(self) -> str | None:
        return self.identifier.value if isinstance(self.identifier, Reference) else None

    def with_symbols(
        self,
        variable: str | None = None,
        constant: str | None = None,
        specific: str | None = None,
    ) -> Payment:
        return replace(self, identifier=Symbols(variable=variable, constant=constant, specific=specific))

    def with_reference(self, reference: str) -> Payment:
        return replace(self, identifier=Reference(reference))

    def with_bank_account(self, account: BankAccount) -> Payment:
        return replace(self, bank_accounts=(*self.bank_accounts, account))

    def fields(self) -> list[str]:
        """Ordered payment fields, before the record header is applied."""

        symbols = self.symbols
        values = [
            str(self.option.value),
            format_amount(self.amount),
            self.currency,
            self.due_date.strftime("%Y%m%d") if self.due_date else "",
            symbols.variable or "",
            symbols.constant or "",
            symbols.specific or "",
            self.reference or "",
            self.note or "",
            str(len(self.bank_accounts)),
        ]
        for account in self.bank_accounts:
            values.append(account.iban)
            values.append(account.bic or "")
        values.extend(EXTENSION_PLACEHOLDERS)

        if self.beneficiary is not None:
            values.append(self.beneficiary.name)
            if self.beneficiary.address_line1 is not None or self.beneficiary.address_line2 is not None:
                values.append(self.beneficiary.address_line1 or "")
            if self.beneficiary.address_line2 is not None:
                values.append(self.beneficiary.address_line2)
        return values

    def to_record(self) -> bytes:
        """Serialize into the canonical tab-delimited UTF-8 record."""

        text = FIELD_SEPARATOR.join(["", RECORD_VERSION, FIELD_SEPARATOR.join(self.fields())])
        return text.encode("utf-8")

    def to_dict(self) -> dict[str, Any]:
        symbols = self.symbols
        data: dict[str, Any] = {
            "payment_option": self.option.name.lower(),
            "amount": format_amount(self.amount) or None,
            "currency": self.currency,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "variable_symbol": symbols.variable,
            "constant_symbol": symbols.constant,
            "specific_symbol": symbols.specific,
            "reference": self.reference,
            "note": self.note,
            "bank_accounts": [{"iban": account.iban, "bic": account.bic} for account in self.bank_accounts],
        }
        if self.beneficiary is not None:
            data["beneficiary"] = {
                "name": self.beneficiary.name,
                "address_line1": self.beneficiary.address_line1,
                "address_line2": self.beneficiary.address_line2,
            }
        return data
