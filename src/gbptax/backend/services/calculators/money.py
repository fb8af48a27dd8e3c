"""Exact pounds-and-pence arithmetic for tax calculations.

Amounts are stored as a single integer count of pence so that addition and
subtraction never need to carry or borrow between pounds and pence. The only
place a float touches money is :meth:`Gbp.__mul__`, where the result is rounded
straight back to whole pence.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from numbers import Real
from typing import Iterable

PENCE_PER_POUND = 100
MAX_POUNDS = 2**32 - 1
MAX_PENCE = MAX_POUNDS * PENCE_PER_POUND + (PENCE_PER_POUND - 1)
CURRENCY_SYMBOL = "£"
_MAX_POUND_DIGITS = len(str(MAX_POUNDS))


class GbpParseError(ValueError):
    """Raised when text cannot be interpreted as a GBP amount."""


class InvalidNumber(GbpParseError):
    """The pounds or pence portion is not a valid non-negative integer."""


class InvalidDecimal(GbpParseError):
    """A decimal part is present but is not exactly two digits long."""


class CurrencyArithmeticError(ArithmeticError):
    """Raised when an operation would leave the representable range."""


class CurrencyOverflowError(CurrencyArithmeticError):
    """The result exceeds :data:`MAX`."""


class CurrencyUnderflowError(CurrencyArithmeticError):
    """The result would be negative."""


def _checked(total_pence: int) -> int:
    if total_pence < 0:
        raise CurrencyUnderflowError(f"GBP amounts cannot be negative ({total_pence}p)")
    if total_pence > MAX_PENCE:
        raise CurrencyOverflowError(f"GBP amount {total_pence}p exceeds the maximum")
    return total_pence


def _round_half_away_from_zero(value: float) -> int:
    # Decimal(float) is exact, so ties are only detected on true binary halves.
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _parse_digits(text: str, label: str) -> int:
    if not text or not (text.isascii() and text.isdigit()):
        raise InvalidNumber(f"Invalid {label} value: {text!r}")
    if len(text.lstrip("0")) > _MAX_POUND_DIGITS:
        raise InvalidNumber(f"{label.capitalize()} value is too large: {text[:20]}...")
    return int(text)


@dataclass(frozen=True, order=True)
class Gbp:
    """An amount of Great British Pounds, held as whole pence.

    Instances are immutable and ordered by value. Arithmetic is exact and
    refuses to produce negative amounts or amounts above :data:`MAX`:

    >>> Gbp.new(735, 62) + Gbp.new(437, 83)
    Gbp('£1,173.45')
    >>> str(Gbp.parse("£1,234,567.89"))
    '£1,234,567.89'
    """

    total_pence: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.total_pence, bool) or not isinstance(self.total_pence, int):
            raise TypeError("GBP amounts must be built from integer pence")
        _checked(self.total_pence)

    @classmethod
    def new(cls, pounds: int, pence: int = 0) -> Gbp:
        """Build an amount from pounds and pence, carrying pence above 99."""

        if pounds < 0 or pence < 0:
            raise ValueError("Pounds and pence must be non-negative")
        return cls(_checked(pounds * PENCE_PER_POUND + pence))

    @classmethod
    def from_pounds(cls, pounds: int) -> Gbp:
        return cls.new(pounds, 0)

    @classmethod
    def from_pence(cls, pence: int) -> Gbp:
        return cls(pence)

    @classmethod
    def zero(cls) -> Gbp:
        return cls(0)

    @classmethod
    def parse(cls, text: str) -> Gbp:
        """Parse amounts such as ``£1,234,567.89``, ``1234`` or ``12.50``.

        A leading ``£`` and thousands separators are optional. When a decimal
        point is present it must be followed by exactly two digits.
        """

        cleaned = text.strip()
        if cleaned.startswith(CURRENCY_SYMBOL):
            cleaned = cleaned[len(CURRENCY_SYMBOL):]

        pounds_text, separator, pence_text = cleaned.partition(".")
        if not separator:
            pence_text = "00"
        if len(pence_text) != 2:
            raise InvalidDecimal(f"Invalid decimal for GBP value: {text!r}")

        pounds = _parse_digits(pounds_text.replace(",", ""), "pounds")
        if pounds > MAX_POUNDS:
            raise InvalidNumber(f"Pounds value is too large: {pounds}")
        pence = _parse_digits(pence_text, "pence")

        return cls.new(pounds, pence)

    @classmethod
    def sum(cls, amounts: Iterable[Gbp]) -> Gbp:
        """Add up ``amounts``, starting from zero."""

        total = cls.zero()
        for amount in amounts:
            total = total + amount
        return total

    @property
    def pounds(self) -> int:
        return self.total_pence // PENCE_PER_POUND

    @property
    def pence(self) -> int:
        return self.total_pence % PENCE_PER_POUND

    def __str__(self) -> str:
        return f"{CURRENCY_SYMBOL}{self.pounds:,}.{self.pence:02d}"

    def __repr__(self) -> str:
        return f"Gbp({str(self)!r})"

    def __format__(self, format_spec: str) -> str:
        return format(str(self), format_spec)

    def __add__(self, other: object) -> Gbp:
        if not isinstance(other, Gbp):
            return NotImplemented
        return Gbp(_checked(self.total_pence + other.total_pence))

    def __sub__(self, other: object) -> Gbp:
        if not isinstance(other, Gbp):
            return NotImplemented
        return Gbp(_checked(self.total_pence - other.total_pence))

    def __mul__(self, rate: object) -> Gbp:
        """Multiply by a rate, rounding to the nearest penny (ties away from zero)."""

        if isinstance(rate, bool) or not isinstance(rate, Real):
            return NotImplemented
        product = float(self.total_pence) * float(rate)
        if math.isnan(product) or product >= MAX_PENCE + 0.5:
            raise CurrencyOverflowError(f"{self} * {rate} exceeds the maximum")
        if math.isinf(product):
            raise CurrencyUnderflowError(f"{self} * {rate} is negative")
        return Gbp(_checked(_round_half_away_from_zero(product)))

    __rmul__ = __mul__

    def __bool__(self) -> bool:
        return self.total_pence != 0


MAX = Gbp(MAX_PENCE)


__all__ = [
    "CURRENCY_SYMBOL",
    "CurrencyArithmeticError",
    "CurrencyOverflowError",
    "CurrencyUnderflowError",
    "Gbp",
    "GbpParseError",
    "InvalidDecimal",
    "InvalidNumber",
    "MAX",
    "MAX_PENCE",
    "MAX_POUNDS",
    "PENCE_PER_POUND",
]
