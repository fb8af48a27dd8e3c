"""Unit tests for the exact GBP value type."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from gbptax.backend.services.calculators.money import (
    MAX,
    MAX_POUNDS,
    CurrencyOverflowError,
    CurrencyUnderflowError,
    Gbp,
    GbpParseError,
    InvalidDecimal,
    InvalidNumber,
)


def test_new_carries_excess_pence_into_pounds() -> None:
    amount = Gbp.new(1, 250)

    assert amount == Gbp.new(3, 50)
    assert (amount.pounds, amount.pence) == (3, 50)


def test_from_pounds_is_exact() -> None:
    amount = Gbp.from_pounds(100)

    assert amount.total_pence == 10_000
    assert amount.pence == 0


def test_new_rejects_overflow_past_maximum() -> None:
    with pytest.raises(CurrencyOverflowError):
        Gbp.new(MAX_POUNDS, 100)


def test_new_rejects_negative_components() -> None:
    with pytest.raises(ValueError):
        Gbp.new(-1, 0)
    with pytest.raises(ValueError):
        Gbp.new(0, -1)


def test_constructor_requires_integer_pence() -> None:
    with pytest.raises(TypeError):
        Gbp(1.5)  # type: ignore[arg-type]
    with pytest.raises(CurrencyUnderflowError):
        Gbp(-1)


def test_amounts_are_immutable() -> None:
    amount = Gbp.new(1, 0)

    with pytest.raises(FrozenInstanceError):
        amount.total_pence = 5  # type: ignore[misc]


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("£1,234,567.89", Gbp.new(1_234_567, 89)),
        ("100", Gbp.new(100, 0)),
        ("£0.05", Gbp.new(0, 5)),
        ("12.50", Gbp.new(12, 50)),
        ("  £43,500  ", Gbp.new(43_500, 0)),
        ("4,294,967,295.99", MAX),
    ],
)
def test_parse_accepts_supported_formats(text: str, expected: Gbp) -> None:
    assert Gbp.parse(text) == expected


@pytest.mark.parametrize("text", ["1.5", "1.505", "1.", "£10.1"])
def test_parse_rejects_decimals_that_are_not_two_digits(text: str) -> None:
    with pytest.raises(InvalidDecimal):
        Gbp.parse(text)


@pytest.mark.parametrize(
    "text", ["abc", "", "£", "-5", "1.ab", "£.50", "4294967296", "1 000", "9" * 5000]
)
def test_parse_rejects_invalid_numbers(text: str) -> None:
    with pytest.raises(InvalidNumber):
        Gbp.parse(text)


def test_parse_errors_are_value_errors() -> None:
    assert issubclass(GbpParseError, ValueError)
    assert issubclass(InvalidDecimal, GbpParseError)
    assert issubclass(InvalidNumber, GbpParseError)


@pytest.mark.parametrize(
    ("amount", "expected"),
    [
        (Gbp.new(1_234_567, 89), "£1,234,567.89"),
        (Gbp.zero(), "£0.00"),
        (Gbp.new(5, 7), "£5.07"),
        (Gbp.new(999, 99), "£999.99"),
        (MAX, "£4,294,967,295.99"),
    ],
)
def test_str_groups_thousands_and_pads_pence(amount: Gbp, expected: str) -> None:
    assert str(amount) == expected
    assert str(amount) == str(amount)


def test_format_spec_applies_to_display_text() -> None:
    assert f"{Gbp.new(5, 0):>8}" == "   £5.00"
    assert repr(Gbp.new(1, 0)) == "Gbp('£1.00')"


@pytest.mark.parametrize(
    "amount",
    [Gbp.zero(), Gbp.new(0, 1), Gbp.new(12_345, 67), Gbp.new(1_000_000, 0), MAX],
)
def test_parse_reads_back_formatted_amounts(amount: Gbp) -> None:
    assert Gbp.parse(str(amount)) == amount


def test_ordering_follows_value() -> None:
    amounts = [Gbp.new(1, 0), Gbp.new(0, 99), Gbp.new(10, 0)]

    assert sorted(amounts) == [Gbp.new(0, 99), Gbp.new(1, 0), Gbp.new(10, 0)]
    assert Gbp.new(1, 0) > Gbp.new(0, 99)
    assert min(Gbp.new(3, 0), Gbp.new(2, 50)) == Gbp.new(2, 50)


def test_addition_carries_pence() -> None:
    assert Gbp.new(735, 62) + Gbp.new(437, 83) == Gbp.new(1173, 45)
    assert Gbp.new(0, 50) + Gbp.new(0, 50) == Gbp.new(1, 0)


def test_addition_rejects_overflow() -> None:
    with pytest.raises(CurrencyOverflowError):
        MAX + Gbp.new(0, 1)


def test_subtraction_borrows_pence() -> None:
    assert Gbp.new(1000, 0) - Gbp.new(437, 83) == Gbp.new(562, 17)


def test_in_place_subtraction_rebinds_to_difference() -> None:
    balance = Gbp.new(1000, 0)
    original = balance

    balance -= Gbp.new(437, 83)

    assert balance == Gbp.new(562, 17)
    assert original == Gbp.new(1000, 0)


def test_subtraction_rejects_negative_results() -> None:
    with pytest.raises(CurrencyUnderflowError):
        Gbp.new(1, 0) - Gbp.new(1, 1)


def test_subtract_then_add_restores_value() -> None:
    a = Gbp.new(43_500, 17)
    b = Gbp.new(11_850, 99)

    assert (a - b) + b == a


def test_multiplication_by_rate() -> None:
    assert Gbp.new(0, 99) * 5.0 == Gbp.new(4, 95)
    assert 5.0 * Gbp.new(0, 99) == Gbp.new(4, 95)
    assert Gbp.new(19_429, 0) * 0.21 == Gbp.new(4_080, 9)


@pytest.mark.parametrize(("pence", "expected"), [(1, 1), (3, 2), (5, 3), (4, 2)])
def test_multiplication_rounds_half_away_from_zero(pence: int, expected: int) -> None:
    assert Gbp.from_pence(pence) * 0.5 == Gbp.from_pence(expected)


def test_multiplication_rejects_negative_rates() -> None:
    with pytest.raises(CurrencyUnderflowError):
        Gbp.new(1, 0) * -0.5


@pytest.mark.parametrize("rate", [1e20, float("inf"), float("nan")])
def test_multiplication_rejects_results_beyond_maximum(rate: float) -> None:
    with pytest.raises(CurrencyOverflowError):
        MAX * rate


def test_multiplication_by_negative_infinity_underflows() -> None:
    with pytest.raises(CurrencyUnderflowError):
        Gbp.new(1, 0) * float("-inf")


def test_multiplication_keeps_maximum_at_rate_one() -> None:
    assert MAX * 1.0 == MAX


def test_multiplication_requires_numeric_rate() -> None:
    with pytest.raises(TypeError):
        Gbp.new(1, 0) * "2"  # type: ignore[operator]


def test_sum_folds_from_zero() -> None:
    amounts = [Gbp.new(5, 0), Gbp.new(0, 63)]

    assert Gbp.sum(amounts) == Gbp.new(5, 63)
    assert Gbp.sum([]) == Gbp.zero()
    assert sum(amounts, Gbp.zero()) == Gbp.new(5, 63)


def test_zero_is_falsy() -> None:
    assert not Gbp.zero()
    assert Gbp.new(0, 1)
