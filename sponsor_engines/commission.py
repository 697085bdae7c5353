"""
Commission Calculator.

Pure functions with deterministic behavior. No I/O.

Derives the platform commission and organizer payout from a sponsorship
amount, plus the two marketing ratios shown on analytics pages (CPM and
ROI).  All arithmetic is Decimal; the commission is rounded to the
currency's minor unit and the organizer share is the exact remainder, so
``commission + organizer_receives == sponsorship_amount`` always holds.

Usage:
    from sponsor_engines.commission import calculate_deal_value
    from sponsor_kernel.domain.values import Money

    deal = calculate_deal_value(Money.of("50000", "USD"), Decimal("0.15"))
    deal.commission          # Money(7500.00 USD)
    deal.organizer_receives  # Money(42500.00 USD)
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from sponsor_engines.tracer import traced_engine
from sponsor_kernel.domain.values import Money, to_decimal
from sponsor_kernel.exceptions import InvalidRateError
from sponsor_kernel.logging_config import get_logger

logger = get_logger("engines.commission")

DEFAULT_COMMISSION_RATE = Decimal("0.15")

_ZERO = Decimal("0")
_ONE = Decimal("1")
_THOUSAND = Decimal("1000")
_HUNDRED = Decimal("100")


@dataclass(frozen=True)
class DealValue:
    """How a sponsorship amount splits between platform and organizer."""

    sponsorship_amount: Money
    commission: Money
    organizer_receives: Money
    commission_rate: Decimal


def validate_commission_rate(rate: Decimal | int | float | str) -> Decimal:
    """
    Parse and bound-check a commission rate.

    Raises:
        InvalidRateError: If the rate is not a number in [0, 1].
    """
    try:
        value = to_decimal(rate)
    except ValueError as e:
        raise InvalidRateError(rate) from e
    if value < _ZERO or value > _ONE:
        raise InvalidRateError(rate)
    return value


def _as_money(amount: Money | Decimal | int | float | str, currency: str) -> Money:
    if isinstance(amount, Money):
        return amount
    return Money.of(amount, currency)


@traced_engine("commission", "1.0", fingerprint_fields=("amount", "rate"))
def calculate_commission(
    amount: Money | Decimal | int | float | str,
    rate: Decimal | int | float | str = DEFAULT_COMMISSION_RATE,
    currency: str = "USD",
) -> Money:
    """
    Platform commission = amount * rate, rounded to the currency minor unit.

    ``currency`` is only used when ``amount`` is not already Money.

    Raises:
        InvalidRateError: If rate is outside [0, 1].
        ValueError: If amount is not a number or currency is invalid.
    """
    rate_value = validate_commission_rate(rate)
    money = _as_money(amount, currency)
    return (money * rate_value).round()


@traced_engine("commission", "1.0", fingerprint_fields=("sponsorship_amount", "rate"))
def calculate_deal_value(
    sponsorship_amount: Money | Decimal | int | float | str,
    rate: Decimal | int | float | str = DEFAULT_COMMISSION_RATE,
    currency: str = "USD",
) -> DealValue:
    """
    Split a sponsorship amount into commission and organizer payout.

    Postconditions:
        commission + organizer_receives == sponsorship_amount, exactly.

    Raises:
        InvalidRateError: If rate is outside [0, 1].
        ValueError: If the amount is negative, malformed or too large to round.
    """
    rate_value = validate_commission_rate(rate)
    money = _as_money(sponsorship_amount, currency)
    if money.is_negative:
        raise ValueError(f"sponsorship_amount must be non-negative, got {money}")

    commission = (money * rate_value).round()
    organizer_receives = money - commission

    logger.debug("deal_value_calculated", extra={
        "sponsorship_amount": str(money.amount),
        "currency": money.currency.code,
        "commission_rate": str(rate_value),
        "commission": str(commission.amount),
        "organizer_receives": str(organizer_receives.amount),
    })

    return DealValue(
        sponsorship_amount=money,
        commission=commission,
        organizer_receives=organizer_receives,
        commission_rate=rate_value,
    )


def _amount_of(value: Money | Decimal | int | float | str) -> Decimal:
    return value.amount if isinstance(value, Money) else to_decimal(value)


@traced_engine("commission", "1.0", fingerprint_fields=("cost", "impressions"))
def calculate_cpm(
    cost: Money | Decimal | int | float | str,
    impressions: int | None,
) -> Decimal:
    """Cost per thousand impressions. Zero when there are no impressions."""
    if not impressions:
        return _ZERO
    return _amount_of(cost) / Decimal(impressions) * _THOUSAND


@traced_engine("commission", "1.0", fingerprint_fields=("investment", "return_value"))
def calculate_roi(
    investment: Money | Decimal | int | float | str | None,
    return_value: Money | Decimal | int | float | str,
) -> Decimal:
    """Return on investment as a percentage. Zero when nothing was invested."""
    if investment is None:
        return _ZERO
    invested = _amount_of(investment)
    if invested == _ZERO:
        return _ZERO
    return (_amount_of(return_value) - invested) / invested * _HUNDRED
