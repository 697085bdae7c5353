"""
Configuration schema (``sponsor_config.schema``).

Frozen dataclasses describing marketplace billing settings.  Built by
``sponsor_config.loader`` from YAML; consumed by services through
``sponsor_config.get_active_config()``.

Invariants enforced
-------------------
* ``default_commission_rate`` and ``payment_processing_fee`` lie in [0, 1].
* Day counts are non-negative; ``invoice_due_days`` is positive.
* ``default_currency`` and every plan currency are supported ISO 4217 codes.
* Plan ids are unique.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from sponsor_kernel.domain.currency import CurrencyRegistry
from sponsor_kernel.domain.marketplace import PricingPlan

_ZERO = Decimal("0")
_ONE = Decimal("1")


@dataclass(frozen=True)
class MarketplaceConfig:
    """Marketplace billing configuration."""

    default_commission_rate: Decimal = Decimal("0.15")
    default_currency: str = "USD"
    invoice_due_days: int = 30
    payout_delay_days: int = 1
    subscription_term_days: int = 365
    payout_schedule: str = "weekly"
    payment_processing_fee: Decimal = Decimal("0.029")
    pricing_plans: tuple[PricingPlan, ...] = field(default_factory=tuple)
    checksum: str = ""

    def __post_init__(self):
        if not (_ZERO <= self.default_commission_rate <= _ONE):
            raise ValueError(
                f"default_commission_rate must be between 0 and 1, "
                f"got {self.default_commission_rate}"
            )
        if not (_ZERO <= self.payment_processing_fee <= _ONE):
            raise ValueError(
                f"payment_processing_fee must be between 0 and 1, "
                f"got {self.payment_processing_fee}"
            )
        if self.invoice_due_days <= 0:
            raise ValueError("invoice_due_days must be positive")
        if self.payout_delay_days < 0:
            raise ValueError("payout_delay_days must be non-negative")
        if self.subscription_term_days <= 0:
            raise ValueError("subscription_term_days must be positive")
        if not CurrencyRegistry.is_valid(self.default_currency):
            raise ValueError(f"Invalid default_currency: {self.default_currency}")

        seen: set[str] = set()
        for plan in self.pricing_plans:
            if plan.id in seen:
                raise ValueError(f"Duplicate pricing plan id: {plan.id}")
            seen.add(plan.id)
            if not CurrencyRegistry.is_valid(plan.currency):
                raise ValueError(f"Plan {plan.id} has invalid currency: {plan.currency}")
            if plan.commission_rate is not None and not (_ZERO <= plan.commission_rate <= _ONE):
                raise ValueError(f"Plan {plan.id} commission_rate must be between 0 and 1")

    def get_plan(self, plan_id: str) -> PricingPlan | None:
        for plan in self.pricing_plans:
            if plan.id == plan_id:
                return plan
        return None
