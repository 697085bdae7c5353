"""
Marketplace Reference Data (``sponsor_kernel.domain.marketplace``).

Read-only views of the records the event store and user directory hand to
the engines: events with their sponsorship tiers and audience, sponsor
profiles, and the pricing plans users subscribe to.  The engines never
load these themselves; callers pass them in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

from sponsor_kernel.domain.values import to_decimal


@dataclass(frozen=True)
class SponsorshipTier:
    """A priced sponsorship package belonging to an event."""
    id: str
    name: str
    price: Decimal
    currency: str = "USD"
    benefits: tuple[str, ...] = ()
    slots: int = 1

    def __post_init__(self):
        if not isinstance(self.price, Decimal):
            object.__setattr__(self, "price", to_decimal(self.price))
        if self.price < 0:
            raise ValueError(f"Tier {self.id} price must be non-negative")


@dataclass(frozen=True)
class Audience:
    """Who attends an event."""
    size: int | None = None
    interests: tuple[str, ...] | None = None
    age_range: str | None = None


@dataclass(frozen=True)
class EventProfile:
    """An event as seen by the matching and discovery engines."""
    id: str
    name: str
    organizer_id: str = ""
    category: str | None = None
    location: str = ""
    tiers: tuple[SponsorshipTier, ...] = ()
    audience: Audience | None = None
    created_at: date | None = None

    @property
    def min_tier_price(self) -> Decimal | None:
        if not self.tiers:
            return None
        return min(t.price for t in self.tiers)

    @property
    def max_tier_price(self) -> Decimal | None:
        if not self.tiers:
            return None
        return max(t.price for t in self.tiers)

    def get_tier(self, tier_id: str) -> SponsorshipTier | None:
        for tier in self.tiers:
            if tier.id == tier_id:
                return tier
        return None


@dataclass(frozen=True)
class SponsorProfile:
    """A sponsor's budget and industry."""
    id: str
    budget: Decimal | None = None
    industry: str | None = None
    name: str = ""

    def __post_init__(self):
        if self.budget is not None and not isinstance(self.budget, Decimal):
            object.__setattr__(self, "budget", to_decimal(self.budget))


class BillingPeriod(str, Enum):
    MONTH = "month"
    ANNUAL = "annual"


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class PricingPlan:
    """A subscription plan. ``price`` is None for custom-quoted plans."""
    id: str
    name: str
    price: Decimal | None
    currency: str
    billing_period: BillingPeriod
    commission_rate: Decimal | None = None
    max_active_proposals: int | None = None  # None = unlimited
    description: str = ""
    features: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_custom_priced(self) -> bool:
        return self.price is None


@dataclass(frozen=True)
class Subscription:
    """A user's current plan."""
    user_id: str
    plan_id: str
    status: SubscriptionStatus
    start_date: date
    renewal_date: date
    auto_renew: bool = True
