"""
Pure domain layer.

Value objects and models for sponsorship deals and billing, with NO
dependencies on storage, clock reads or I/O.  All domain objects are
immutable and deterministic.
"""

from sponsor_kernel.domain.billing import (
    BillingSummary,
    Invoice,
    InvoiceItem,
    InvoiceStatus,
    Transaction,
    TransactionStatus,
    TransactionType,
    UserRole,
)
from sponsor_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from sponsor_kernel.domain.currency import CurrencyInfo, CurrencyRegistry
from sponsor_kernel.domain.deals import (
    HistoryAction,
    HistoryEntry,
    NegotiationEntry,
    Proposal,
    ProposalStatus,
)
from sponsor_kernel.domain.marketplace import (
    Audience,
    BillingPeriod,
    EventProfile,
    PricingPlan,
    SponsorProfile,
    SponsorshipTier,
    Subscription,
    SubscriptionStatus,
)
from sponsor_kernel.domain.status import StatusColor, status_color, status_label
from sponsor_kernel.domain.values import Currency, Money, to_decimal
from sponsor_kernel.domain.workflow import Transition, Workflow

__all__ = [
    "Audience",
    "BillingPeriod",
    "BillingSummary",
    "Clock",
    "Currency",
    "CurrencyInfo",
    "CurrencyRegistry",
    "DeterministicClock",
    "EventProfile",
    "HistoryAction",
    "HistoryEntry",
    "Invoice",
    "InvoiceItem",
    "InvoiceStatus",
    "Money",
    "NegotiationEntry",
    "PricingPlan",
    "Proposal",
    "ProposalStatus",
    "SponsorProfile",
    "SponsorshipTier",
    "StatusColor",
    "Subscription",
    "SubscriptionStatus",
    "SystemClock",
    "Transaction",
    "TransactionStatus",
    "TransactionType",
    "Transition",
    "UserRole",
    "Workflow",
    "status_color",
    "status_label",
    "to_decimal",
]
