"""
Stateful services for the sponsorship marketplace.

Services own in-memory stores and serialize mutations per entity.  They
compose the pure engines with kernel value objects and receive their
Clock and MarketplaceConfig by constructor injection.
"""

from sponsor_services.billing_service import (
    BillingLedger,
    InvoiceAndTransaction,
    PaymentResult,
    PlatformSettings,
)
from sponsor_services.commission_settings import CommissionSettings, RateChange
from sponsor_services.locking import EntityLocks
from sponsor_services.proposal_service import ProposalLifecycleManager
from sponsor_services.subscription_service import SubscriptionService
from sponsor_services.workflows import PROPOSAL_WORKFLOW

__all__ = [
    "BillingLedger",
    "CommissionSettings",
    "EntityLocks",
    "InvoiceAndTransaction",
    "PROPOSAL_WORKFLOW",
    "PaymentResult",
    "PlatformSettings",
    "ProposalLifecycleManager",
    "RateChange",
    "SubscriptionService",
]
