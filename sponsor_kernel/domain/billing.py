"""
Billing Domain Models (``sponsor_kernel.domain.billing``).

Invoices, payment/payout transactions and per-user billing summaries.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* ``Invoice.amount == Invoice.commission + Invoice.organizer_receives``,
  checked at construction.
* Monetary fields are ``Decimal`` -- NEVER ``float``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum


class UserRole(str, Enum):
    """Marketplace roles."""
    SPONSOR = "sponsor"
    ORGANIZER = "organizer"
    AGENCY = "agency"
    ADMIN = "admin"


class InvoiceStatus(str, Enum):
    UNPAID = "unpaid"
    PAID = "paid"


class TransactionType(str, Enum):
    PAYMENT = "payment"  # sponsor -> platform
    PAYOUT = "payout"  # platform -> organizer


class TransactionStatus(str, Enum):
    COMPLETED = "completed"
    PENDING = "pending"
    PROCESSING = "processing"
    FAILED = "failed"


@dataclass(frozen=True)
class InvoiceItem:
    """A line item on an invoice."""
    description: str
    quantity: int
    unit_price: Decimal
    total: Decimal


@dataclass(frozen=True)
class Invoice:
    """Billing document for an accepted proposal, owed by the sponsor."""
    id: str
    number: str
    proposal_id: str
    sponsor_id: str
    organizer_id: str
    amount: Decimal
    commission: Decimal
    organizer_receives: Decimal
    commission_rate: Decimal
    currency: str
    issue_date: date
    due_date: date
    status: InvoiceStatus = InvoiceStatus.UNPAID
    items: tuple[InvoiceItem, ...] = field(default_factory=tuple)
    paid_at: datetime | None = None

    def __post_init__(self):
        if self.commission + self.organizer_receives != self.amount:
            raise ValueError(
                f"Invoice {self.number} does not split exactly: "
                f"{self.commission} + {self.organizer_receives} != {self.amount}"
            )
        if self.due_date < self.issue_date:
            raise ValueError("due_date must not precede issue_date")

    @property
    def is_paid(self) -> bool:
        return self.status == InvoiceStatus.PAID


@dataclass(frozen=True)
class Transaction:
    """A ledger entry recording money movement."""
    id: str
    type: TransactionType
    proposal_id: str
    amount: Decimal
    currency: str
    status: TransactionStatus
    method: str
    created_at: date
    completed_at: date | None = None
    sponsor_id: str | None = None
    organizer_id: str | None = None
    invoice_id: str | None = None
    # Only set on payment transactions
    commission: Decimal | None = None
    organizer_receives: Decimal | None = None


@dataclass(frozen=True)
class BillingSummary:
    """Aggregated billing figures for one user."""
    user_id: str
    role: UserRole
    total_amount: Decimal = Decimal("0")
    paid_amount: Decimal = Decimal("0")
    pending_amount: Decimal = Decimal("0")
    transaction_count: int = 0
    invoice_count: int = 0
