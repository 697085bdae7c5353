"""
sponsor_services.billing_service -- Invoices, payments and payouts.

Responsibility:
    Turn an accepted proposal into an invoice plus its payment
    transaction, settle invoices into organizer payouts, and aggregate
    per-user billing summaries.

Architecture position:
    Services -- stateful orchestration over engines + kernel.
    Uses the commission engine for every split and
    ``CommissionSettings`` for the default rate.  Dates come from the
    injected Clock; day offsets come from ``MarketplaceConfig``.

Invariants enforced:
    - Every invoice satisfies ``amount == commission + organizer_receives``.
    - Invoice and payment transaction are created together or not at all;
      all validation happens before either is stored.
    - At most one invoice per proposal.
    - An invoice is paid at most once and yields exactly one payout, even
      under concurrent ``process_payment`` calls.
    - Rate changes are not retroactive; each invoice keeps the rate it
      was computed with.

Failure modes:
    - ValidationError: proposal not accepted, bad role, bad filters.
    - AlreadyInvoicedError: the proposal already has an invoice.
    - InvoiceNotFoundError: unknown invoice id.
    - AlreadyPaidError: the invoice was already paid.
    - InvalidRateError: commission rate outside [0, 1].

Audit relevance:
    Every invoice, payment, payout and rate change is logged with its
    ids and Decimal amounts as strings.
"""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, replace
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from sponsor_config.schema import MarketplaceConfig
from sponsor_engines import calculate_deal_value, validate_commission_rate
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
from sponsor_kernel.domain.clock import Clock, SystemClock
from sponsor_kernel.domain.deals import Proposal, ProposalStatus
from sponsor_kernel.exceptions import (
    AlreadyInvoicedError,
    AlreadyPaidError,
    InvoiceNotFoundError,
    ValidationError,
)
from sponsor_kernel.logging_config import LogContext, get_logger
from sponsor_services.commission_settings import CommissionSettings, RateChange
from sponsor_services.locking import EntityLocks

logger = get_logger("services.billing")

PAYMENT_METHOD = "credit_card"
PAYOUT_METHOD = "bank_transfer"

_ZERO = Decimal("0")


@dataclass(frozen=True)
class InvoiceAndTransaction:
    """Result of billing an accepted proposal."""
    invoice: Invoice
    transaction: Transaction


@dataclass(frozen=True)
class PaymentResult:
    """Result of settling an invoice."""
    invoice: Invoice
    payout_transaction: Transaction


@dataclass(frozen=True)
class PlatformSettings:
    """Admin view of the platform fee and payout settings."""
    default_commission_rate: Decimal
    payment_processing_fee: Decimal
    payout_schedule: str
    payout_delay_days: int
    invoice_due_days: int
    active_plan_ids: tuple[str, ...]


def _parse_enum(field: str, enum_cls: type[Enum], value):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(
            field, value, f"must be one of {[m.value for m in enum_cls]}",
        ) from None


def _involves(record: Invoice | Transaction, user_id: str) -> bool:
    return record.sponsor_id == user_id or record.organizer_id == user_id


class BillingLedger:
    """
    In-memory invoice and transaction ledger.

    Contract:
        Receives CommissionSettings, an optional Clock and an optional
        MarketplaceConfig.  Without a config the built-in defaults apply
        (30 day invoice terms, 1 day payout delay).
    """

    def __init__(
        self,
        settings: CommissionSettings | None = None,
        clock: Clock | None = None,
        config: MarketplaceConfig | None = None,
    ):
        self._config = config or MarketplaceConfig()
        self._settings = settings or CommissionSettings(
            self._config.default_commission_rate, clock=clock,
        )
        self._clock = clock or SystemClock()
        self._invoices: dict[str, Invoice] = {}
        self._transactions: list[Transaction] = []
        self._invoice_by_proposal: dict[str, str] = {}
        self._store_lock = threading.Lock()
        self._locks = EntityLocks()
        self._invoice_sequence = itertools.count(1)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_invoice_and_transaction(
        self,
        proposal: Proposal,
        sponsor_id: str,
        organizer_id: str,
        commission_rate: Decimal | int | float | str | None = None,
    ) -> InvoiceAndTransaction:
        """
        Bill an accepted proposal: one unpaid invoice and one completed
        payment transaction.

        Raises:
            ValidationError: Proposal not accepted or missing party ids.
            AlreadyInvoicedError: Proposal already has an invoice.
            InvalidRateError: ``commission_rate`` outside [0, 1].
        """
        if proposal.status != ProposalStatus.ACCEPTED:
            raise ValidationError(
                "proposal.status", proposal.status.value,
                "only accepted proposals can be invoiced",
            )
        for field_name, value in (("sponsor_id", sponsor_id), ("organizer_id", organizer_id)):
            if not value:
                raise ValidationError(field_name, value, "must be a non-empty string")

        if commission_rate is None:
            rate = self._settings.default_commission_rate
        else:
            rate = validate_commission_rate(commission_rate)
        try:
            deal = calculate_deal_value(proposal.amount, rate)
        except ValueError as e:
            raise ValidationError("proposal.amount", proposal.sponsorship_amount, str(e)) from None

        with LogContext.bind(proposal_id=proposal.id):
            with self._locks.hold(f"proposal:{proposal.id}"):
                with self._store_lock:
                    existing = self._invoice_by_proposal.get(proposal.id)
                if existing is not None:
                    raise AlreadyInvoicedError(proposal.id, existing)

                now = self._clock.now()
                issue_date = now.date()
                amount = deal.sponsorship_amount.amount
                invoice = Invoice(
                    id=f"inv-{uuid4().hex}",
                    number=self._next_invoice_number(issue_date),
                    proposal_id=proposal.id,
                    sponsor_id=sponsor_id,
                    organizer_id=organizer_id,
                    amount=amount,
                    commission=deal.commission.amount,
                    organizer_receives=deal.organizer_receives.amount,
                    commission_rate=deal.commission_rate,
                    currency=proposal.currency,
                    issue_date=issue_date,
                    due_date=issue_date + timedelta(days=self._config.invoice_due_days),
                    items=(InvoiceItem(
                        description=f"Sponsorship - {proposal.event_id}",
                        quantity=1,
                        unit_price=amount,
                        total=amount,
                    ),),
                )
                transaction = Transaction(
                    id=f"txn-{uuid4().hex}",
                    type=TransactionType.PAYMENT,
                    proposal_id=proposal.id,
                    amount=amount,
                    currency=proposal.currency,
                    status=TransactionStatus.COMPLETED,
                    method=PAYMENT_METHOD,
                    created_at=issue_date,
                    completed_at=issue_date,
                    sponsor_id=sponsor_id,
                    organizer_id=organizer_id,
                    invoice_id=invoice.id,
                    commission=invoice.commission,
                    organizer_receives=invoice.organizer_receives,
                )

                with self._store_lock:
                    self._invoices[invoice.id] = invoice
                    self._invoice_by_proposal[proposal.id] = invoice.id
                    self._transactions.append(transaction)

            logger.info("invoice_created", extra={
                "invoice_id": invoice.id,
                "invoice_number": invoice.number,
                "amount": str(invoice.amount),
                "commission": str(invoice.commission),
                "organizer_receives": str(invoice.organizer_receives),
                "commission_rate": str(invoice.commission_rate),
                "currency": invoice.currency,
                "due_date": invoice.due_date,
                "transaction_id": transaction.id,
            })
        return InvoiceAndTransaction(invoice=invoice, transaction=transaction)

    def process_payment(self, invoice_id: str) -> PaymentResult:
        """
        Mark an invoice paid and emit the organizer payout.

        The payout completes ``payout_delay_days`` after the payment date.

        Raises:
            InvoiceNotFoundError: Unknown ``invoice_id``.
            AlreadyPaidError: The invoice is already paid.
        """
        # unknown ids fail before a lock entry is created for them
        self.get_invoice(invoice_id)

        with LogContext.bind(invoice_id=invoice_id):
            with self._locks.hold(f"invoice:{invoice_id}"):
                invoice = self.get_invoice(invoice_id)
                if invoice.is_paid:
                    logger.warning("invoice_payment_rejected", extra={
                        "invoice_number": invoice.number,
                        "reason": "already_paid",
                    })
                    raise AlreadyPaidError(invoice.id, invoice.number)

                now = self._clock.now()
                paid_on = now.date()
                paid = replace(invoice, status=InvoiceStatus.PAID, paid_at=now)
                payout = Transaction(
                    id=f"txn-payout-{uuid4().hex}",
                    type=TransactionType.PAYOUT,
                    proposal_id=invoice.proposal_id,
                    amount=invoice.organizer_receives,
                    currency=invoice.currency,
                    status=TransactionStatus.COMPLETED,
                    method=PAYOUT_METHOD,
                    created_at=paid_on,
                    completed_at=paid_on + timedelta(days=self._config.payout_delay_days),
                    organizer_id=invoice.organizer_id,
                    invoice_id=invoice.id,
                )

                with self._store_lock:
                    self._invoices[paid.id] = paid
                    self._transactions.append(payout)

            logger.info("invoice_paid", extra={
                "invoice_number": paid.number,
                "payout_transaction_id": payout.id,
                "payout_amount": str(payout.amount),
                "payout_completed_at": payout.completed_at,
            })
        return PaymentResult(invoice=paid, payout_transaction=payout)

    def update_commission_rate(
        self,
        new_rate: Decimal | int | float | str,
        changed_by: str = "admin",
    ) -> RateChange:
        """Change the default rate for future invoices only."""
        return self._settings.update_rate(new_rate, changed_by=changed_by)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_invoice(self, invoice_id: str) -> Invoice:
        with self._store_lock:
            invoice = self._invoices.get(invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)
        return invoice

    def get_invoices(
        self,
        user_id: str | None = None,
        status: InvoiceStatus | str | None = None,
    ) -> list[Invoice]:
        """Invoices where the user is either party, newest issue date first."""
        wanted = _parse_enum("status", InvoiceStatus, status) if status is not None else None
        with self._store_lock:
            invoices = list(self._invoices.values())
        matched = [
            i for i in invoices
            if (user_id is None or _involves(i, user_id))
            and (wanted is None or i.status == wanted)
        ]
        return sorted(matched, key=lambda i: i.issue_date, reverse=True)

    def get_transactions(
        self,
        user_id: str | None = None,
        type: TransactionType | str | None = None,
        status: TransactionStatus | str | None = None,
    ) -> list[Transaction]:
        """Transactions where the user is either party, newest first."""
        wanted_type = _parse_enum("type", TransactionType, type) if type is not None else None
        wanted_status = (
            _parse_enum("status", TransactionStatus, status) if status is not None else None
        )
        with self._store_lock:
            transactions = list(self._transactions)
        matched = [
            t for t in transactions
            if (user_id is None or _involves(t, user_id))
            and (wanted_type is None or t.type == wanted_type)
            and (wanted_status is None or t.status == wanted_status)
        ]
        return sorted(matched, key=lambda t: t.created_at, reverse=True)

    def get_billing_summary(self, user_id: str, role: UserRole | str) -> BillingSummary:
        """
        Aggregate a user's billing figures.

        Sponsors are summed over their payments and unpaid invoices;
        organizers over their payouts.  Other roles get counts only.
        Amounts are summed as-is without currency conversion.
        """
        user_role = _parse_enum("role", UserRole, role)
        transactions = self.get_transactions(user_id=user_id)
        invoices = self.get_invoices(user_id=user_id)

        total = paid = pending = _ZERO
        if user_role is UserRole.SPONSOR:
            payments = [
                t for t in transactions
                if t.type is TransactionType.PAYMENT and t.sponsor_id == user_id
            ]
            total = sum((t.amount for t in payments), _ZERO)
            paid = sum(
                (t.amount for t in payments if t.status is TransactionStatus.COMPLETED),
                _ZERO,
            )
            pending = sum(
                (i.amount for i in invoices
                 if i.status is InvoiceStatus.UNPAID and i.sponsor_id == user_id),
                _ZERO,
            )
        elif user_role is UserRole.ORGANIZER:
            payouts = [
                t for t in transactions
                if t.type is TransactionType.PAYOUT and t.organizer_id == user_id
            ]
            total = sum((t.amount for t in payouts), _ZERO)
            paid = sum(
                (t.amount for t in payouts if t.status is TransactionStatus.COMPLETED),
                _ZERO,
            )
            pending = sum(
                (t.amount for t in payouts if t.status is not TransactionStatus.COMPLETED),
                _ZERO,
            )

        return BillingSummary(
            user_id=user_id,
            role=user_role,
            total_amount=total,
            paid_amount=paid,
            pending_amount=pending,
            transaction_count=len(transactions),
            invoice_count=len(invoices),
        )

    def get_commission_settings(self) -> CommissionSettings:
        return self._settings

    def get_platform_settings(self) -> PlatformSettings:
        """Current commission rate together with the configured fees and payout terms."""
        return PlatformSettings(
            default_commission_rate=self._settings.default_commission_rate,
            payment_processing_fee=self._config.payment_processing_fee,
            payout_schedule=self._config.payout_schedule,
            payout_delay_days=self._config.payout_delay_days,
            invoice_due_days=self._config.invoice_due_days,
            active_plan_ids=tuple(p.id for p in self._config.pricing_plans),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _next_invoice_number(self, issue_date: date) -> str:
        with self._store_lock:
            sequence = next(self._invoice_sequence)
        return f"INV-{issue_date:%Y%m}-{sequence:05d}"
