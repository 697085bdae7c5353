"""
Typed Exception Hierarchy for the Sponsor Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Deal and billing operations are called from route handlers and UI layers
that must present a precise message to a user. Matching on message text is
fragile, so every failure is:
  1. A TYPED exception class (catch by type, not message)
  2. Tagged with a CODE attribute (machine-readable, API-safe)
  3. Carrying structured DATA (ids, statuses, rates)

Example - WRONG way to handle errors:
    try:
        ledger.process_payment(invoice_id)
    except Exception as e:
        if "already paid" in str(e):  # FRAGILE
            show_receipt()

Example - RIGHT way:
    try:
        ledger.process_payment(invoice_id)
    except AlreadyPaidError as e:
        show_receipt(e.invoice_id)
        api_response(code=e.code)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    SponsorKernelError (base)
    |
    +-- NotFoundError
    |   +-- ProposalNotFoundError
    |   +-- InvoiceNotFoundError
    |   +-- PlanNotFoundError
    |
    +-- ValidationError
    |
    +-- LifecycleError
    |   +-- InvalidTransitionError
    |
    +-- BillingError
        +-- AlreadyPaidError
        +-- AlreadyInvoicedError
        +-- InvalidRateError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category   | Code                 | When Raised
-----------|----------------------|------------------------------------------
Lookup     | NOT_FOUND            | Unknown id of any entity
           | PROPOSAL_NOT_FOUND   | Proposal id doesn't exist
           | INVOICE_NOT_FOUND    | Invoice id doesn't exist
           | PLAN_NOT_FOUND       | Pricing plan id doesn't exist
-----------|----------------------|------------------------------------------
Input      | VALIDATION_ERROR     | Malformed amount, currency, status, role
-----------|----------------------|------------------------------------------
Lifecycle  | INVALID_TRANSITION   | Mutating an accepted/rejected proposal
-----------|----------------------|------------------------------------------
Billing    | ALREADY_PAID         | Second payment attempt on an invoice
           | ALREADY_INVOICED     | Second invoice for the same proposal
           | INVALID_RATE         | Commission rate outside [0, 1]

All conditions are local and recoverable. A raised error always means the
operation was rejected and no state was changed.
"""


class SponsorKernelError(Exception):
    """
    Base exception for all sponsor kernel errors.

    All subclasses carry a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "SPONSOR_KERNEL_ERROR"


# Lookup exceptions


class NotFoundError(SponsorKernelError):
    """An entity with the given id does not exist."""

    code: str = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")


class ProposalNotFoundError(NotFoundError):
    """Proposal with given ID was not found."""

    code: str = "PROPOSAL_NOT_FOUND"

    def __init__(self, proposal_id: str):
        self.proposal_id = proposal_id
        super().__init__("Proposal", proposal_id)


class InvoiceNotFoundError(NotFoundError):
    """Invoice with given ID was not found."""

    code: str = "INVOICE_NOT_FOUND"

    def __init__(self, invoice_id: str):
        self.invoice_id = invoice_id
        super().__init__("Invoice", invoice_id)


class PlanNotFoundError(NotFoundError):
    """Pricing plan with given ID was not found."""

    code: str = "PLAN_NOT_FOUND"

    def __init__(self, plan_id: str):
        self.plan_id = plan_id
        super().__init__("Pricing plan", plan_id)


# Input validation


class ValidationError(SponsorKernelError):
    """
    Input is malformed.

    Raised for non-positive or unparseable amounts, unknown currency codes,
    empty identifiers, unknown statuses and unknown roles.
    """

    code: str = "VALIDATION_ERROR"

    def __init__(self, field: str, value: object, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} {value!r}: {reason}")


# Lifecycle exceptions


class LifecycleError(SponsorKernelError):
    """Base exception for proposal lifecycle errors."""

    code: str = "LIFECYCLE_ERROR"


class InvalidTransitionError(LifecycleError):
    """A proposal in a terminal state cannot change any further."""

    code: str = "INVALID_TRANSITION"

    def __init__(self, proposal_id: str, current_status: str, requested: str):
        self.proposal_id = proposal_id
        self.current_status = current_status
        self.requested = requested
        super().__init__(
            f"Proposal {proposal_id} is {current_status} (terminal); "
            f"cannot apply {requested}"
        )


# Billing exceptions


class BillingError(SponsorKernelError):
    """Base exception for billing ledger errors."""

    code: str = "BILLING_ERROR"


class AlreadyPaidError(BillingError):
    """Invoice was already paid; no second payout is emitted."""

    code: str = "ALREADY_PAID"

    def __init__(self, invoice_id: str, invoice_number: str):
        self.invoice_id = invoice_id
        self.invoice_number = invoice_number
        super().__init__(f"Invoice {invoice_number} ({invoice_id}) is already paid")


class AlreadyInvoicedError(BillingError):
    """Proposal already has an invoice and payment transaction."""

    code: str = "ALREADY_INVOICED"

    def __init__(self, proposal_id: str, invoice_id: str):
        self.proposal_id = proposal_id
        self.invoice_id = invoice_id
        super().__init__(
            f"Proposal {proposal_id} already invoiced as {invoice_id}"
        )


class InvalidRateError(BillingError):
    """Commission rate must lie in the closed interval [0, 1]."""

    code: str = "INVALID_RATE"

    def __init__(self, rate: object):
        self.rate = str(rate)
        super().__init__(f"Commission rate must be between 0 and 1, got {rate}")
