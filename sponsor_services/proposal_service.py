"""
sponsor_services.proposal_service -- Proposal lifecycle management.

Responsibility:
    Create sponsorship proposals, move them through their status
    lifecycle, and record negotiation counter-offers.  Every status change
    appends a history entry; there is no path that changes status silently.

Architecture position:
    Services -- stateful orchestration over kernel value objects.
    Holds an in-memory proposal store keyed by id.  Receives its Clock by
    constructor injection.

Invariants enforced:
    - ``accepted`` and ``rejected`` are terminal: any mutation of a
      terminal proposal raises InvalidTransitionError and changes nothing.
    - History and negotiations are append-only tuples on frozen
      Proposals; a mutation replaces the stored Proposal in one step.
    - Opening a negotiation from ``pending`` or ``reviewing`` records the
      negotiation entry and the status change as one atomic update.
    - Mutations of one proposal are serialized by a per-proposal lock.

Failure modes:
    - ValidationError for malformed amounts, currencies, identifiers or
      statuses.
    - ProposalNotFoundError for unknown ids.
    - InvalidTransitionError when the proposal is terminal.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from decimal import Decimal
from uuid import uuid4

from sponsor_kernel.domain.clock import Clock, SystemClock
from sponsor_kernel.domain.deals import (
    HistoryAction,
    HistoryEntry,
    NegotiationEntry,
    Proposal,
    ProposalStatus,
)
from sponsor_kernel.domain.values import Currency, to_decimal
from sponsor_kernel.exceptions import (
    InvalidTransitionError,
    ProposalNotFoundError,
    ValidationError,
)
from sponsor_kernel.logging_config import LogContext, get_logger
from sponsor_services.locking import EntityLocks
from sponsor_services.workflows import NEGOTIATION_OPENS_FROM, PROPOSAL_WORKFLOW

logger = get_logger("services.proposals")

MAX_AMOUNT = Decimal("1000000000000")

DEFAULT_TRANSITION_NOTE = "Status updated"
NEGOTIATION_NOTE = "Negotiation initiated"


def _require_identifier(field: str, value: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field, value, "must be a non-empty string")
    return value


def _parse_status(value: ProposalStatus | str) -> ProposalStatus:
    try:
        return ProposalStatus(value)
    except ValueError:
        raise ValidationError(
            "status", value,
            f"must be one of {[s.value for s in ProposalStatus]}",
        ) from None


def _parse_currency(value: str) -> Currency:
    try:
        return Currency(value)
    except ValueError:
        raise ValidationError("currency", value, "unsupported ISO 4217 code") from None


def _parse_amount(
    field: str,
    value: Decimal | int | float | str,
    currency: Currency,
) -> Decimal:
    """Positive, at most MAX_AMOUNT, and expressible in ``currency``'s minor unit."""
    try:
        amount = to_decimal(value)
    except ValueError:
        raise ValidationError(field, value, "must be a number") from None
    if amount <= 0:
        raise ValidationError(field, value, "must be positive")
    if amount > MAX_AMOUNT:
        raise ValidationError(field, value, f"must not exceed {MAX_AMOUNT}")
    if amount != amount.quantize(currency.minor_unit):
        raise ValidationError(
            field, value,
            f"must be a whole number of {currency.code} minor units "
            f"({currency.minor_unit})",
        )
    return amount


class ProposalLifecycleManager:
    """
    In-memory proposal store with lifecycle enforcement.

    Contract:
        Returned Proposals are immutable snapshots.  Callers re-read via
        ``get_proposal`` to observe later changes.
    """

    def __init__(self, clock: Clock | None = None):
        self._clock = clock or SystemClock()
        self._proposals: dict[str, Proposal] = {}
        self._store_lock = threading.Lock()
        self._locks = EntityLocks()
        self._workflow = PROPOSAL_WORKFLOW

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_proposal(
        self,
        event_id: str,
        sponsor_id: str,
        tier_id: str,
        amount: Decimal | int | float | str,
        currency: str = "USD",
        message: str = "",
        additional_requests: str | None = None,
    ) -> Proposal:
        """Submit a new proposal in ``pending`` with empty history."""
        _require_identifier("event_id", event_id)
        _require_identifier("sponsor_id", sponsor_id)
        _require_identifier("tier_id", tier_id)
        parsed_currency = _parse_currency(currency)
        sponsorship_amount = _parse_amount("amount", amount, parsed_currency)
        code = parsed_currency.code

        now = self._clock.now()
        proposal = Proposal(
            id=f"proposal-{uuid4().hex}",
            event_id=event_id,
            sponsor_id=sponsor_id,
            tier_id=tier_id,
            sponsorship_amount=sponsorship_amount,
            currency=code,
            status=ProposalStatus(self._workflow.initial_state),
            created_at=now,
            updated_at=now,
            message=message or "",
            additional_requests=additional_requests,
        )
        with self._store_lock:
            self._proposals[proposal.id] = proposal

        logger.info("proposal_created", extra={
            "proposal_id": proposal.id,
            "event_id": event_id,
            "sponsor_id": sponsor_id,
            "tier_id": tier_id,
            "amount": str(sponsorship_amount),
            "currency": code,
        })
        return proposal

    def transition(
        self,
        proposal_id: str,
        new_status: ProposalStatus | str,
        changed_by: str,
        notes: str | None = None,
    ) -> Proposal:
        """
        Move a proposal to ``new_status`` and append a history entry.

        Raises:
            ValidationError: Unknown status or empty ``changed_by``.
            ProposalNotFoundError: Unknown ``proposal_id``.
            InvalidTransitionError: The proposal is accepted or rejected.
        """
        target = _parse_status(new_status)
        _require_identifier("changed_by", changed_by)
        # unknown ids fail before a lock entry is created for them
        self._require(proposal_id)

        with LogContext.bind(proposal_id=proposal_id, actor_id=changed_by):
            with self._locks.hold(proposal_id):
                current = self._require(proposal_id)
                self._assert_mutable(current, target)

                now = self._clock.now()
                entry = HistoryEntry(
                    timestamp=now,
                    status=target,
                    action=HistoryAction.STATUS_CHANGE,
                    changed_by=changed_by,
                    notes=notes or DEFAULT_TRANSITION_NOTE,
                )
                updated = replace(
                    current,
                    status=target,
                    updated_at=now,
                    history=current.history + (entry,),
                )
                self._store(updated)

            logger.info("proposal_status_changed", extra={
                "from_status": current.status.value,
                "to_status": target.value,
                "typical_path": self._workflow.is_typical(
                    current.status.value, target.value,
                ),
                "history_length": len(updated.history),
            })
        return updated

    def open_negotiation(
        self,
        proposal_id: str,
        from_party: str,
        proposed_amount: Decimal | int | float | str | None = None,
        proposed_terms: str | None = None,
        message: str = "",
    ) -> Proposal:
        """
        Append a negotiation entry and, from ``pending`` or ``reviewing``,
        move the proposal to ``negotiating`` in the same update.

        The history entry for the implicit move is attributed to
        ``from_party`` with the note ``Negotiation initiated``.

        Raises:
            ValidationError: Empty ``from_party`` or bad ``proposed_amount``.
            ProposalNotFoundError: Unknown ``proposal_id``.
            InvalidTransitionError: The proposal is accepted or rejected.
        """
        _require_identifier("from_party", from_party)
        proposal = self._require(proposal_id)
        amount = None
        if proposed_amount is not None:
            amount = _parse_amount(
                "proposed_amount", proposed_amount, Currency(proposal.currency),
            )

        with LogContext.bind(proposal_id=proposal_id, actor_id=from_party):
            with self._locks.hold(proposal_id):
                current = self._require(proposal_id)
                self._assert_mutable(current, ProposalStatus.NEGOTIATING)

                now = self._clock.now()
                negotiation = NegotiationEntry(
                    id=f"neg-{uuid4().hex}",
                    from_party=from_party,
                    timestamp=now,
                    proposed_amount=amount,
                    proposed_terms=proposed_terms,
                    message=message or "",
                )
                changes: dict = {
                    "updated_at": now,
                    "negotiations": current.negotiations + (negotiation,),
                }
                status_moved = current.status in NEGOTIATION_OPENS_FROM
                if status_moved:
                    changes["status"] = ProposalStatus.NEGOTIATING
                    changes["history"] = current.history + (HistoryEntry(
                        timestamp=now,
                        status=ProposalStatus.NEGOTIATING,
                        action=HistoryAction.STATUS_CHANGE,
                        changed_by=from_party,
                        notes=NEGOTIATION_NOTE,
                    ),)
                updated = replace(current, **changes)
                self._store(updated)

            logger.info("proposal_negotiation_recorded", extra={
                "negotiation_id": negotiation.id,
                "proposed_amount": str(amount) if amount is not None else None,
                "status_moved": status_moved,
                "status": updated.status.value,
                "negotiation_count": len(updated.negotiations),
            })
        return updated

    def add_negotiation_message(
        self,
        proposal_id: str,
        from_party: str,
        proposed_amount: Decimal | int | float | str | None = None,
        proposed_terms: str | None = None,
        message: str = "",
    ) -> Proposal:
        """Record a counter-offer; see ``open_negotiation``."""
        return self.open_negotiation(
            proposal_id,
            from_party,
            proposed_amount=proposed_amount,
            proposed_terms=proposed_terms,
            message=message,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_proposal(self, proposal_id: str) -> Proposal:
        return self._require(proposal_id)

    def list_proposals(
        self,
        event_id: str | None = None,
        sponsor_id: str | None = None,
        status: ProposalStatus | str | None = None,
    ) -> list[Proposal]:
        """Proposals matching every given filter, in creation order."""
        wanted = _parse_status(status) if status is not None else None
        with self._store_lock:
            proposals = list(self._proposals.values())
        return [
            p for p in proposals
            if (event_id is None or p.event_id == event_id)
            and (sponsor_id is None or p.sponsor_id == sponsor_id)
            and (wanted is None or p.status == wanted)
        ]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require(self, proposal_id: str) -> Proposal:
        with self._store_lock:
            proposal = self._proposals.get(proposal_id)
        if proposal is None:
            raise ProposalNotFoundError(proposal_id)
        return proposal

    def _store(self, proposal: Proposal) -> None:
        with self._store_lock:
            self._proposals[proposal.id] = proposal

    def _assert_mutable(self, proposal: Proposal, requested: ProposalStatus) -> None:
        if self._workflow.is_terminal(proposal.status.value):
            logger.warning("proposal_transition_rejected", extra={
                "current_status": proposal.status.value,
                "requested_status": requested.value,
            })
            raise InvalidTransitionError(
                proposal.id, proposal.status.value, requested.value,
            )
