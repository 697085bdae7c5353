"""
Deal Domain Models (``sponsor_kernel.domain.deals``).

Responsibility
--------------
Frozen dataclass value objects for a sponsorship proposal and the two
append-only trails it carries: status history and negotiation entries.

Invariants enforced
-------------------
* All models are ``frozen=True``. A mutation is a new Proposal built with
  ``dataclasses.replace`` and swapped into the store in one step, so a
  history entry once recorded can never be edited.
* ``history`` and ``negotiations`` are tuples; new entries are only ever
  appended at the end.
* Monetary fields are ``Decimal`` -- NEVER ``float``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum

from sponsor_kernel.domain.values import Money


class ProposalStatus(str, Enum):
    """Proposal lifecycle states."""
    PENDING = "pending"
    REVIEWING = "reviewing"
    NEGOTIATING = "negotiating"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self in (ProposalStatus.ACCEPTED, ProposalStatus.REJECTED)


class HistoryAction(str, Enum):
    """Kinds of history entries."""
    STATUS_CHANGE = "status_change"


@dataclass(frozen=True)
class HistoryEntry:
    """One recorded status change."""
    timestamp: datetime
    status: ProposalStatus
    action: HistoryAction
    changed_by: str
    notes: str


@dataclass(frozen=True)
class NegotiationEntry:
    """A counter-offer or message in the negotiation thread."""
    id: str
    from_party: str
    timestamp: datetime
    proposed_amount: Decimal | None = None
    proposed_terms: str | None = None
    message: str = ""


@dataclass(frozen=True)
class Proposal:
    """A sponsor's offer to sponsor an event at a given tier and amount."""
    id: str
    event_id: str
    sponsor_id: str
    tier_id: str
    sponsorship_amount: Decimal
    currency: str
    status: ProposalStatus
    created_at: datetime
    updated_at: datetime
    message: str = ""
    additional_requests: str | None = None
    history: tuple[HistoryEntry, ...] = field(default_factory=tuple)
    negotiations: tuple[NegotiationEntry, ...] = field(default_factory=tuple)

    @property
    def amount(self) -> Money:
        return Money.of(self.sponsorship_amount, self.currency)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def last_history_entry(self) -> HistoryEntry | None:
        return self.history[-1] if self.history else None
