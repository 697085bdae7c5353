"""
End-to-end deal scenario through the public services.

A sponsor proposes 50,000 USD, the organizer reviews and accepts, the
ledger bills the deal and the sponsor pays.  Checks every observable
effect along the way, including the structured audit trail.
"""

from datetime import timedelta
from decimal import Decimal

from sponsor_engines.fit_scoring import get_recommended_events
from sponsor_kernel.domain.billing import InvoiceStatus, TransactionType
from sponsor_kernel.domain.deals import ProposalStatus
from sponsor_kernel.domain.status import status_color, status_label

SPONSOR_ID = "sponsor-1"
ORGANIZER_ID = "organizer-1"


class TestDealScenario:

    def test_full_lifecycle(self, proposals, ledger, tech_event, tech_sponsor, clock):
        # Sponsor discovers the event
        (top,) = get_recommended_events([tech_event], tech_sponsor, limit=1)
        assert top.fit_score == 75
        tier = tech_event.get_tier("tier-gold")

        proposal = proposals.create_proposal(
            tech_event.id, SPONSOR_ID, tier.id, "50000", "USD",
            message="Interested in Gold",
        )
        assert status_label(proposal.status) == "Pending Review"

        clock.advance(3600)
        proposals.transition(proposal.id, "reviewing", ORGANIZER_ID)
        clock.advance(3600)
        accepted = proposals.transition(proposal.id, "accepted", ORGANIZER_ID)

        assert [h.status for h in accepted.history] == [
            ProposalStatus.REVIEWING, ProposalStatus.ACCEPTED,
        ]
        assert status_color(accepted.status).value == "success"

        billed = ledger.create_invoice_and_transaction(accepted, SPONSOR_ID, ORGANIZER_ID)
        invoice = billed.invoice
        assert invoice.amount == Decimal("50000")
        assert invoice.commission == Decimal("7500")
        assert invoice.organizer_receives == Decimal("42500")
        assert invoice.status is InvoiceStatus.UNPAID
        assert invoice.due_date == invoice.issue_date + timedelta(days=30)
        assert status_label(invoice.status) == "Unpaid"

        sponsor_before = ledger.get_billing_summary(SPONSOR_ID, "sponsor")
        assert sponsor_before.pending_amount == Decimal("50000")

        clock.advance_days(1)
        paid = ledger.process_payment(invoice.id)
        assert paid.invoice.status is InvoiceStatus.PAID
        payout = paid.payout_transaction
        assert payout.type is TransactionType.PAYOUT
        assert payout.amount == Decimal("42500")
        assert payout.completed_at == payout.created_at + timedelta(days=1)

        sponsor_after = ledger.get_billing_summary(SPONSOR_ID, "sponsor")
        assert sponsor_after.pending_amount == Decimal("0")
        assert sponsor_after.paid_amount == Decimal("50000")

        organizer = ledger.get_billing_summary(ORGANIZER_ID, "organizer")
        assert organizer.paid_amount == Decimal("42500")

    def test_negotiated_deal(self, proposals, ledger, create_proposal):
        proposal = create_proposal(amount="50000")
        proposals.add_negotiation_message(
            proposal.id, ORGANIZER_ID, proposed_amount="60000", message="Gold is 60k",
        )
        agreed = proposals.add_negotiation_message(
            proposal.id, SPONSOR_ID, proposed_amount="55000", message="Meet at 55k?",
        )
        assert agreed.status is ProposalStatus.NEGOTIATING
        assert [n.proposed_amount for n in agreed.negotiations] == [
            Decimal("60000"), Decimal("55000"),
        ]

        accepted = proposals.transition(proposal.id, "accepted", ORGANIZER_ID)
        invoice = ledger.create_invoice_and_transaction(
            accepted, SPONSOR_ID, ORGANIZER_ID,
        ).invoice
        # The invoice bills the proposal's submitted amount
        assert invoice.amount == Decimal("50000")

    def test_audit_trail(self, captured_logs, proposals, ledger, create_proposal):
        proposal = create_proposal()
        proposals.transition(proposal.id, "accepted", ORGANIZER_ID)
        invoice = ledger.create_invoice_and_transaction(
            proposals.get_proposal(proposal.id), SPONSOR_ID, ORGANIZER_ID,
        ).invoice
        ledger.process_payment(invoice.id)

        messages = [r["message"] for r in captured_logs()]
        for expected in (
            "proposal_created",
            "proposal_status_changed",
            "invoice_created",
            "invoice_paid",
            "SPONSOR_ENGINE_TRACE",
        ):
            assert expected in messages

        paid = next(r for r in captured_logs() if r["message"] == "invoice_paid")
        assert paid["invoice_id"] == invoice.id
        assert paid["payout_amount"] == "42500.00"
