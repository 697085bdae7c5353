"""
Concurrency tests for the billing ledger and proposal lifecycle.

These tests use real threads released together by a Barrier:
- Concurrent payments of one invoice: first caller wins, exactly one payout
- Concurrent invoicing of one proposal: exactly one invoice
- Concurrent transitions of one proposal: no lost history entries
"""

from concurrent.futures import ThreadPoolExecutor
from threading import Barrier

from sponsor_kernel.domain.billing import TransactionType
from sponsor_kernel.domain.deals import ProposalStatus
from sponsor_kernel.exceptions import AlreadyInvoicedError, AlreadyPaidError

SPONSOR_ID = "sponsor-1"
ORGANIZER_ID = "organizer-1"

THREADS = 16


def _race(fn, n=THREADS):
    """Run ``fn`` on ``n`` threads released together; return (results, errors)."""
    barrier = Barrier(n)

    def _call(i):
        barrier.wait()
        try:
            return ("ok", fn(i))
        except Exception as exc:  # noqa: BLE001 - collected for assertions
            return ("error", exc)

    with ThreadPoolExecutor(max_workers=n) as pool:
        outcomes = list(pool.map(_call, range(n)))

    results = [value for kind, value in outcomes if kind == "ok"]
    errors = [value for kind, value in outcomes if kind == "error"]
    return results, errors


class TestConcurrentPayment:

    def test_first_caller_wins(self, ledger, invoiced):
        invoice_id = invoiced.invoice.id

        results, errors = _race(lambda _: ledger.process_payment(invoice_id))

        assert len(results) == 1
        assert len(errors) == THREADS - 1
        assert all(isinstance(e, AlreadyPaidError) for e in errors)
        payouts = ledger.get_transactions(type=TransactionType.PAYOUT)
        assert len(payouts) == 1
        assert payouts[0].id == results[0].payout_transaction.id
        assert ledger.get_invoice(invoice_id).is_paid

    def test_different_invoices_all_succeed(self, ledger, proposals, create_proposal):
        invoice_ids = []
        for _ in range(THREADS):
            proposal = proposals.transition(create_proposal().id, "accepted", ORGANIZER_ID)
            invoice_ids.append(
                ledger.create_invoice_and_transaction(
                    proposal, SPONSOR_ID, ORGANIZER_ID,
                ).invoice.id
            )

        results, errors = _race(lambda i: ledger.process_payment(invoice_ids[i]))

        assert errors == []
        assert len(ledger.get_transactions(type="payout")) == THREADS


class TestConcurrentInvoicing:

    def test_one_invoice_per_proposal(self, ledger, accepted_proposal):
        results, errors = _race(
            lambda _: ledger.create_invoice_and_transaction(
                accepted_proposal, SPONSOR_ID, ORGANIZER_ID,
            )
        )

        assert len(results) == 1
        assert all(isinstance(e, AlreadyInvoicedError) for e in errors)
        assert len(ledger.get_invoices()) == 1
        assert len(ledger.get_transactions()) == 1

    def test_invoice_numbers_unique(self, ledger, proposals, create_proposal):
        accepted = [
            proposals.transition(create_proposal().id, "accepted", ORGANIZER_ID)
            for _ in range(THREADS)
        ]

        results, errors = _race(
            lambda i: ledger.create_invoice_and_transaction(
                accepted[i], SPONSOR_ID, ORGANIZER_ID,
            )
        )

        assert errors == []
        assert len({r.invoice.number for r in results}) == THREADS


class TestConcurrentTransitions:

    def test_no_lost_history(self, proposals, create_proposal):
        proposal = create_proposal()
        statuses = ["reviewing", "negotiating"]

        results, errors = _race(
            lambda i: proposals.transition(
                proposal.id, statuses[i % 2], f"actor-{i}",
            )
        )

        assert errors == []
        final = proposals.get_proposal(proposal.id)
        assert len(final.history) == THREADS
        assert {h.changed_by for h in final.history} == {f"actor-{i}" for i in range(THREADS)}
        assert final.status is final.history[-1].status

    def test_single_winner_into_terminal(self, proposals, create_proposal):
        proposal = create_proposal()

        results, errors = _race(
            lambda i: proposals.transition(proposal.id, "accepted", f"actor-{i}")
        )

        assert len(results) == 1
        assert len(errors) == THREADS - 1
        final = proposals.get_proposal(proposal.id)
        assert final.status is ProposalStatus.ACCEPTED
        assert len(final.history) == 1

    def test_negotiation_and_transitions_interleave(self, proposals, create_proposal):
        proposal = create_proposal()

        def _act(i):
            if i % 2:
                return proposals.add_negotiation_message(proposal.id, f"party-{i}", "1000")
            return proposals.transition(proposal.id, "reviewing", f"actor-{i}")

        results, errors = _race(_act)

        assert errors == []
        final = proposals.get_proposal(proposal.id)
        assert len(final.negotiations) == THREADS // 2
        assert final.status is final.history[-1].status
