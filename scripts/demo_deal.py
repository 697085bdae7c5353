#!/usr/bin/env python3
"""
End-to-end sponsorship deal demo.

Loads the marketplace YAML config, submits a proposal, walks it through
review to acceptance, bills it and settles the invoice into an organizer
payout.  Prints each step and the resulting billing summaries.

Usage:
    python3 scripts/demo_deal.py
    python3 scripts/demo_deal.py --amount 75000 --currency EUR
    python3 scripts/demo_deal.py --negotiate 45000   # counter-offer before accepting
    python3 scripts/demo_deal.py --log-level DEBUG   # structured JSON logs to stderr
"""

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from sponsor_config import get_active_config  # noqa: E402
from sponsor_kernel.domain.clock import DeterministicClock  # noqa: E402
from sponsor_kernel.exceptions import SponsorKernelError  # noqa: E402
from sponsor_kernel.logging_config import configure_logging  # noqa: E402
from sponsor_services import (  # noqa: E402
    BillingLedger,
    CommissionSettings,
    ProposalLifecycleManager,
)

SPONSOR_ID = "sponsor-1"
ORGANIZER_ID = "organizer-1"
EVENT_ID = "event-1"
TIER_ID = "tier-gold"


def _print_proposal(proposal) -> None:
    print(f"         id={proposal.id}")
    print(f"         status={proposal.status.value} amount={proposal.amount}")
    if proposal.last_history_entry is None:
        print("           (no status changes yet)")
    for entry in proposal.history:
        print(f"           {entry.timestamp:%Y-%m-%d %H:%M:%S}  "
              f"{entry.status.value:12s} by {entry.changed_by}: {entry.notes}")


def run(args: argparse.Namespace) -> int:
    config = get_active_config(Path(args.config) if args.config else None)
    clock = DeterministicClock()
    settings = CommissionSettings(config.default_commission_rate, clock=clock)
    proposals = ProposalLifecycleManager(clock=clock)
    ledger = BillingLedger(settings, clock=clock, config=config)

    print()
    print(f"  Config checksum: {config.checksum[:16]}...")
    platform = ledger.get_platform_settings()
    print(f"  Commission rate: {platform.default_commission_rate}")
    print(f"  Processing fee:  {platform.payment_processing_fee}")
    print(f"  Payouts:         {platform.payout_schedule}, "
          f"+{platform.payout_delay_days}d after payment")
    print()

    print("  [1/5] Sponsor submits proposal...")
    proposal = proposals.create_proposal(
        EVENT_ID, SPONSOR_ID, TIER_ID, args.amount, args.currency,
        message="We'd love to be your headline sponsor.",
    )
    _print_proposal(proposal)

    print("  [2/5] Organizer starts review...")
    clock.advance(3600)
    proposal = proposals.transition(proposal.id, "reviewing", ORGANIZER_ID)
    _print_proposal(proposal)

    if args.negotiate:
        print("  [2b]  Sponsor counter-offers...")
        clock.advance(3600)
        proposal = proposals.add_negotiation_message(
            proposal.id, SPONSOR_ID, proposed_amount=args.negotiate,
            message="Can we meet at this amount?",
        )
        _print_proposal(proposal)

    print("  [3/5] Organizer accepts...")
    clock.advance(3600)
    proposal = proposals.transition(
        proposal.id, "accepted", ORGANIZER_ID, notes="Welcome aboard",
    )
    _print_proposal(proposal)

    print("  [4/5] Billing ledger issues invoice...")
    billed = ledger.create_invoice_and_transaction(proposal, SPONSOR_ID, ORGANIZER_ID)
    invoice = billed.invoice
    print(f"         {invoice.number}: amount={invoice.amount} {invoice.currency}")
    print(f"         commission={invoice.commission} organizer_receives={invoice.organizer_receives}")
    print(f"         status={invoice.status.value} issued={invoice.issue_date} due={invoice.due_date}")

    print("  [5/5] Sponsor pays invoice...")
    clock.advance_days(2)
    paid = ledger.process_payment(invoice.id)
    payout = paid.payout_transaction
    print(f"         status={paid.invoice.status.value}")
    print(f"         payout {payout.amount} {payout.currency} via {payout.method}, "
          f"completes {payout.completed_at}")

    print()
    for user_id, role in ((SPONSOR_ID, "sponsor"), (ORGANIZER_ID, "organizer")):
        summary = ledger.get_billing_summary(user_id, role)
        print(f"  {role:9s} total={summary.total_amount} paid={summary.paid_amount} "
              f"pending={summary.pending_amount} txns={summary.transaction_count} "
              f"invoices={summary.invoice_count}")
    print()
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Sponsorship deal lifecycle demo")
    parser.add_argument("--amount", default="50000", help="Sponsorship amount")
    parser.add_argument("--currency", default="USD", help="ISO 4217 currency code")
    parser.add_argument("--negotiate", default=None, help="Counter-offer amount")
    parser.add_argument("--config", default=None, help="Path to marketplace YAML")
    parser.add_argument("--log-level", default="WARNING", help="Structured log level")
    args = parser.parse_args()

    configure_logging(level=getattr(logging, args.log_level.upper(), logging.WARNING))

    try:
        return run(args)
    except SponsorKernelError as exc:
        print(f"  ERROR [{exc.code}]: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
