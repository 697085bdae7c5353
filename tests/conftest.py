"""
Pytest fixtures for the sponsorship engine test suite.

Provides:
- Structured logging configured once per session
- JSON log capture
- A deterministic clock
- Wired service instances and marketplace sample data
"""

import json
import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from io import StringIO

import pytest

from sponsor_config import get_active_config
from sponsor_config.schema import MarketplaceConfig
from sponsor_kernel.domain.clock import DeterministicClock
from sponsor_kernel.domain.deals import ProposalStatus
from sponsor_kernel.domain.marketplace import (
    Audience,
    EventProfile,
    SponsorProfile,
    SponsorshipTier,
)
from sponsor_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from sponsor_services import (
    BillingLedger,
    CommissionSettings,
    ProposalLifecycleManager,
    SubscriptionService,
)

SPONSOR_ID = "sponsor-1"
ORGANIZER_ID = "organizer-1"
EVENT_ID = "event-1"
TIER_ID = "tier-gold"

FIXED_TIME = datetime(2025, 1, 20, 9, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture sponsor_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, ledger):
            ledger.process_payment(invoice_id)
            logs = captured_logs()
            assert any(r["message"] == "invoice_paid" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("sponsor_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Clock and configuration
# =============================================================================


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock(FIXED_TIME)


@pytest.fixture
def marketplace_config() -> MarketplaceConfig:
    """The shipped marketplace.yaml, loaded through the public entrypoint."""
    return get_active_config()


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def commission_settings(clock) -> CommissionSettings:
    return CommissionSettings(Decimal("0.15"), clock=clock)


@pytest.fixture
def proposals(clock) -> ProposalLifecycleManager:
    return ProposalLifecycleManager(clock=clock)


@pytest.fixture
def ledger(commission_settings, clock, marketplace_config) -> BillingLedger:
    return BillingLedger(commission_settings, clock=clock, config=marketplace_config)


@pytest.fixture
def subscriptions(marketplace_config, clock) -> SubscriptionService:
    return SubscriptionService(marketplace_config, clock=clock)


@pytest.fixture
def create_proposal(proposals):
    """Factory: submit a proposal with sensible defaults."""

    def _create(amount="50000", currency="USD", **kwargs):
        return proposals.create_proposal(
            kwargs.pop("event_id", EVENT_ID),
            kwargs.pop("sponsor_id", SPONSOR_ID),
            kwargs.pop("tier_id", TIER_ID),
            amount,
            currency,
            **kwargs,
        )

    return _create


@pytest.fixture
def accepted_proposal(proposals, create_proposal, clock):
    """A proposal walked pending -> reviewing -> accepted."""
    proposal = create_proposal()
    clock.advance(60)
    proposals.transition(proposal.id, ProposalStatus.REVIEWING, ORGANIZER_ID)
    clock.advance(60)
    return proposals.transition(proposal.id, ProposalStatus.ACCEPTED, ORGANIZER_ID)


@pytest.fixture
def invoiced(ledger, accepted_proposal):
    """An unpaid invoice plus payment transaction for the accepted proposal."""
    return ledger.create_invoice_and_transaction(
        accepted_proposal, SPONSOR_ID, ORGANIZER_ID,
    )


# =============================================================================
# Marketplace sample data
# =============================================================================


@pytest.fixture
def tech_event() -> EventProfile:
    return EventProfile(
        id="event-tech",
        name="TechSummit 2025",
        organizer_id=ORGANIZER_ID,
        category="technology",
        location="San Francisco, CA",
        tiers=(
            SponsorshipTier(id="tier-gold", name="Gold", price=Decimal("100000")),
        ),
        audience=Audience(size=50000, interests=("Technology",)),
        created_at=date(2025, 1, 10),
    )


@pytest.fixture
def tech_sponsor() -> SponsorProfile:
    return SponsorProfile(id=SPONSOR_ID, budget=Decimal("150000"), industry="Technology")
