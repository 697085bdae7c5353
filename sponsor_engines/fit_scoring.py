"""
sponsor_engines.fit_scoring -- Sponsor/event fit scoring and recommendations.

Responsibility:
    Score how well a sponsor matches an event on a 0-100 scale and rank a
    set of events for one sponsor.

Architecture position:
    Engines -- pure calculation layer, zero I/O, no clock access.

Scoring (additive, each component capped, total capped at 100):
    Budget fit      (max 30): budget >= cheapest tier -> 30,
                              >= 75% of it -> 20, otherwise 10.
    Audience fit    (max 30): size >= 50,000 -> 30, >= 10,000 -> 20,
                              otherwise 10.
    Interest match  (max 40): 15 per interest that overlaps the sponsor's
                              industry (substring either way, case-
                              insensitive), capped at 40; 5 when inputs
                              are present but nothing overlaps.
    A component whose inputs are missing contributes 0.

Invariants enforced:
    - Determinism: identical inputs produce identical scores.
    - Ranking is stable: events with equal scores keep their input order.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from sponsor_engines.tracer import traced_engine
from sponsor_kernel.domain.marketplace import EventProfile, SponsorProfile
from sponsor_kernel.logging_config import get_logger

logger = get_logger("engines.fit_scoring")

MAX_SCORE = 100

BUDGET_MAX = 30
BUDGET_STRETCH_RATIO = Decimal("0.75")

AUDIENCE_MAX = 30
AUDIENCE_LARGE = 50_000
AUDIENCE_MEDIUM = 10_000

INTEREST_MAX = 40
INTEREST_POINTS_PER_MATCH = 15
INTEREST_PARTICIPATION_CREDIT = 5


@dataclass(frozen=True)
class FitScoreBreakdown:
    """Per-component fit score."""

    budget: int
    audience: int
    interest: int
    interest_matches: tuple[str, ...] = ()

    @property
    def total(self) -> int:
        return min(MAX_SCORE, self.budget + self.audience + self.interest)


@dataclass(frozen=True)
class RecommendedEvent:
    """An event paired with its fit score for one sponsor."""

    event: EventProfile
    fit_score: int


def _budget_score(event: EventProfile, sponsor: SponsorProfile) -> int:
    min_price = event.min_tier_price
    if min_price is None or not sponsor.budget:
        return 0
    if sponsor.budget >= min_price:
        return BUDGET_MAX
    if sponsor.budget >= min_price * BUDGET_STRETCH_RATIO:
        return 20
    return 10


def _audience_score(event: EventProfile) -> int:
    size = event.audience.size if event.audience else None
    if not size:
        return 0
    if size >= AUDIENCE_LARGE:
        return AUDIENCE_MAX
    if size >= AUDIENCE_MEDIUM:
        return 20
    return 10


def _matching_interests(event: EventProfile, sponsor: SponsorProfile) -> tuple[str, ...] | None:
    """Interests overlapping the sponsor's industry, or None if inputs are missing."""
    interests = event.audience.interests if event.audience else None
    if interests is None or not sponsor.industry:
        return None
    industry = sponsor.industry.lower()
    return tuple(
        interest for interest in interests
        if interest.lower() in industry or industry in interest.lower()
    )


def _interest_score(matches: tuple[str, ...] | None) -> int:
    if matches is None:
        return 0
    if matches:
        return min(INTEREST_MAX, len(matches) * INTEREST_POINTS_PER_MATCH)
    return INTEREST_PARTICIPATION_CREDIT


def score_breakdown(event: EventProfile, sponsor: SponsorProfile) -> FitScoreBreakdown:
    """Compute the three fit components for a sponsor/event pair."""
    matches = _matching_interests(event, sponsor)
    return FitScoreBreakdown(
        budget=_budget_score(event, sponsor),
        audience=_audience_score(event),
        interest=_interest_score(matches),
        interest_matches=matches or (),
    )


@traced_engine("fit_scoring", "1.0", fingerprint_fields=("event", "sponsor"))
def score_event_for_sponsor(event: EventProfile, sponsor: SponsorProfile) -> int:
    """Fit score in [0, 100] for a sponsor/event pair."""
    return score_breakdown(event, sponsor).total


@traced_engine("fit_scoring", "1.0", fingerprint_fields=("sponsor", "limit"))
def get_recommended_events(
    events: Sequence[EventProfile],
    sponsor: SponsorProfile,
    limit: int = 5,
) -> list[RecommendedEvent]:
    """
    Rank events by descending fit score for one sponsor.

    Ties keep their input order. At most ``limit`` events are returned.

    Raises:
        ValueError: If limit is negative.
    """
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    scored = [
        RecommendedEvent(event=event, fit_score=score_breakdown(event, sponsor).total)
        for event in events
    ]
    # sorted() is stable, so equal scores stay in input order
    ranked = sorted(scored, key=lambda r: r.fit_score, reverse=True)[:limit]

    logger.info("recommendations_ranked", extra={
        "sponsor_id": sponsor.id,
        "events_considered": len(scored),
        "returned": len(ranked),
        "top_score": ranked[0].fit_score if ranked else 0,
    })
    return ranked
