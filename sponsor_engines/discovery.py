"""
Marketplace discovery -- filter and sort events for browsing.

Pure functions, no I/O. Tier prices are compared by the cheapest tier for
``min_budget`` and sorting, and by the most expensive tier for
``max_budget``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from sponsor_kernel.domain.marketplace import EventProfile
from sponsor_kernel.logging_config import get_logger

logger = get_logger("engines.discovery")


class EventSort(str, Enum):
    RECENT = "recent"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    AUDIENCE_SIZE = "audience-size"


@dataclass(frozen=True)
class EventFilter:
    """Browse criteria. Unset fields do not filter."""

    category: str | None = None
    search: str | None = None
    min_budget: Decimal | None = None
    max_budget: Decimal | None = None
    location: str | None = None


def _matches(event: EventProfile, criteria: EventFilter) -> bool:
    if criteria.category and event.category != criteria.category:
        return False
    if criteria.search and criteria.search.lower() not in event.name.lower():
        return False
    if criteria.min_budget:
        cheapest = event.min_tier_price
        if cheapest is None or cheapest < criteria.min_budget:
            return False
    if criteria.max_budget:
        priciest = event.max_tier_price
        if priciest is None or priciest > criteria.max_budget:
            return False
    if criteria.location and criteria.location not in event.location:
        return False
    return True


def filter_events(events: Sequence[EventProfile], criteria: EventFilter) -> list[EventProfile]:
    """Events matching every set criterion, in input order."""
    result = [e for e in events if _matches(e, criteria)]
    logger.debug("events_filtered", extra={
        "events_in": len(events),
        "events_out": len(result),
    })
    return result


def sort_events(
    events: Sequence[EventProfile],
    sort_by: EventSort | str = EventSort.RECENT,
) -> list[EventProfile]:
    """
    Sort events for display. Unknown sort keys return the input order.

    Events without tiers sort last for both price orders; events without a
    creation date sort last for ``recent``.
    """
    try:
        key = EventSort(sort_by)
    except ValueError:
        return list(events)

    if key is EventSort.RECENT:
        dated = [e for e in events if e.created_at is not None]
        undated = [e for e in events if e.created_at is None]
        return sorted(dated, key=lambda e: e.created_at or date.min, reverse=True) + undated
    if key in (EventSort.PRICE_LOW, EventSort.PRICE_HIGH):
        priced = [e for e in events if e.min_tier_price is not None]
        unpriced = [e for e in events if e.min_tier_price is None]
        ordered = sorted(
            priced,
            key=lambda e: e.min_tier_price,
            reverse=key is EventSort.PRICE_HIGH,
        )
        return ordered + unpriced
    return sorted(
        events,
        key=lambda e: (e.audience.size or 0) if e.audience else 0,
        reverse=True,
    )
