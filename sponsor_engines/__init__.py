"""
Module: sponsor_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  Services import from here.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import sponsor_kernel (domain values, exceptions, logging).
    MUST NOT import sponsor_services or sponsor_config.

Invariants enforced:
    - Purity: engines never read the clock; dates are passed in.
    - Decimal-only arithmetic for every monetary amount.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from sponsor_engines import calculate_deal_value, score_event_for_sponsor
"""

from sponsor_engines.commission import (
    DEFAULT_COMMISSION_RATE,
    DealValue,
    calculate_commission,
    calculate_cpm,
    calculate_deal_value,
    calculate_roi,
    validate_commission_rate,
)
from sponsor_engines.discovery import EventFilter, EventSort, filter_events, sort_events
from sponsor_engines.fit_scoring import (
    FitScoreBreakdown,
    RecommendedEvent,
    get_recommended_events,
    score_breakdown,
    score_event_for_sponsor,
)
from sponsor_engines.tracer import traced_engine

__all__ = [
    "DEFAULT_COMMISSION_RATE",
    "DealValue",
    "EventFilter",
    "EventSort",
    "FitScoreBreakdown",
    "RecommendedEvent",
    "calculate_commission",
    "calculate_cpm",
    "calculate_deal_value",
    "calculate_roi",
    "filter_events",
    "get_recommended_events",
    "score_breakdown",
    "score_event_for_sponsor",
    "sort_events",
    "traced_engine",
    "validate_commission_rate",
]
