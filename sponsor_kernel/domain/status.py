"""
Status vocabulary -- display label and color for every lifecycle status.

Covers proposal statuses (pending .. rejected), invoice statuses
(paid, unpaid), transaction statuses (completed, processing) and the
generic record statuses (active, inactive, open) shown across the
marketplace.

Lookups fail open: an unrecognized status gets the ``primary`` color and
its own text as label instead of raising.
"""

from __future__ import annotations

from enum import Enum


class StatusColor(str, Enum):
    """Display color families."""

    WARNING = "warning"
    SUCCESS = "success"
    ERROR = "error"
    PRIMARY = "primary"


STATUS_COLORS: dict[str, StatusColor] = {
    "pending": StatusColor.WARNING,
    "reviewing": StatusColor.WARNING,
    "negotiating": StatusColor.WARNING,
    "accepted": StatusColor.SUCCESS,
    "rejected": StatusColor.ERROR,
    "completed": StatusColor.SUCCESS,
    "paid": StatusColor.SUCCESS,
    "unpaid": StatusColor.ERROR,
    "processing": StatusColor.WARNING,
    "active": StatusColor.SUCCESS,
    "inactive": StatusColor.ERROR,
    "open": StatusColor.ERROR,
}

# active / inactive / open have no label entry; they display as-is.
STATUS_LABELS: dict[str, str] = {
    "pending": "Pending Review",
    "reviewing": "Reviewing",
    "negotiating": "Under Negotiation",
    "accepted": "Accepted",
    "rejected": "Rejected",
    "completed": "Completed",
    "paid": "Paid",
    "unpaid": "Unpaid",
    "processing": "Processing",
}


def _status_key(status: str | Enum | None) -> str:
    if isinstance(status, Enum):
        return str(status.value)
    return "" if status is None else str(status)


def status_color(status: str | Enum | None) -> StatusColor:
    """Color for a status; ``primary`` when unrecognized."""
    return STATUS_COLORS.get(_status_key(status), StatusColor.PRIMARY)


def status_label(status: str | Enum | None) -> str:
    """Display label for a status; the raw status text when unrecognized."""
    key = _status_key(status)
    return STATUS_LABELS.get(key, key)
