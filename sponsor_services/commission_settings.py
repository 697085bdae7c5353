"""
Commission settings with an audited rate history.

Owned by the caller and threaded into ``BillingLedger``; there is no
module-level rate.  Rate changes apply to invoices created afterwards
only.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sponsor_engines import DEFAULT_COMMISSION_RATE, validate_commission_rate
from sponsor_kernel.domain.clock import Clock, SystemClock
from sponsor_kernel.logging_config import get_logger

logger = get_logger("services.commission_settings")


@dataclass(frozen=True)
class RateChange:
    """One audited commission rate change."""
    previous_rate: Decimal
    new_rate: Decimal
    changed_by: str
    changed_at: datetime


class CommissionSettings:
    """Thread-safe holder of the platform's default commission rate."""

    def __init__(
        self,
        default_commission_rate: Decimal | int | float | str = DEFAULT_COMMISSION_RATE,
        clock: Clock | None = None,
    ):
        self._rate = validate_commission_rate(default_commission_rate)
        self._clock = clock or SystemClock()
        self._lock = threading.Lock()
        self._history: list[RateChange] = []

    @property
    def default_commission_rate(self) -> Decimal:
        with self._lock:
            return self._rate

    @property
    def history(self) -> tuple[RateChange, ...]:
        with self._lock:
            return tuple(self._history)

    def update_rate(
        self,
        new_rate: Decimal | int | float | str,
        changed_by: str = "admin",
    ) -> RateChange:
        """
        Replace the default rate and record the change.

        Raises:
            InvalidRateError: If ``new_rate`` is not in [0, 1].
        """
        rate = validate_commission_rate(new_rate)
        with self._lock:
            change = RateChange(
                previous_rate=self._rate,
                new_rate=rate,
                changed_by=changed_by,
                changed_at=self._clock.now(),
            )
            self._rate = rate
            self._history.append(change)

        logger.info("commission_rate_updated", extra={
            "previous_rate": str(change.previous_rate),
            "new_rate": str(change.new_rate),
            "changed_by": changed_by,
        })
        return change
