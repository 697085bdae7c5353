"""
Subscription plans and per-user subscriptions.

Plans come from ``MarketplaceConfig.pricing_plans``; subscriptions are
kept in memory, one per user.
"""

from __future__ import annotations

import threading
from datetime import timedelta

from sponsor_config.schema import MarketplaceConfig
from sponsor_kernel.domain.clock import Clock, SystemClock
from sponsor_kernel.domain.marketplace import PricingPlan, Subscription, SubscriptionStatus
from sponsor_kernel.exceptions import PlanNotFoundError, ValidationError
from sponsor_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.subscriptions")


class SubscriptionService:
    """Plan catalogue and user subscription store."""

    def __init__(self, config: MarketplaceConfig, clock: Clock | None = None):
        self._config = config
        self._clock = clock or SystemClock()
        self._subscriptions: dict[str, Subscription] = {}
        self._lock = threading.Lock()

    def get_plans(self) -> tuple[PricingPlan, ...]:
        return self._config.pricing_plans

    def get_plan(self, plan_id: str) -> PricingPlan:
        plan = self._config.get_plan(plan_id)
        if plan is None:
            raise PlanNotFoundError(plan_id)
        return plan

    def get_subscription(self, user_id: str) -> Subscription | None:
        with self._lock:
            return self._subscriptions.get(user_id)

    def upgrade_subscription(self, user_id: str, plan_id: str) -> Subscription:
        """
        Put ``user_id`` on ``plan_id`` starting today, replacing any
        current subscription.

        Raises:
            ValidationError: Empty ``user_id``.
            PlanNotFoundError: Unknown ``plan_id``.
        """
        if not user_id:
            raise ValidationError("user_id", user_id, "must be a non-empty string")
        plan = self.get_plan(plan_id)

        start = self._clock.today()
        subscription = Subscription(
            user_id=user_id,
            plan_id=plan.id,
            status=SubscriptionStatus.ACTIVE,
            start_date=start,
            renewal_date=start + timedelta(days=self._config.subscription_term_days),
            auto_renew=True,
        )
        with self._lock:
            previous = self._subscriptions.get(user_id)
            self._subscriptions[user_id] = subscription

        with LogContext.bind(actor_id=user_id):
            logger.info("subscription_upgraded", extra={
                "plan_id": plan.id,
                "previous_plan_id": previous.plan_id if previous else None,
                "renewal_date": subscription.renewal_date,
            })
        return subscription
