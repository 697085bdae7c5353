"""
Tests for SubscriptionService.
"""

import pytest
from datetime import date, timedelta
from decimal import Decimal

from sponsor_kernel.domain.marketplace import SubscriptionStatus
from sponsor_kernel.exceptions import PlanNotFoundError, ValidationError

TODAY = date(2025, 1, 20)


class TestPlans:

    def test_shipped_plans(self, subscriptions):
        assert [p.id for p in subscriptions.get_plans()] == [
            "plan-starter", "plan-growth", "plan-enterprise",
        ]

    def test_get_plan(self, subscriptions):
        growth = subscriptions.get_plan("plan-growth")
        assert growth.price == Decimal("99")
        assert growth.commission_rate == Decimal("0.12")
        assert growth.max_active_proposals is None

    def test_enterprise_is_custom_priced(self, subscriptions):
        assert subscriptions.get_plan("plan-enterprise").is_custom_priced

    def test_unknown_plan(self, subscriptions):
        with pytest.raises(PlanNotFoundError) as exc_info:
            subscriptions.get_plan("plan-platinum")
        assert exc_info.value.code == "PLAN_NOT_FOUND"


class TestUpgrade:

    def test_no_subscription_by_default(self, subscriptions):
        assert subscriptions.get_subscription("sponsor-1") is None

    def test_upgrade(self, subscriptions):
        sub = subscriptions.upgrade_subscription("sponsor-1", "plan-growth")
        assert sub.plan_id == "plan-growth"
        assert sub.status is SubscriptionStatus.ACTIVE
        assert sub.start_date == TODAY
        assert sub.renewal_date == TODAY + timedelta(days=365)
        assert sub.auto_renew
        assert subscriptions.get_subscription("sponsor-1") == sub

    def test_upgrade_replaces_previous(self, subscriptions, clock):
        subscriptions.upgrade_subscription("sponsor-1", "plan-starter")
        clock.advance_days(10)
        sub = subscriptions.upgrade_subscription("sponsor-1", "plan-enterprise")
        assert subscriptions.get_subscription("sponsor-1").plan_id == "plan-enterprise"
        assert sub.start_date == TODAY + timedelta(days=10)

    def test_unknown_plan_keeps_current(self, subscriptions):
        current = subscriptions.upgrade_subscription("sponsor-1", "plan-starter")
        with pytest.raises(PlanNotFoundError):
            subscriptions.upgrade_subscription("sponsor-1", "plan-platinum")
        assert subscriptions.get_subscription("sponsor-1") == current

    def test_empty_user_rejected(self, subscriptions):
        with pytest.raises(ValidationError):
            subscriptions.upgrade_subscription("", "plan-starter")

    def test_logged(self, captured_logs, subscriptions):
        subscriptions.upgrade_subscription("sponsor-1", "plan-starter")
        subscriptions.upgrade_subscription("sponsor-1", "plan-growth")
        records = [r for r in captured_logs() if r["message"] == "subscription_upgraded"]
        assert records[-1]["previous_plan_id"] == "plan-starter"
        assert records[-1]["actor_id"] == "sponsor-1"
