"""Tests for subscription plans and tier rules."""

from datetime import datetime, timedelta

import pytest

from studysync.config.settings import Settings
from studysync.gating.plans import (
    annual_savings,
    annual_savings_percentage,
    apply_student_discount,
    can_change_tier,
    effective_tier,
    get_all_plans,
    get_feature_limit,
    get_plan,
    has_feature,
    is_student_email,
    price_id_for,
)
from studysync.models.subscription import SubscriptionStatus, SubscriptionTier


class TestPlans:
    """Test plan lookup and features."""

    def test_all_plans(self):
        assert [p.tier for p in get_all_plans()] == [
            SubscriptionTier.FREE,
            SubscriptionTier.PREMIUM,
            SubscriptionTier.STUDENT_PLUS,
        ]

    def test_student_plus_trial(self):
        assert get_plan("STUDENT_PLUS").trial_days == 7
        assert get_plan(SubscriptionTier.PREMIUM).trial_days is None

    def test_unknown_plan(self):
        assert get_plan("GOLD") is None
        assert get_plan(SubscriptionTier.UNIVERSITY) is None

    def test_has_feature(self):
        assert has_feature("PREMIUM", "knowledge_graph")
        assert not has_feature("FREE", "knowledge_graph")
        assert has_feature("STUDENT_PLUS", "exam_prediction")
        assert not has_feature("PREMIUM", "max_quizzes")

    def test_feature_limits(self):
        assert get_feature_limit("FREE", "max_flashcard_sets") == 3
        assert get_feature_limit("PREMIUM", "max_quizzes") is None
        assert get_feature_limit("UNIVERSITY", "max_courses") == 0

    def test_feature_limit_requires_limit_feature(self):
        with pytest.raises(ValueError):
            get_feature_limit("FREE", "analytics")


class TestPricing:
    """Test price helpers."""

    def test_annual_savings(self):
        assert annual_savings("PREMIUM") == 19.89
        assert annual_savings_percentage("PREMIUM") == 17
        assert annual_savings("FREE") == 0
        assert annual_savings_percentage("FREE") == 0

    def test_student_discount(self):
        assert apply_student_discount(10.0) == 8.0

    def test_student_email(self):
        assert is_student_email("ada@MIT.EDU")
        assert not is_student_email("ada@example.com")

    def test_price_ids(self):
        settings = Settings(STRIPE_PRICE_PREMIUM_YEARLY="price_py")

        assert price_id_for("PREMIUM", "yearly", settings) == "price_py"
        assert price_id_for("PREMIUM", "monthly", settings) is None
        assert price_id_for("FREE", "monthly", settings) is None


class TestTierRules:
    """Test effective tier and tier changes."""

    def test_active_paid_tier(self):
        assert effective_tier("PREMIUM", "ACTIVE") == SubscriptionTier.PREMIUM
        assert effective_tier("STUDENT_PLUS", SubscriptionStatus.TRIALING) == SubscriptionTier.STUDENT_PLUS

    @pytest.mark.parametrize("status", ["CANCELED", "PAST_DUE", "UNPAID", None])
    def test_inactive_falls_back_to_free(self, status):
        assert effective_tier("PREMIUM", status) == SubscriptionTier.FREE

    def test_ended_subscription(self):
        now = datetime(2024, 6, 1)
        assert effective_tier("PREMIUM", "ACTIVE", now - timedelta(days=1), now) == SubscriptionTier.FREE
        assert effective_tier("PREMIUM", "ACTIVE", now + timedelta(days=1), now) == SubscriptionTier.PREMIUM

    def test_can_change_tier(self):
        assert can_change_tier("FREE", "PREMIUM") == (True, None)
        allowed, reason = can_change_tier("PREMIUM", "FREE")
        assert not allowed
        assert "cancel" in reason
        assert can_change_tier("PREMIUM", "PREMIUM")[0] is False
