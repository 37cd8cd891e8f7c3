"""Subscription tiers, plans and the usage gate."""

from .plans import (
    SUBSCRIPTION_PLANS,
    SubscriptionPlan,
    effective_tier,
    get_plan,
    has_feature,
)
from .usage import (
    TIER_LIMITS,
    GateUser,
    UsageGate,
    UsageLimitExceeded,
    get_tier_limits,
    usage_report,
)

__all__ = [
    "TIER_LIMITS",
    "GateUser",
    "UsageGate",
    "UsageLimitExceeded",
    "get_tier_limits",
    "usage_report",
    "SUBSCRIPTION_PLANS",
    "SubscriptionPlan",
    "effective_tier",
    "get_plan",
    "has_feature",
]
