"""Subscription plans, feature flags and tier rules."""

from datetime import datetime

from pydantic import BaseModel, Field

from studysync.config.settings import Settings, get_settings
from studysync.models.subscription import (
    BillingPeriod,
    SubscriptionStatus,
    SubscriptionTier,
)

STUDENT_DISCOUNT_PERCENTAGE = 20

ACTIVE_STATUSES = frozenset({SubscriptionStatus.ACTIVE, SubscriptionStatus.TRIALING})


class PlanFeatures(BaseModel):
    """Limits (None = unlimited) and feature switches of a plan."""

    max_courses: int | None = None
    max_flashcard_sets: int | None = None
    max_quizzes: int | None = None
    ai_flashcards: bool = True
    ai_quizzes: bool = True
    knowledge_graph: bool = False
    exam_prediction: bool = False
    analytics: bool = False
    assignment_help: bool = False
    priority_support: bool = False
    mobile_app: bool = True
    export_data: bool = False


class SubscriptionPlan(BaseModel):
    """A purchasable plan."""

    id: str
    name: str
    tier: SubscriptionTier
    description: str
    monthly_price: float = Field(..., ge=0, description="Monthly price in USD")
    yearly_price: float = Field(..., ge=0, description="Yearly price in USD")
    trial_days: int | None = None
    features: PlanFeatures


SUBSCRIPTION_PLANS: dict[SubscriptionTier, SubscriptionPlan] = {
    SubscriptionTier.FREE: SubscriptionPlan(
        id="free",
        name="Free",
        tier=SubscriptionTier.FREE,
        description="Perfect for trying out StudySync",
        monthly_price=0,
        yearly_price=0,
        features=PlanFeatures(
            max_courses=1,
            max_flashcard_sets=3,
            max_quizzes=5,
        ),
    ),
    SubscriptionTier.PREMIUM: SubscriptionPlan(
        id="premium",
        name="Premium",
        tier=SubscriptionTier.PREMIUM,
        description="Unlimited courses and advanced features",
        monthly_price=9.99,
        yearly_price=99.99,  # 2 months free
        features=PlanFeatures(
            knowledge_graph=True,
            analytics=True,
            priority_support=True,
            export_data=True,
        ),
    ),
    SubscriptionTier.STUDENT_PLUS: SubscriptionPlan(
        id="student_plus",
        name="Student Plus",
        tier=SubscriptionTier.STUDENT_PLUS,
        description="All Premium features plus AI tutoring and exam prediction",
        monthly_price=14.99,
        yearly_price=149.99,  # 2 months free
        trial_days=7,
        features=PlanFeatures(
            knowledge_graph=True,
            exam_prediction=True,
            analytics=True,
            assignment_help=True,
            priority_support=True,
            export_data=True,
        ),
    ),
}

LIMIT_FEATURES = frozenset({"max_courses", "max_flashcard_sets", "max_quizzes"})


def get_plan(tier: SubscriptionTier | str) -> SubscriptionPlan | None:
    """Get the plan for a tier, None for tiers that are not sold directly."""
    try:
        return SUBSCRIPTION_PLANS.get(SubscriptionTier(tier))
    except ValueError:
        return None


def get_all_plans() -> list[SubscriptionPlan]:
    return list(SUBSCRIPTION_PLANS.values())


def has_feature(tier: SubscriptionTier | str, feature: str) -> bool:
    """Whether a plan switches a boolean feature on."""
    plan = get_plan(tier)
    if plan is None or feature in LIMIT_FEATURES:
        return False
    return bool(getattr(plan.features, feature, False))


def get_feature_limit(tier: SubscriptionTier | str, feature: str) -> int | None:
    """Get a plan limit; tiers without a plan get 0."""
    if feature not in LIMIT_FEATURES:
        raise ValueError(f"Not a limit feature: {feature}")
    plan = get_plan(tier)
    if plan is None:
        return 0
    return getattr(plan.features, feature)


def price_id_for(
    tier: SubscriptionTier | str,
    billing_period: BillingPeriod | str,
    settings: Settings | None = None,
) -> str | None:
    """Look up the configured checkout price ID for a paid plan."""
    settings = settings or get_settings()
    tier = SubscriptionTier(tier)
    if tier not in (SubscriptionTier.PREMIUM, SubscriptionTier.STUDENT_PLUS):
        return None
    field_name = f"price_{tier.value.lower()}_{BillingPeriod(billing_period).value}"
    return getattr(settings, field_name)


def annual_savings(tier: SubscriptionTier | str) -> float:
    """USD saved per year by paying yearly."""
    plan = get_plan(tier)
    if plan is None:
        return 0.0
    return round(plan.monthly_price * 12 - plan.yearly_price, 2)


def annual_savings_percentage(tier: SubscriptionTier | str) -> int:
    plan = get_plan(tier)
    if plan is None or plan.monthly_price == 0:
        return 0
    return round(annual_savings(tier) / (plan.monthly_price * 12) * 100)


def apply_student_discount(price: float) -> float:
    return round(price * (1 - STUDENT_DISCOUNT_PERCENTAGE / 100), 2)


def is_student_email(email: str) -> bool:
    return email.lower().endswith(".edu")


def effective_tier(
    tier: SubscriptionTier | str,
    status: SubscriptionStatus | str | None,
    subscription_end: datetime | None = None,
    now: datetime | None = None,
) -> SubscriptionTier:
    """
    Tier whose limits apply right now.

    A paid tier only counts while its subscription is active or trialing and
    has not ended; otherwise the user is treated as FREE.
    """
    tier = SubscriptionTier(tier)
    if tier == SubscriptionTier.FREE:
        return tier
    if status is None or SubscriptionStatus(status) not in ACTIVE_STATUSES:
        return SubscriptionTier.FREE
    if subscription_end is not None:
        now = now or datetime.now(subscription_end.tzinfo)
        if subscription_end < now:
            return SubscriptionTier.FREE
    return tier


def can_change_tier(
    current: SubscriptionTier | str, new: SubscriptionTier | str
) -> tuple[bool, str | None]:
    """Validate an upgrade or switch between paid tiers."""
    if SubscriptionTier(new) == SubscriptionTier.FREE:
        return False, "Cannot downgrade to free tier. Please cancel subscription instead."
    if SubscriptionTier(current) == SubscriptionTier(new):
        return False, "Already subscribed to this tier."
    return True, None
