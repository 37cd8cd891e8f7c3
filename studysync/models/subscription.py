"""Pydantic models for subscription tiers, usage and billing."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from .quiz import ApiModel


class SubscriptionTier(str, Enum):
    """Named subscription levels governing resource ceilings."""

    FREE = "FREE"
    PREMIUM = "PREMIUM"
    STUDENT_PLUS = "STUDENT_PLUS"
    UNIVERSITY = "UNIVERSITY"


class SubscriptionStatus(str, Enum):
    """Billing status of a subscription."""

    ACTIVE = "ACTIVE"
    TRIALING = "TRIALING"
    PAST_DUE = "PAST_DUE"
    CANCELED = "CANCELED"
    INCOMPLETE = "INCOMPLETE"
    UNPAID = "UNPAID"


class ResourceKind(str, Enum):
    """Resources whose creation is gated by tier."""

    FLASHCARD_SETS = "flashcard_sets"
    QUIZZES = "quizzes"
    UPLOADS = "uploads"
    COURSES = "courses"

    @property
    def label(self) -> str:
        """Human readable name used in limit messages."""
        return self.value.replace("_", " ")

    @property
    def singular(self) -> str:
        return {
            ResourceKind.FLASHCARD_SETS: "flashcard set",
            ResourceKind.QUIZZES: "quiz",
            ResourceKind.UPLOADS: "upload",
            ResourceKind.COURSES: "course",
        }[self]


class BillingPeriod(str, Enum):
    """Checkout billing periods."""

    MONTHLY = "monthly"
    YEARLY = "yearly"


class UsageEntry(ApiModel):
    """Used count and ceiling for one resource (limit None means unlimited)."""

    used: int = Field(default=0, ge=0)
    limit: int | None = Field(default=None, ge=0)

    @property
    def is_unlimited(self) -> bool:
        return self.limit is None

    @property
    def remaining(self) -> int | None:
        """Creations left before the ceiling, None when unlimited."""
        if self.limit is None:
            return None
        return max(0, self.limit - self.used)


class UsageResponse(ApiModel):
    """Response of GET /subscriptions/usage."""

    flashcard_sets: UsageEntry = Field(default_factory=UsageEntry)
    quizzes: UsageEntry = Field(default_factory=UsageEntry)
    courses: UsageEntry = Field(default_factory=UsageEntry)
    uploads: UsageEntry = Field(default_factory=UsageEntry)

    def entry(self, resource: ResourceKind) -> UsageEntry:
        return getattr(self, resource.value)


class PlanLimits(ApiModel):
    courses: int | None = None
    flashcard_sets: int | None = None
    quizzes: int | None = None
    uploads: int | None = None


class PlanSummary(ApiModel):
    """A plan as listed by GET /subscriptions/plans."""

    id: str
    name: str
    tier: SubscriptionTier
    description: str = ""
    monthly_price: float = Field(default=0, ge=0)
    yearly_price: float = Field(default=0, ge=0)
    features: list[str] = Field(default_factory=list)
    limits: PlanLimits = Field(default_factory=PlanLimits)
    popular: bool = False
    trial_days: int | None = None


class SubscriptionInfo(ApiModel):
    """Response of GET /subscriptions/current."""

    tier: SubscriptionTier = SubscriptionTier.FREE
    status: SubscriptionStatus | None = None
    is_active: bool = False
    is_trialing: bool = False
    trial_days_remaining: int | None = None
    current_period_end: datetime | None = None
    cancel_at_period_end: bool = False
    plan: PlanSummary | None = None


class CheckoutSession(ApiModel):
    """Response of POST /subscriptions/checkout."""

    url: str
    session_id: str | None = None


class PortalSession(ApiModel):
    """Response of POST /subscriptions/portal."""

    url: str


class Invoice(ApiModel):
    """A billed invoice (amounts in the currency's minor unit)."""

    id: str
    stripe_invoice_id: str | None = None
    amount_due: int = Field(default=0, ge=0)
    amount_paid: int = Field(default=0, ge=0)
    currency: str = "usd"
    status: str
    invoice_url: str | None = None
    pdf_url: str | None = None
    due_date: datetime | None = None
    paid_at: datetime | None = None
    created_at: datetime | None = None
