"""Per-tier resource ceilings and the check-before-create usage gate."""

import logging
from typing import Any, Callable

from pydantic import BaseModel, Field, field_validator

from studysync.config.settings import get_settings
from studysync.models.subscription import (
    ResourceKind,
    SubscriptionTier,
    UsageEntry,
    UsageResponse,
)

logger = logging.getLogger(__name__)

# None means unlimited
TIER_LIMITS: dict[SubscriptionTier, dict[ResourceKind, int | None]] = {
    SubscriptionTier.FREE: {
        ResourceKind.FLASHCARD_SETS: 3,
        ResourceKind.QUIZZES: 5,
        ResourceKind.UPLOADS: 5,
        ResourceKind.COURSES: 1,
    },
    SubscriptionTier.PREMIUM: {
        ResourceKind.FLASHCARD_SETS: None,
        ResourceKind.QUIZZES: None,
        ResourceKind.UPLOADS: None,
        ResourceKind.COURSES: None,
    },
    SubscriptionTier.STUDENT_PLUS: {
        ResourceKind.FLASHCARD_SETS: None,
        ResourceKind.QUIZZES: None,
        ResourceKind.UPLOADS: None,
        ResourceKind.COURSES: None,
    },
    SubscriptionTier.UNIVERSITY: {
        ResourceKind.FLASHCARD_SETS: None,
        ResourceKind.QUIZZES: None,
        ResourceKind.UPLOADS: None,
        ResourceKind.COURSES: None,
    },
}

# Resources reported by get_user_usage
COUNTED_RESOURCES = (
    ResourceKind.FLASHCARD_SETS,
    ResourceKind.QUIZZES,
    ResourceKind.UPLOADS,
)

ResourceCounter = Callable[[str, ResourceKind], int]


def normalize_tier(tier: Any) -> SubscriptionTier:
    """Resolve a tier value, falling back to FREE for missing or unknown tiers."""
    if isinstance(tier, SubscriptionTier):
        return tier
    try:
        return SubscriptionTier(str(tier).upper())
    except ValueError:
        return SubscriptionTier.FREE


def get_tier_limits(tier: Any) -> dict[ResourceKind, int | None]:
    """Get the ceiling table for a tier."""
    return TIER_LIMITS[normalize_tier(tier)]


def get_limit(tier: Any, resource: ResourceKind) -> int | None:
    """Get the ceiling for one resource, None when unlimited."""
    return get_tier_limits(tier)[resource]


class GateUser(BaseModel):
    """The authenticated user a creation request is made for."""

    user_id: str = Field(..., min_length=1)
    tier: SubscriptionTier = SubscriptionTier.FREE

    @field_validator("tier", mode="before")
    @classmethod
    def default_tier(cls, v: Any) -> SubscriptionTier:
        return normalize_tier(v)


class UsageLimitExceeded(Exception):
    """A creation request was rejected because the user is at their tier ceiling."""

    status_code = 403

    def __init__(
        self,
        resource: ResourceKind,
        limit: int,
        current: int,
        tier: SubscriptionTier,
        upgrade_url: str,
    ) -> None:
        self.resource = resource
        self.limit = limit
        self.current = current
        self.tier = tier
        self.upgrade_url = upgrade_url
        super().__init__(self.error)

    @property
    def error(self) -> str:
        return f"You have reached your {self.resource.singular} limit"

    @property
    def payload(self) -> dict[str, Any]:
        """Structured body returned to the client."""
        return {
            "error": self.error,
            "limit": self.limit,
            "current": self.current,
            "currentTier": self.tier.value,
            "upgradeUrl": self.upgrade_url,
            "message": f"Upgrade to Premium for unlimited {self.resource.label}",
        }


class UsageGate:
    """
    Point-in-time check of a user's resource count against their tier ceiling.

    Counts are read without locking or reservation, so two concurrent
    creations can both pass and leave the user one over the limit.

    Args:
        count_resources: Returns how many of a resource a user owns
        upgrade_url: Link included in rejections (defaults to settings)
    """

    def __init__(
        self,
        count_resources: ResourceCounter,
        upgrade_url: str | None = None,
    ) -> None:
        self._count = count_resources
        self.upgrade_url = upgrade_url or get_settings().upgrade_url

    def check(self, user: GateUser, resource: ResourceKind) -> None:
        """
        Allow the creation or raise UsageLimitExceeded.

        Unlimited tiers return without counting anything.
        """
        limit = get_limit(user.tier, resource)
        if limit is None:
            return

        current = self._count(user.user_id, resource)
        if current >= limit:
            logger.info(
                "User %s at %s limit (%s/%s, tier %s)",
                user.user_id,
                resource.value,
                current,
                limit,
                user.tier.value,
            )
            raise UsageLimitExceeded(resource, limit, current, user.tier, self.upgrade_url)

    def is_allowed(self, user: GateUser, resource: ResourceKind) -> bool:
        try:
            self.check(user, resource)
        except UsageLimitExceeded:
            return False
        return True

    def get_user_usage(self, user_id: str) -> dict[ResourceKind, int]:
        """Current counts of every gated resource for a user."""
        return {resource: self._count(user_id, resource) for resource in COUNTED_RESOURCES}

    def usage_report(self, user: GateUser) -> UsageResponse:
        """Pair the user's counts with their tier ceilings."""
        return usage_report(user.tier, self.get_user_usage(user.user_id))


def usage_report(tier: Any, counts: dict[ResourceKind, int]) -> UsageResponse:
    """Build a usage response from counts and the tier table."""
    limits = get_tier_limits(tier)
    return UsageResponse(
        **{
            resource.value: UsageEntry(used=counts.get(resource, 0), limit=limits[resource])
            for resource in ResourceKind
        }
    )
