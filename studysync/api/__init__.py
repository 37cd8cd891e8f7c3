"""HTTP client for the StudySync REST API."""

from .client import StudySyncClient
from .errors import ApiError

__all__ = ["StudySyncClient", "ApiError"]
