"""Errors raised by the StudySync API client."""

from typing import Any

DEFAULT_ERROR_MESSAGE = "An error occurred"


class ApiError(Exception):
    """A failed API call: non-2xx response or transport failure."""

    def __init__(
        self,
        message: str = DEFAULT_ERROR_MESSAGE,
        status_code: int | None = None,
        payload: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload or {}

    @property
    def is_usage_limit(self) -> bool:
        """True when the backend rejected the call because of a tier limit."""
        return self.status_code == 403 and "upgradeUrl" in self.payload

    @property
    def upgrade_url(self) -> str | None:
        return self.payload.get("upgradeUrl")

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (HTTP {self.status_code})"
