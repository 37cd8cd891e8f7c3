"""REST client for the StudySync backend."""

import logging
import mimetypes
from contextlib import ExitStack
from pathlib import Path
from typing import Any, Callable, Iterable, TypeVar

import requests
from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from studysync.api.errors import DEFAULT_ERROR_MESSAGE, ApiError
from studysync.config.settings import Settings, get_settings
from studysync.models.content import (
    BatchUploadResponse,
    FeedbackRecord,
    FeedbackSubmission,
    KnowledgeGraph,
    Upload,
)
from studysync.models.quiz import (
    Answer,
    CreateQuizRequest,
    GenerateQuizRequest,
    GenerateQuizResponse,
    GenerationMetadata,
    GenerationOptions,
    Pagination,
    Quiz,
    QuizPage,
    StartAttemptResponse,
    SubmissionResult,
    SubmitQuizResponse,
)
from studysync.models.stats import (
    AttemptHistory,
    AttemptResultsResponse,
    QuizStatsResponse,
    UserQuizStatsResponse,
)
from studysync.models.subscription import (
    BillingPeriod,
    CheckoutSession,
    Invoice,
    PlanSummary,
    PortalSession,
    SubscriptionInfo,
    UsageResponse,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNEXPECTED_RESPONSE = "Unexpected response from StudySync API"


class StudySyncClient:
    """
    Authenticated JSON client for the StudySync REST API.

    Every call attaches the bearer token (when one is configured) and raises
    ApiError on any non-2xx status or on a 2xx body that does not match the
    expected shape. There is no retry or caching.
    """

    def __init__(
        self,
        base_url: str | None = None,
        access_token: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.access_token = access_token if access_token is not None else settings.access_token
        self.timeout = timeout or settings.request_timeout
        self._session = session or requests.Session()

    def __enter__(self) -> "StudySyncClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def _headers(self, json_body: bool) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if json_body:
            headers["Content-Type"] = "application/json"
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def _request(
        self,
        method: str,
        endpoint: str,
        decode: Callable[[dict[str, Any]], T],
        json: Any = None,
        params: dict[str, Any] | None = None,
        files: Any = None,
    ) -> T:
        """
        Issue a request and decode the JSON body.

        Args:
            method: HTTP method
            endpoint: Path relative to the base URL, starting with "/"
            decode: Turns the decoded JSON object into the return value
            json: Optional JSON body
            params: Optional query parameters; None values are dropped
            files: Optional multipart files

        Returns:
            Whatever decode returns for the response body (an empty body
            decodes as an empty dict)

        Raises:
            ApiError: On transport failure, non-2xx status or a body that
                decode rejects
        """
        url = f"{self.base_url}{endpoint}"
        query = {k: v for k, v in (params or {}).items() if v is not None} or None

        logger.debug("%s %s", method, endpoint)
        try:
            response = self._session.request(
                method,
                url,
                json=json,
                params=query,
                files=files,
                headers=self._headers(json_body=json is not None),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, endpoint, e)
            raise ApiError(f"Could not reach StudySync API: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {"data": data}

        if not 200 <= response.status_code < 300:
            message = data.get("error") or DEFAULT_ERROR_MESSAGE
            logger.warning(
                "%s %s returned %s: %s", method, endpoint, response.status_code, message
            )
            raise ApiError(message, status_code=response.status_code, payload=data)

        try:
            result = decode(data)
        except (KeyError, TypeError, ValidationError) as e:
            logger.warning("%s %s returned an unexpected body: %s", method, endpoint, e)
            raise ApiError(
                UNEXPECTED_RESPONSE, status_code=response.status_code, payload=data
            ) from e

        logger.debug("%s %s -> %s", method, endpoint, response.status_code)
        return result

    # Quizzes

    def list_quizzes(
        self,
        page: int | None = None,
        limit: int | None = None,
        search: str | None = None,
        tag: str | None = None,
    ) -> QuizPage:
        return self._request(
            "GET",
            "/quizzes",
            QuizPage.model_validate,
            params={"page": page, "limit": limit, "search": search, "tag": tag},
        )

    def get_quiz(self, quiz_id: str) -> Quiz:
        return self._request(
            "GET", f"/quizzes/{quiz_id}", lambda data: Quiz.model_validate(data["quiz"])
        )

    def create_quiz(self, request: CreateQuizRequest) -> Quiz:
        return self._request(
            "POST",
            "/quizzes",
            lambda data: Quiz.model_validate(data["quiz"]),
            json=request.model_dump(by_alias=True, exclude_none=True),
        )

    def update_quiz(self, quiz_id: str, **changes: Any) -> Quiz:
        """Update a quiz; keyword names follow CreateQuizRequest fields."""
        body = {
            to_camel(name): value
            for name, value in changes.items()
            if name in CreateQuizRequest.model_fields and value is not None
        }
        return self._request(
            "PUT",
            f"/quizzes/{quiz_id}",
            lambda data: Quiz.model_validate(data["quiz"]),
            json=body,
        )

    def delete_quiz(self, quiz_id: str) -> str:
        return self._request(
            "DELETE", f"/quizzes/{quiz_id}", lambda data: data.get("message", "")
        )

    # Generation

    def generate_quiz(self, request: GenerateQuizRequest) -> GenerateQuizResponse:
        """Generate a quiz from an uploaded study material."""
        return self._request(
            "POST",
            "/quizzes/generate",
            GenerateQuizResponse.model_validate,
            json=request.model_dump(mode="json", by_alias=True, exclude_none=True),
        )

    def regenerate_questions(
        self, quiz_id: str, options: GenerationOptions | None = None
    ) -> GenerationMetadata:
        """Replace a quiz's questions with a freshly generated set."""
        body = {
            "options": (
                options.model_dump(mode="json", by_alias=True, exclude_none=True)
                if options
                else None
            )
        }
        return self._request(
            "POST",
            f"/quizzes/{quiz_id}/regenerate",
            lambda data: GenerationMetadata.model_validate(data["generation"]),
            json=body,
        )

    # Attempts

    def start_quiz_attempt(self, quiz_id: str) -> StartAttemptResponse:
        return self._request(
            "POST", f"/quizzes/{quiz_id}/attempt", StartAttemptResponse.model_validate
        )

    def submit_quiz(
        self,
        quiz_id: str,
        attempt_id: str,
        answers: list[Answer],
        time_spent: int,
    ) -> SubmissionResult:
        body = {
            "answers": [a.model_dump(by_alias=True) for a in answers],
            "timeSpent": time_spent,
        }
        return self._request(
            "POST",
            f"/quizzes/{quiz_id}/attempt/{attempt_id}/submit",
            lambda data: SubmitQuizResponse.model_validate(data).result,
            json=body,
        )

    def get_attempt_results(self, quiz_id: str, attempt_id: str) -> AttemptResultsResponse:
        return self._request(
            "GET",
            f"/quizzes/{quiz_id}/attempts/{attempt_id}",
            AttemptResultsResponse.model_validate,
        )

    def get_quiz_attempts(
        self,
        quiz_id: str,
        page: int | None = None,
        limit: int | None = None,
    ) -> AttemptHistory:
        """The current user's past attempts at a quiz, newest first."""
        return self._request(
            "GET",
            f"/quizzes/{quiz_id}/attempts",
            AttemptHistory.model_validate,
            params={"page": page, "limit": limit},
        )

    # Statistics

    def get_quiz_stats(self, quiz_id: str) -> QuizStatsResponse:
        return self._request(
            "GET", f"/quizzes/{quiz_id}/stats", QuizStatsResponse.model_validate
        )

    def get_user_quiz_stats(self) -> UserQuizStatsResponse:
        return self._request("GET", "/quizzes/stats", UserQuizStatsResponse.model_validate)

    # Uploads

    def upload_batch(self, paths: Iterable[str | Path]) -> BatchUploadResponse:
        """Upload several files in one multipart request."""
        with ExitStack() as stack:
            files = []
            for path in map(Path, paths):
                handle = stack.enter_context(path.open("rb"))
                mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
                files.append(("files", (path.name, handle, mime_type)))
            if not files:
                raise ValueError("At least one file is required")
            return self._request(
                "POST", "/uploads/batch", BatchUploadResponse.model_validate, files=files
            )

    def list_uploads(
        self,
        page: int | None = None,
        limit: int | None = None,
        status: str | None = None,
    ) -> tuple[list[Upload], Pagination]:
        def decode(data: dict[str, Any]) -> tuple[list[Upload], Pagination]:
            uploads = [Upload.model_validate(u) for u in data.get("uploads", [])]
            return uploads, Pagination.model_validate(data.get("pagination", {}))

        return self._request(
            "GET",
            "/uploads",
            decode,
            params={"page": page, "limit": limit, "status": status},
        )

    # Knowledge graph

    def get_knowledge_graph(
        self,
        upload_id: str | None = None,
        min_importance: float | None = None,
    ) -> KnowledgeGraph:
        return self._request(
            "GET",
            "/knowledge-graph/graph",
            KnowledgeGraph.model_validate,
            params={"uploadId": upload_id, "minImportance": min_importance},
        )

    # Subscriptions

    def get_plans(self) -> list[PlanSummary]:
        return self._request(
            "GET",
            "/subscriptions/plans",
            lambda data: [PlanSummary.model_validate(p) for p in data.get("plans", [])],
        )

    def get_current_subscription(self) -> SubscriptionInfo:
        return self._request("GET", "/subscriptions/current", SubscriptionInfo.model_validate)

    def get_usage(self) -> UsageResponse:
        return self._request("GET", "/subscriptions/usage", UsageResponse.model_validate)

    def create_checkout_session(
        self,
        price_id: str,
        billing_period: BillingPeriod = BillingPeriod.MONTHLY,
    ) -> CheckoutSession:
        return self._request(
            "POST",
            "/subscriptions/checkout",
            CheckoutSession.model_validate,
            json={"priceId": price_id, "billingPeriod": BillingPeriod(billing_period).value},
        )

    def create_portal_session(self, return_url: str | None = None) -> PortalSession:
        """Open a billing portal session for managing the subscription."""
        body = {"returnUrl": return_url} if return_url else {}
        return self._request(
            "POST", "/subscriptions/portal", PortalSession.model_validate, json=body
        )

    def cancel_subscription(
        self, immediately: bool = False, reason: str | None = None
    ) -> str:
        """Cancel at period end, or right away when immediately is set."""
        body: dict[str, Any] = {"immediately": immediately}
        if reason:
            body["reason"] = reason
        return self._request(
            "PUT",
            "/subscriptions/cancel",
            lambda data: data.get("message", ""),
            json=body,
        )

    def reactivate_subscription(self) -> str:
        """Undo a pending cancellation before the period ends."""
        return self._request(
            "PUT", "/subscriptions/reactivate", lambda data: data.get("message", "")
        )

    def get_invoices(self, limit: int | None = None) -> list[Invoice]:
        return self._request(
            "GET",
            "/subscriptions/invoices",
            lambda data: [Invoice.model_validate(i) for i in data.get("invoices", [])],
            params={"limit": limit},
        )

    # Beta feedback

    def submit_feedback(self, submission: FeedbackSubmission) -> FeedbackRecord:
        return self._request(
            "POST",
            "/beta/feedback",
            lambda data: FeedbackRecord.model_validate(data["feedback"]),
            json=submission.model_dump(mode="json", by_alias=True, exclude_none=True),
        )

    def list_feedback(self) -> list[FeedbackRecord]:
        return self._request(
            "GET",
            "/beta/feedback",
            lambda data: [FeedbackRecord.model_validate(f) for f in data.get("feedback", [])],
        )
