"""Tests for the StudySync REST client."""

from unittest.mock import MagicMock

import pytest
import requests

from studysync.api.client import StudySyncClient
from studysync.api.errors import ApiError
from studysync.models.content import FeedbackCategory, FeedbackSubmission, FeedbackType
from studysync.models.quiz import (
    Answer,
    CreateQuizRequest,
    GenerateQuizRequest,
    GenerationDifficulty,
    GenerationOptions,
    QuestionType,
)
from studysync.models.subscription import BillingPeriod


def make_response(status_code: int = 200, body=None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    if body is None:
        response.json.side_effect = ValueError("No JSON")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def http():
    """Mocked requests session."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(http) -> StudySyncClient:
    return StudySyncClient(
        base_url="http://api.test/api/", access_token="token-123", timeout=5, session=http
    )


def sent(http) -> tuple:
    """Positional and keyword args of the last request."""
    call = http.request.call_args
    return call.args, call.kwargs


class TestRequest:
    """Test headers, URLs and error mapping."""

    def test_bearer_token_attached(self, client, http):
        http.request.return_value = make_response(200, {"quizzes": []})
        client.list_quizzes()

        (method, url), kwargs = sent(http)
        assert method == "GET"
        assert url == "http://api.test/api/quizzes"
        assert kwargs["headers"]["Authorization"] == "Bearer token-123"
        assert kwargs["timeout"] == 5
        assert kwargs["params"] is None

    def test_no_token_no_header(self, http):
        client = StudySyncClient(base_url="http://api.test/api", access_token="", session=http)
        http.request.return_value = make_response(200, {})
        client.get_usage()

        _, kwargs = sent(http)
        assert "Authorization" not in kwargs["headers"]

    def test_none_params_dropped(self, client, http):
        http.request.return_value = make_response(200, {"quizzes": []})
        client.list_quizzes(page=2, search=None)

        _, kwargs = sent(http)
        assert kwargs["params"] == {"page": 2}

    def test_error_message_from_body(self, client, http):
        http.request.return_value = make_response(404, {"error": "Quiz not found"})

        with pytest.raises(ApiError) as exc_info:
            client.get_quiz("missing")

        assert exc_info.value.message == "Quiz not found"
        assert exc_info.value.status_code == 404
        assert str(exc_info.value) == "Quiz not found (HTTP 404)"

    def test_default_message_without_body(self, client, http):
        http.request.return_value = make_response(500)

        with pytest.raises(ApiError) as exc_info:
            client.get_quiz("quiz-1")

        assert exc_info.value.message == "An error occurred"
        assert exc_info.value.status_code == 500

    def test_transport_failure(self, client, http):
        http.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(ApiError) as exc_info:
            client.get_usage()

        assert exc_info.value.status_code is None
        assert "refused" in exc_info.value.message

    def test_usage_limit_error(self, client, http):
        """Test that a tier-limit rejection exposes its upgrade link."""
        http.request.return_value = make_response(
            403,
            {
                "error": "You have reached your quiz limit",
                "limit": 5,
                "current": 5,
                "currentTier": "FREE",
                "upgradeUrl": "/pricing",
                "message": "Upgrade to Premium for unlimited quizzes",
            },
        )

        with pytest.raises(ApiError) as exc_info:
            client.create_quiz(CreateQuizRequest(title="Another"))

        assert exc_info.value.is_usage_limit
        assert exc_info.value.upgrade_url == "/pricing"
        assert exc_info.value.payload["current"] == 5

    def test_missing_envelope_key(self, client, http):
        """Test that a 2xx body without the expected key raises ApiError."""
        http.request.return_value = make_response(200, {"message": "ok"})

        with pytest.raises(ApiError) as exc_info:
            client.get_quiz("quiz-1")

        assert exc_info.value.message == "Unexpected response from StudySync API"
        assert exc_info.value.status_code == 200

    def test_malformed_body(self, client, http):
        """Test that a 2xx body failing validation raises ApiError."""
        http.request.return_value = make_response(200, {"quizzes": [{"id": "q"}]})

        with pytest.raises(ApiError) as exc_info:
            client.list_quizzes()

        assert exc_info.value.status_code == 200
        assert exc_info.value.payload == {"quizzes": [{"id": "q"}]}

    def test_wrong_container_type(self, client, http):
        http.request.return_value = make_response(200, {"plans": 3})

        with pytest.raises(ApiError):
            client.get_plans()

    def test_plain_forbidden_is_not_usage_limit(self):
        assert not ApiError("Forbidden", 403, {"error": "Forbidden"}).is_usage_limit


class TestAttempts:
    """Test the attempt endpoints."""

    def test_start_attempt(self, client, http, sample_quiz):
        http.request.return_value = make_response(
            201,
            {
                "message": "Quiz attempt started",
                "attempt": {"id": "a1", "quizId": "quiz-1"},
                "quiz": sample_quiz.model_dump(by_alias=True),
            },
        )

        response = client.start_quiz_attempt("quiz-1")

        (method, url), _ = sent(http)
        assert method == "POST"
        assert url.endswith("/quizzes/quiz-1/attempt")
        assert response.attempt.id == "a1"
        assert response.quiz.question_count == 3

    def test_submit_body(self, client, http):
        http.request.return_value = make_response(
            200,
            {
                "message": "Quiz submitted",
                "result": {
                    "score": 100,
                    "passed": True,
                    "answers": [{"questionId": "q1", "userAnswer": "B", "isCorrect": True, "points": 1}],
                    "summary": {"total": 1, "correct": 1, "incorrect": 0},
                },
            },
        )

        result = client.submit_quiz(
            "quiz-1", "a1", [Answer(question_id="q1", user_answer="B")], time_spent=60
        )

        (_, url), kwargs = sent(http)
        assert url.endswith("/quizzes/quiz-1/attempt/a1/submit")
        assert kwargs["json"] == {
            "answers": [{"questionId": "q1", "userAnswer": "B"}],
            "timeSpent": 60,
        }
        assert kwargs["headers"]["Content-Type"] == "application/json"
        assert result.passed
        assert result.summary.correct == 1


class TestOtherEndpoints:
    """Test quiz, upload, subscription and feedback endpoints."""

    def test_update_quiz_camel_case(self, client, http, sample_quiz):
        http.request.return_value = make_response(200, {"quiz": sample_quiz.model_dump(by_alias=True)})
        client.update_quiz("quiz-1", time_limit=15, passing_score=None, bogus="x")

        (method, _), kwargs = sent(http)
        assert method == "PUT"
        assert kwargs["json"] == {"timeLimit": 15}

    def test_upload_batch(self, client, http, tmp_path):
        notes = tmp_path / "notes.pdf"
        notes.write_bytes(b"%PDF-1.4")
        http.request.return_value = make_response(
            201, {"uploads": [{"id": "u1", "originalName": "notes.pdf"}], "errors": []}
        )

        response = client.upload_batch([notes])

        _, kwargs = sent(http)
        field, (name, _, mime) = kwargs["files"][0]
        assert field == "files"
        assert name == "notes.pdf"
        assert mime == "application/pdf"
        assert "Content-Type" not in kwargs["headers"]
        assert response.uploads[0].original_name == "notes.pdf"

    def test_upload_batch_requires_files(self, client, http):
        with pytest.raises(ValueError):
            client.upload_batch([])
        http.request.assert_not_called()

    def test_knowledge_graph_params(self, client, http):
        http.request.return_value = make_response(200, {"nodes": [], "edges": []})
        client.get_knowledge_graph(upload_id="u1", min_importance=0.5)

        _, kwargs = sent(http)
        assert kwargs["params"] == {"uploadId": "u1", "minImportance": 0.5}

    def test_checkout(self, client, http):
        http.request.return_value = make_response(200, {"url": "https://pay.test/s", "sessionId": "s1"})

        checkout = client.create_checkout_session("price_1", BillingPeriod.YEARLY)

        _, kwargs = sent(http)
        assert kwargs["json"] == {"priceId": "price_1", "billingPeriod": "yearly"}
        assert checkout.session_id == "s1"

    def test_submit_feedback(self, client, http):
        http.request.return_value = make_response(
            201,
            {"message": "ok", "feedback": {"id": "f1", "type": "BUG_REPORT", "category": "QUIZZES"}},
        )
        submission = FeedbackSubmission(
            type=FeedbackType.BUG_REPORT, category=FeedbackCategory.QUIZZES, content="Broken", rating=2
        )

        record = client.submit_feedback(submission)

        _, kwargs = sent(http)
        assert kwargs["json"] == {
            "type": "BUG_REPORT",
            "category": "QUIZZES",
            "content": "Broken",
            "rating": 2,
        }
        assert record.id == "f1"

    def test_context_manager_closes_session(self, http):
        with StudySyncClient(base_url="http://api.test", session=http):
            pass
        http.close.assert_called_once()

    def test_delete_quiz(self, client, http):
        http.request.return_value = make_response(200, {"message": "Quiz deleted successfully"})

        assert client.delete_quiz("quiz-1") == "Quiz deleted successfully"
        (method, url), _ = sent(http)
        assert method == "DELETE"
        assert url.endswith("/quizzes/quiz-1")

    def test_attempt_results(self, client, http):
        http.request.return_value = make_response(
            200,
            {
                "attempt": {"id": "a1", "score": 80, "timeSpent": 300, "completed": True},
                "quiz": {"id": "quiz-1", "title": "Cell Biology Basics", "passingScore": 70},
                "results": [
                    {
                        "question": {"id": "q1", "type": "MULTIPLE_CHOICE", "question": "Pick"},
                        "userAnswer": "A",
                        "isCorrect": True,
                        "earnedPoints": 1,
                    }
                ],
                "summary": {"total": 1, "correct": 1, "incorrect": 0, "passed": True},
            },
        )

        results = client.get_attempt_results("quiz-1", "a1")

        (_, url), _ = sent(http)
        assert url.endswith("/quizzes/quiz-1/attempts/a1")
        assert results.attempt.score == 80
        assert results.quiz.passing_score == 70
        assert results.results[0].question.id == "q1"
        assert results.summary.passed

    def test_list_uploads(self, client, http):
        http.request.return_value = make_response(
            200,
            {
                "uploads": [{"id": "u1", "originalName": "a.pdf", "processingStatus": "COMPLETED"}],
                "pagination": {"page": 1, "limit": 20, "total": 1, "totalPages": 1},
            },
        )

        uploads, pagination = client.list_uploads(status="COMPLETED")

        assert uploads[0].processing_status.value == "COMPLETED"
        assert pagination.total == 1

    def test_plans_and_feedback_lists(self, client, http):
        http.request.return_value = make_response(
            200, {"plans": [{"id": "premium", "name": "Premium", "tier": "PREMIUM", "monthlyPrice": 9.99}]}
        )
        assert client.get_plans()[0].monthly_price == 9.99

        http.request.return_value = make_response(
            200, {"feedback": [{"id": "f1", "type": "GENERAL", "category": "OTHER", "content": "Nice"}]}
        )
        assert client.list_feedback()[0].content == "Nice"


class TestGenerationAndStats:
    """Test generation, attempt history and statistics endpoints."""

    def test_generate_quiz(self, client, http, sample_quiz):
        http.request.return_value = make_response(
            201,
            {
                "message": "Quiz generated successfully",
                "quiz": sample_quiz.model_dump(by_alias=True),
                "generation": {
                    "totalGenerated": 3,
                    "averageQualityScore": 0.82,
                    "topics": ["cells"],
                    "processingTimeMs": 1500,
                    "difficultyDistribution": {"easy": 1, "medium": 1, "hard": 1},
                },
            },
        )
        request = GenerateQuizRequest(
            upload_id="u1",
            title="Cells",
            options=GenerationOptions(
                max_questions=10,
                difficulty=GenerationDifficulty.HARD,
                question_types=[QuestionType.MULTIPLE_CHOICE],
            ),
        )

        response = client.generate_quiz(request)

        (method, url), kwargs = sent(http)
        assert method == "POST"
        assert url.endswith("/quizzes/generate")
        assert kwargs["json"] == {
            "uploadId": "u1",
            "title": "Cells",
            "options": {
                "maxQuestions": 10,
                "difficulty": "hard",
                "questionTypes": ["MULTIPLE_CHOICE"],
            },
        }
        assert response.quiz.id == "quiz-1"
        assert response.generation.difficulty_distribution.hard == 1

    def test_regenerate_questions(self, client, http):
        http.request.return_value = make_response(
            200, {"message": "Questions regenerated", "generation": {"totalGenerated": 5}}
        )

        metadata = client.regenerate_questions("quiz-1", GenerationOptions(max_questions=5))

        (_, url), kwargs = sent(http)
        assert url.endswith("/quizzes/quiz-1/regenerate")
        assert kwargs["json"] == {"options": {"maxQuestions": 5}}
        assert metadata.total_generated == 5

    def test_quiz_attempts(self, client, http):
        http.request.return_value = make_response(
            200,
            {
                "attempts": [{"id": "a2", "score": 90, "completed": True}, {"id": "a1"}],
                "pagination": {"page": 1, "limit": 10, "total": 2, "totalPages": 1},
                "stats": {"totalAttempts": 2, "completedAttempts": 1, "bestScore": 90},
            },
        )

        history = client.get_quiz_attempts("quiz-1", limit=10)

        (_, url), kwargs = sent(http)
        assert url.endswith("/quizzes/quiz-1/attempts")
        assert kwargs["params"] == {"limit": 10}
        assert [a.id for a in history.attempts] == ["a2", "a1"]
        assert history.stats.best_score == 90
        assert history.stats.average_score is None

    def test_quiz_stats(self, client, http):
        http.request.return_value = make_response(
            200,
            {
                "quiz": {"id": "quiz-1", "title": "Cells", "totalQuestions": 3, "totalAttempts": 4},
                "overallStats": {"averageScore": 72.5, "passRate": 50},
                "questionStats": [
                    {"questionId": "q1", "question": "Pick", "type": "MULTIPLE_CHOICE", "accuracy": 25}
                ],
                "hardestQuestions": [{"questionId": "q1", "question": "Pick", "accuracy": 25}],
            },
        )

        stats = client.get_quiz_stats("quiz-1")

        (_, url), _ = sent(http)
        assert url.endswith("/quizzes/quiz-1/stats")
        assert stats.overall_stats.average_score == 72.5
        assert stats.hardest_questions[0].accuracy == 25

    def test_user_quiz_stats(self, client, http):
        http.request.return_value = make_response(
            200,
            {
                "stats": {"totalQuizzes": 2, "totalAttempts": 5, "averageScore": 80},
                "recentAttempts": [
                    {"id": "a1", "quizId": "quiz-1", "quizTitle": "Cells", "score": 80, "timeSpent": 42}
                ],
            },
        )

        stats = client.get_user_quiz_stats()

        (_, url), _ = sent(http)
        assert url == "http://api.test/api/quizzes/stats"
        assert stats.recent_attempts[0].quiz_title == "Cells"


class TestSubscriptionManagement:
    """Test billing portal, cancellation and invoices."""

    def test_portal(self, client, http):
        http.request.return_value = make_response(200, {"url": "https://billing.test/p"})

        portal = client.create_portal_session("https://app.test/settings")

        (method, url), kwargs = sent(http)
        assert (method, url) == ("POST", "http://api.test/api/subscriptions/portal")
        assert kwargs["json"] == {"returnUrl": "https://app.test/settings"}
        assert portal.url == "https://billing.test/p"

    def test_cancel(self, client, http):
        http.request.return_value = make_response(200, {"message": "Subscription will be canceled"})

        message = client.cancel_subscription(reason="Too expensive")

        (method, url), kwargs = sent(http)
        assert method == "PUT"
        assert url.endswith("/subscriptions/cancel")
        assert kwargs["json"] == {"immediately": False, "reason": "Too expensive"}
        assert message == "Subscription will be canceled"

    def test_reactivate(self, client, http):
        http.request.return_value = make_response(200, {"message": "Subscription reactivated"})

        assert client.reactivate_subscription() == "Subscription reactivated"
        (method, url), kwargs = sent(http)
        assert method == "PUT"
        assert url.endswith("/subscriptions/reactivate")
        assert kwargs["json"] is None

    def test_invoices(self, client, http):
        http.request.return_value = make_response(
            200,
            {
                "invoices": [
                    {"id": "i1", "amountDue": 999, "amountPaid": 999, "currency": "usd", "status": "paid"}
                ]
            },
        )

        items = client.get_invoices(limit=5)

        _, kwargs = sent(http)
        assert kwargs["params"] == {"limit": 5}
        assert items[0].amount_paid == 999
