"""Shared test fixtures and configuration for pytest."""

from typing import Any, Callable

import pytest

from studysync.models.quiz import (
    Answer,
    AnswerResult,
    Question,
    QuestionType,
    Quiz,
    QuizAttempt,
    ResultSummary,
    StartAttemptResponse,
    SubmissionResult,
)
from studysync.session.attempt import AttemptSession


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeBackend:
    """In-memory stand-in for the attempt endpoints of StudySyncClient."""

    def __init__(
        self,
        quiz: Quiz,
        start_error: Exception | None = None,
        submit_error: Exception | None = None,
    ) -> None:
        self.quiz = quiz
        self.start_error = start_error
        self.submit_error = submit_error
        self.start_calls: list[str] = []
        self.submit_calls: list[dict[str, Any]] = []
        self.on_start: Callable[[], None] | None = None
        self.on_submit: Callable[[], None] | None = None

    def start_quiz_attempt(self, quiz_id: str) -> StartAttemptResponse:
        self.start_calls.append(quiz_id)
        if self.on_start is not None:
            self.on_start()
        if self.start_error is not None:
            raise self.start_error
        return StartAttemptResponse(
            attempt=QuizAttempt(id=f"attempt-{len(self.start_calls)}", quiz_id=quiz_id),
            quiz=self.quiz,
        )

    def submit_quiz(
        self,
        quiz_id: str,
        attempt_id: str,
        answers: list[Answer],
        time_spent: int,
    ) -> SubmissionResult:
        self.submit_calls.append(
            {
                "quiz_id": quiz_id,
                "attempt_id": attempt_id,
                "answers": answers,
                "time_spent": time_spent,
            }
        )
        if self.on_submit is not None:
            self.on_submit()
        if self.submit_error is not None:
            raise self.submit_error
        return grade(self.quiz, answers)


def grade(quiz: Quiz, answers: list[Answer]) -> SubmissionResult:
    """Mark every answer equal to the first option as correct."""
    given = {a.question_id: a.user_answer for a in answers}
    results = []
    for question in quiz.questions:
        correct_answer = question.choices[0] if question.choices else "expected"
        user_answer = given.get(question.id)
        is_correct = user_answer == correct_answer
        results.append(
            AnswerResult(
                question_id=question.id,
                user_answer=user_answer,
                correct_answer=correct_answer,
                is_correct=is_correct,
                points=question.points if is_correct else 0,
                explanation=question.explanation,
            )
        )
    correct = sum(1 for r in results if r.is_correct)
    total = len(results)
    score = round(correct / total * 100) if total else 0
    return SubmissionResult(
        score=score,
        passed=score >= quiz.passing_score,
        answers=results,
        summary=ResultSummary(total=total, correct=correct, incorrect=total - correct),
        passing_score=quiz.passing_score,
    )


@pytest.fixture
def sample_questions() -> list[Question]:
    """Create a list of sample questions for testing."""
    return [
        Question(
            id="q1",
            type=QuestionType.MULTIPLE_CHOICE,
            question="What is the primary function of mitochondria?",
            options=["ATP production", "Protein synthesis", "DNA replication", "Cell division"],
            order=0,
            explanation="Mitochondria generate most of the cell's ATP.",
        ),
        Question(
            id="q2",
            type=QuestionType.TRUE_FALSE,
            question="The cell membrane is a single layer of phospholipids.",
            order=1,
        ),
        Question(
            id="q3",
            type=QuestionType.SHORT_ANSWER,
            question="Name the process by which water crosses a membrane.",
            points=2,
            order=2,
        ),
    ]


@pytest.fixture
def sample_quiz(sample_questions: list[Question]) -> Quiz:
    """Three-question quiz with a one minute time limit."""
    return Quiz(
        id="quiz-1",
        title="Cell Biology Basics",
        description="Organelles and membranes",
        time_limit=1,
        passing_score=70,
        questions=sample_questions,
    )


@pytest.fixture
def empty_quiz() -> Quiz:
    return Quiz(id="quiz-empty", title="Empty Quiz", questions=[])


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_backend() -> type[FakeBackend]:
    """Factory for backends serving a custom quiz."""
    return FakeBackend


@pytest.fixture
def backend(sample_quiz: Quiz) -> FakeBackend:
    return FakeBackend(sample_quiz)


@pytest.fixture
def session(backend: FakeBackend, clock: FakeClock) -> AttemptSession:
    """A started session on the sample quiz."""
    attempt = AttemptSession(backend, "quiz-1", default_time_limit=1800, clock=clock)
    attempt.start()
    return attempt


@pytest.fixture
def sample_result(sample_quiz: Quiz) -> SubmissionResult:
    """Graded result with q1 correct and q2 wrong."""
    return grade(
        sample_quiz,
        [
            Answer(question_id="q1", user_answer="ATP production"),
            Answer(question_id="q2", user_answer="False"),
        ],
    )
