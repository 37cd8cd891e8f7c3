"""Client-side state machine for a single quiz attempt."""

from __future__ import annotations

import logging
import time
from datetime import datetime
from enum import Enum
from typing import Callable, Protocol

from pydantic import ValidationError

from studysync.api.errors import ApiError
from studysync.config.settings import get_settings
from studysync.models.quiz import (
    Answer,
    AnswerResult,
    Question,
    Quiz,
    QuizAttempt,
    StartAttemptResponse,
    SubmissionResult,
)
from studysync.session.countdown import Countdown

logger = logging.getLogger(__name__)


class AttemptBackend(Protocol):
    """The two API calls an attempt needs; StudySyncClient satisfies it."""

    def start_quiz_attempt(self, quiz_id: str) -> StartAttemptResponse: ...

    def submit_quiz(
        self,
        quiz_id: str,
        attempt_id: str,
        answers: list[Answer],
        time_spent: int,
    ) -> SubmissionResult: ...


class AttemptStatus(str, Enum):
    """Lifecycle states of an attempt."""

    LOADING = "loading"
    IN_PROGRESS = "in_progress"
    SUBMITTING = "submitting"
    COMPLETED = "completed"
    ERROR = "error"


class AttemptStateError(RuntimeError):
    """An operation was requested in a state that does not allow it."""


class AttemptSession:
    """
    Tracks navigation, answers, flags, timing and submission for one attempt.

    The session is owned by whoever drives a single quiz attempt. Grading
    happens on the backend only: the session stores and exposes the
    backend's verdict but never decides correctness itself.

    Args:
        backend: Object issuing the start and submit calls
        quiz_id: Quiz to attempt
        default_time_limit: Countdown length in seconds for quizzes without
            a time limit (defaults to the configured value)
        clock: Monotonic clock used for elapsed time and the countdown
    """

    def __init__(
        self,
        backend: AttemptBackend,
        quiz_id: str,
        default_time_limit: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._backend = backend
        self.quiz_id = quiz_id
        self._default_time_limit = (
            default_time_limit
            if default_time_limit is not None
            else get_settings().default_time_limit_seconds
        )
        self._clock = clock
        self._generation = 0
        self._closed = False
        self._reset()

    def _reset(self) -> None:
        self.status = AttemptStatus.LOADING
        self.quiz: Quiz | None = None
        self.attempt: QuizAttempt | None = None
        self.started_at: datetime | None = None
        self.result: SubmissionResult | None = None
        self.time_spent: int | None = None
        self.error: str | None = None
        self.reviewing = False
        self.timed_out = False
        self.countdown: Countdown | None = None
        self._answers: dict[str, str] = {}
        self._flagged: set[str] = set()
        self._current_index = 0
        self._start_tick: float | None = None

    def _is_stale(self, generation: int) -> bool:
        return self._closed or generation != self._generation

    # Lifecycle

    def start(self) -> None:
        """Start an attempt on the backend and enter IN_PROGRESS, or ERROR on failure."""
        if self._closed:
            raise AttemptStateError("Session is closed")
        if self.countdown is not None:
            self.countdown.stop()
        self._generation += 1
        generation = self._generation
        self._reset()

        try:
            response = self._backend.start_quiz_attempt(self.quiz_id)
        except (ApiError, ValidationError) as e:
            if self._is_stale(generation):
                return
            self.status = AttemptStatus.ERROR
            self.error = getattr(e, "message", None) or str(e)
            logger.warning("Could not start quiz %s: %s", self.quiz_id, self.error)
            return

        if self._is_stale(generation):
            logger.debug("Ignoring start response for a torn-down session")
            return

        self.quiz = response.quiz
        self.attempt = response.attempt
        self.started_at = datetime.now()
        self._start_tick = self._clock()
        self.countdown = Countdown(
            self.time_limit_seconds, on_expire=self._on_time_up, clock=self._clock
        )
        self.status = AttemptStatus.IN_PROGRESS
        logger.info(
            "Attempt %s started for quiz %s (%s questions, %ss)",
            self.attempt.id,
            self.quiz.id,
            self.question_count,
            self.time_limit_seconds,
        )
        self.countdown.start()

    def retake(self) -> None:
        """Discard everything and start a fresh attempt."""
        logger.info("Retaking quiz %s", self.quiz_id)
        self.start()

    def close(self) -> None:
        """Tear the session down; late responses are ignored from now on."""
        self._closed = True
        self._generation += 1
        if self.countdown is not None:
            self.countdown.stop()

    @property
    def closed(self) -> bool:
        return self._closed

    # In-progress operations

    def _require_question(self, question_id: str) -> Question:
        question = self.quiz.get_question(question_id) if self.quiz else None
        if question is None:
            raise ValueError(f"Unknown question id: {question_id}")
        return question

    def answer(self, question_id: str, value: str) -> None:
        """Record or overwrite the answer to a question. No-op once submitted."""
        if self.status != AttemptStatus.IN_PROGRESS:
            return
        self._require_question(question_id)
        self._answers[question_id] = value

    def answer_current(self, value: str) -> None:
        question = self.current_question
        if question is not None:
            self.answer(question.id, value)

    def toggle_flag(self, question_id: str) -> bool:
        """Flag or unflag a question. Returns the new flag state."""
        if self.status != AttemptStatus.IN_PROGRESS:
            return question_id in self._flagged
        self._require_question(question_id)
        if question_id in self._flagged:
            self._flagged.discard(question_id)
            return False
        self._flagged.add(question_id)
        return True

    def _can_navigate(self) -> bool:
        return self.status == AttemptStatus.IN_PROGRESS or self.reviewing

    def navigate(self, direction: int) -> int:
        """Move one question forward (direction > 0) or back (< 0), clamped."""
        if self._can_navigate() and direction:
            step = 1 if direction > 0 else -1
            self._current_index = self._clamp(self._current_index + step)
        return self._current_index

    def go_to(self, index: int) -> int:
        if self._can_navigate():
            self._current_index = self._clamp(index)
        return self._current_index

    def _clamp(self, index: int) -> int:
        last = max(0, self.question_count - 1)
        return min(max(index, 0), last)

    # Timer

    def tick(self) -> None:
        """Advance the countdown by one second."""
        if self.countdown is not None:
            self.countdown.tick()

    def poll_timer(self) -> int:
        """Catch the countdown up with the clock and return remaining seconds."""
        if self.countdown is not None:
            self.countdown.poll()
        return self.remaining_seconds

    def _on_time_up(self) -> None:
        if self.status != AttemptStatus.IN_PROGRESS:
            return
        logger.info("Time is up for attempt %s; submitting", self.attempt.id)
        self.timed_out = True
        self.submit()

    # Submission

    def build_answers(self) -> list[Answer]:
        """Captured answers in question order; never-answered questions are omitted."""
        if self.quiz is None:
            return []
        return [
            Answer(question_id=q.id, user_answer=self._answers[q.id])
            for q in self.quiz.questions
            if self._answers.get(q.id) is not None
        ]

    def elapsed_seconds(self) -> int:
        if self._start_tick is None:
            return 0
        return max(0, int(self._clock() - self._start_tick))

    def submit(self) -> SubmissionResult | None:
        """
        Submit the attempt once.

        Repeated calls while submitting or after completion issue no request.
        On failure the error is recorded and the attempt stays in progress.

        Returns:
            The graded result, or None when nothing was (successfully) submitted
        """
        if self.status != AttemptStatus.IN_PROGRESS:
            logger.debug("Submit ignored in state %s", self.status.value)
            return self.result

        generation = self._generation
        self.status = AttemptStatus.SUBMITTING
        self.error = None
        answers = self.build_answers()
        # An expiry noticed late still reports at most the time limit
        elapsed = min(self.elapsed_seconds(), self.time_limit_seconds)

        try:
            result = self._backend.submit_quiz(
                self.quiz.id, self.attempt.id, answers, elapsed
            )
        except (ApiError, ValidationError) as e:
            if self._is_stale(generation):
                return None
            self.status = AttemptStatus.IN_PROGRESS
            self.error = getattr(e, "message", None) or str(e)
            logger.warning("Submitting attempt %s failed: %s", self.attempt.id, self.error)
            return None

        if self._is_stale(generation):
            logger.debug("Ignoring submit response for a torn-down session")
            return None

        self.result = result
        self.time_spent = elapsed
        self.status = AttemptStatus.COMPLETED
        if self.countdown is not None:
            self.countdown.stop()
        logger.info(
            "Attempt %s submitted: %s answers, %ss, score %s",
            self.attempt.id,
            len(answers),
            elapsed,
            result.score,
        )
        return result

    # Review

    def begin_review(self) -> None:
        """Enter read-only review of a completed attempt from the first question."""
        if self.status != AttemptStatus.COMPLETED:
            raise AttemptStateError("Only a completed attempt can be reviewed")
        self.reviewing = True
        self._current_index = 0

    def result_for(self, question_id: str) -> AnswerResult | None:
        return self.result.result_for(question_id) if self.result else None

    # Derived state

    @property
    def is_submitted(self) -> bool:
        return self.status == AttemptStatus.COMPLETED

    @property
    def is_submitting(self) -> bool:
        return self.status == AttemptStatus.SUBMITTING

    @property
    def question_count(self) -> int:
        return self.quiz.question_count if self.quiz else 0

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_question(self) -> Question | None:
        if not self.question_count:
            return None
        return self.quiz.questions[self._current_index]

    @property
    def answers(self) -> dict[str, str]:
        return dict(self._answers)

    @property
    def flagged(self) -> frozenset[str]:
        return frozenset(self._flagged)

    def get_answer(self, question_id: str) -> str | None:
        return self._answers.get(question_id)

    def is_answered(self, question_id: str) -> bool:
        return question_id in self._answers

    def is_flagged(self, question_id: str) -> bool:
        return question_id in self._flagged

    @property
    def answered_count(self) -> int:
        return len(self._answers)

    @property
    def progress_percent(self) -> int:
        """Answered share in percent; 0 for a quiz without questions."""
        if not self.question_count:
            return 0
        return round(self.answered_count / self.question_count * 100)

    @property
    def time_limit_seconds(self) -> int:
        if self.quiz is not None and self.quiz.time_limit:
            return self.quiz.time_limit * 60
        return self._default_time_limit

    @property
    def remaining_seconds(self) -> int:
        if self.countdown is None:
            return self.time_limit_seconds
        return self.countdown.remaining
