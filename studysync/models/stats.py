"""Pydantic models for attempt history, attempt results and quiz statistics."""

from datetime import datetime

from pydantic import Field

from .quiz import ApiModel, Pagination, Question, QuizAttempt


class AttemptStats(ApiModel):
    """Aggregate figures over one user's attempts at a quiz."""

    total_attempts: int = Field(default=0, ge=0)
    completed_attempts: int = Field(default=0, ge=0)
    best_score: float | None = None
    average_score: float | None = None
    average_time: float | None = Field(None, description="Average seconds per attempt")


class AttemptHistory(ApiModel):
    """Response of GET /quizzes/{id}/attempts."""

    attempts: list[QuizAttempt] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)
    stats: AttemptStats = Field(default_factory=AttemptStats)


class AttemptQuizInfo(ApiModel):
    id: str
    title: str
    passing_score: int = 70


class AttemptQuestionResult(ApiModel):
    """One graded question of a past attempt, with its full question."""

    question: Question
    user_answer: str | None = None
    is_correct: bool = False
    earned_points: float = Field(default=0, ge=0)


class AttemptSummary(ApiModel):
    total: int = Field(default=0, ge=0)
    correct: int = Field(default=0, ge=0)
    incorrect: int = Field(default=0, ge=0)
    passed: bool = False


class AttemptResultsResponse(ApiModel):
    """Response of GET /quizzes/{id}/attempts/{attemptId}."""

    attempt: QuizAttempt
    quiz: AttemptQuizInfo
    results: list[AttemptQuestionResult] = Field(default_factory=list)
    summary: AttemptSummary = Field(default_factory=AttemptSummary)


class QuizStatsHeader(ApiModel):
    id: str
    title: str
    total_questions: int = Field(default=0, ge=0)
    total_attempts: int = Field(default=0, ge=0)


class OverallStats(ApiModel):
    """Score and time figures across every attempt at a quiz."""

    average_score: float = 0
    highest_score: float = 0
    lowest_score: float = 0
    pass_rate: float = 0
    average_time: float = 0


class QuestionAccuracy(ApiModel):
    question_id: str
    question: str
    accuracy: float = 0


class QuestionStat(QuestionAccuracy):
    type: str | None = None
    total_answers: int = Field(default=0, ge=0)
    correct_answers: int = Field(default=0, ge=0)


class QuizStatsResponse(ApiModel):
    """Response of GET /quizzes/{id}/stats."""

    quiz: QuizStatsHeader
    overall_stats: OverallStats = Field(default_factory=OverallStats)
    question_stats: list[QuestionStat] = Field(default_factory=list)
    hardest_questions: list[QuestionAccuracy] = Field(default_factory=list)
    easiest_questions: list[QuestionAccuracy] = Field(default_factory=list)


class UserQuizStats(ApiModel):
    total_quizzes: int = Field(default=0, ge=0)
    total_attempts: int = Field(default=0, ge=0)
    average_score: float = 0
    best_score: float = 0
    average_time: float = 0


class RecentAttempt(ApiModel):
    id: str
    quiz_id: str
    quiz_title: str | None = None
    score: float = 0
    time_spent: int = Field(default=0, ge=0)
    completed_at: datetime | None = None


class UserQuizStatsResponse(ApiModel):
    """Response of GET /quizzes/stats."""

    stats: UserQuizStats = Field(default_factory=UserQuizStats)
    recent_attempts: list[RecentAttempt] = Field(default_factory=list)
