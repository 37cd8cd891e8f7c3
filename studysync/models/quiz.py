"""Pydantic models for quizzes, attempts and graded results."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model mapping snake_case attributes to the API's camelCase keys."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class QuestionType(str, Enum):
    """Question kinds supported by the backend."""

    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    TRUE_FALSE = "TRUE_FALSE"
    SHORT_ANSWER = "SHORT_ANSWER"
    ESSAY = "ESSAY"


CHOICE_TYPES = frozenset({QuestionType.MULTIPLE_CHOICE, QuestionType.TRUE_FALSE})


class Question(ApiModel):
    """A single quiz question as served during an attempt."""

    id: str = Field(..., min_length=1, description="Unique identifier for the question")
    type: QuestionType = Field(
        default=QuestionType.MULTIPLE_CHOICE,
        description="Question type",
    )
    question: str = Field(..., min_length=1, description="The prompt text")
    options: list[str] | None = Field(
        None,
        description="Answer options (choice types only)",
    )
    points: int = Field(default=1, ge=0, description="Point value of the question")
    order: int = Field(default=0, ge=0, description="Position within the quiz")
    explanation: str | None = Field(
        None,
        description="Explanation shown once the attempt is graded",
    )

    @property
    def is_choice(self) -> bool:
        """Whether the question is answered by picking an option."""
        return self.type in CHOICE_TYPES

    @property
    def choices(self) -> list[str]:
        """Options to display; true/false questions fall back to True/False."""
        if self.options:
            return list(self.options)
        if self.type == QuestionType.TRUE_FALSE:
            return ["True", "False"]
        return []

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "id": "q1",
                "type": "MULTIPLE_CHOICE",
                "question": "What is the primary function of mitochondria?",
                "options": [
                    "Protein synthesis",
                    "ATP production",
                    "DNA replication",
                    "Cell division",
                ],
                "points": 1,
                "order": 0,
            }
        },
    }


class Quiz(ApiModel):
    """A quiz definition. Immutable for the lifetime of an attempt."""

    id: str = Field(..., min_length=1, description="Unique identifier for the quiz")
    title: str = Field(..., min_length=1, description="Quiz title")
    description: str | None = Field(None, description="Quiz description")
    time_limit: int | None = Field(
        None,
        ge=1,
        description="Time limit in minutes",
    )
    passing_score: int = Field(
        default=70,
        ge=0,
        le=100,
        description="Passing score in percent",
    )
    questions: list[Question] = Field(
        default_factory=list,
        description="Questions in display order",
    )

    @field_validator("questions")
    @classmethod
    def sort_questions(cls, v: list[Question]) -> list[Question]:
        """Keep questions ordered by their order index."""
        return sorted(v, key=lambda q: q.order)

    @property
    def question_count(self) -> int:
        """Get the number of questions in the quiz."""
        return len(self.questions)

    @property
    def total_points(self) -> int:
        """Sum of the point values of all questions."""
        return sum(q.points for q in self.questions)

    def get_question(self, question_id: str) -> Question | None:
        """Look up a question by id."""
        return next((q for q in self.questions if q.id == question_id), None)

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "id": "quiz-1",
                "title": "Cell Biology Basics",
                "timeLimit": 20,
                "passingScore": 70,
                "questions": [],
            }
        },
    }


class Pagination(ApiModel):
    """Pagination block returned by list endpoints."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1)
    total: int = Field(default=0, ge=0)
    total_pages: int = Field(default=0, ge=0)


class QuizCounts(ApiModel):
    """Related-record counts attached to a quiz listing."""

    questions: int = Field(default=0, ge=0)
    attempts: int = Field(default=0, ge=0)


class QuizSummary(ApiModel):
    """A quiz as it appears in listings."""

    id: str
    title: str
    description: str | None = None
    time_limit: int | None = None
    passing_score: int = 70
    is_public: bool = False
    tags: list[str] = Field(default_factory=list)
    counts: QuizCounts | None = Field(None, alias="_count")
    best_score: float | None = None
    last_attempt: datetime | None = None
    created_at: datetime | None = None

    @property
    def question_count(self) -> int:
        """Number of questions, zero when the backend omits counts."""
        return self.counts.questions if self.counts else 0


class QuizPage(ApiModel):
    """One page of quiz listings."""

    quizzes: list[QuizSummary] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)


class CreateQuizRequest(ApiModel):
    """Body for creating or updating a quiz."""

    title: str = Field(..., min_length=1, description="Quiz title")
    description: str | None = None
    upload_id: str | None = None
    time_limit: int | None = Field(None, ge=1)
    passing_score: int | None = Field(None, ge=0, le=100)
    is_public: bool | None = None
    tags: list[str] | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Strip the title and reject blank ones."""
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("Title is required")
        return cleaned


class QuizAttempt(ApiModel):
    """A single user's pass through a quiz."""

    id: str = Field(..., min_length=1, description="Attempt identifier")
    quiz_id: str | None = Field(None, description="Quiz the attempt belongs to")
    started_at: datetime | None = Field(None, description="When the attempt began")
    completed: bool = Field(default=False, description="Whether the attempt is finalized")
    completed_at: datetime | None = None
    time_spent: int = Field(default=0, ge=0, description="Elapsed seconds")
    score: float = Field(default=0, ge=0, description="Score in percent")


class Answer(ApiModel):
    """A captured answer sent on submission."""

    question_id: str
    user_answer: str


class AnswerResult(ApiModel):
    """The backend's verdict for one question."""

    question_id: str
    user_answer: str | None = None
    correct_answer: str | None = None
    is_correct: bool = False
    points: float = Field(default=0, ge=0, description="Points earned")
    explanation: str | None = None


class ResultSummary(ApiModel):
    """Correct/incorrect tallies for a graded attempt."""

    total: int = Field(default=0, ge=0)
    correct: int = Field(default=0, ge=0)
    incorrect: int = Field(default=0, ge=0)


class SubmissionResult(ApiModel):
    """Graded outcome of a submitted attempt."""

    score: float = Field(default=0, ge=0, description="Score in percent")
    passed: bool = False
    answers: list[AnswerResult] = Field(default_factory=list)
    summary: ResultSummary = Field(default_factory=ResultSummary)
    total_points: float | None = None
    earned_points: float | None = None
    passing_score: int | None = None
    attempt: QuizAttempt | None = None

    def result_for(self, question_id: str) -> AnswerResult | None:
        """Find the verdict for a question by id."""
        return next((a for a in self.answers if a.question_id == question_id), None)


class StartAttemptResponse(ApiModel):
    """Response of POST /quizzes/{id}/attempt."""

    message: str | None = None
    attempt: QuizAttempt
    quiz: Quiz


class SubmitQuizResponse(ApiModel):
    """Response of POST /quizzes/{id}/attempt/{attemptId}/submit."""

    message: str | None = None
    result: SubmissionResult


class GenerationDifficulty(str, Enum):
    """Difficulty mix requested from quiz generation."""

    MIXED = "mixed"
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class GenerationOptions(ApiModel):
    """Tuning options for generating or regenerating questions."""

    max_questions: int | None = Field(None, ge=1, le=50, description="Upper bound on questions")
    min_questions: int | None = Field(None, ge=1, le=50, description="Lower bound on questions")
    difficulty: GenerationDifficulty | None = None
    question_types: list[QuestionType] | None = None
    focus_topics: list[str] | None = None
    include_explanations: bool | None = None

    @model_validator(mode="after")
    def check_bounds(self) -> "GenerationOptions":
        """Reject a minimum above the maximum."""
        if (
            self.min_questions is not None
            and self.max_questions is not None
            and self.min_questions > self.max_questions
        ):
            raise ValueError("min_questions cannot exceed max_questions")
        return self


class GenerateQuizRequest(ApiModel):
    """Body for POST /quizzes/generate."""

    upload_id: str = Field(..., min_length=1, description="Upload to generate from")
    options: GenerationOptions | None = None
    title: str | None = None
    description: str | None = None
    time_limit: int | None = Field(None, ge=1, description="Time limit in minutes")


class DifficultyDistribution(ApiModel):
    easy: int = 0
    medium: int = 0
    hard: int = 0


class GenerationMetadata(ApiModel):
    """Statistics the backend reports about a generation run."""

    total_generated: int = Field(default=0, ge=0)
    average_quality_score: float = 0
    topics: list[str] = Field(default_factory=list)
    processing_time_ms: int = Field(default=0, ge=0)
    difficulty_distribution: DifficultyDistribution = Field(default_factory=DifficultyDistribution)


class GenerateQuizResponse(ApiModel):
    """Response of POST /quizzes/generate."""

    message: str | None = None
    quiz: Quiz
    generation: GenerationMetadata = Field(default_factory=GenerationMetadata)
