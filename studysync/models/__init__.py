"""Data models for the StudySync API."""

from .content import (
    BatchUploadResponse,
    FeedbackCategory,
    FeedbackRecord,
    FeedbackStatus,
    FeedbackSubmission,
    FeedbackType,
    KnowledgeGraph,
    Upload,
)
from .quiz import (
    Answer,
    AnswerResult,
    CreateQuizRequest,
    GenerateQuizRequest,
    GenerateQuizResponse,
    GenerationDifficulty,
    GenerationMetadata,
    GenerationOptions,
    Question,
    QuestionType,
    Quiz,
    QuizAttempt,
    QuizPage,
    QuizSummary,
    ResultSummary,
    StartAttemptResponse,
    SubmissionResult,
    SubmitQuizResponse,
)
from .stats import (
    AttemptHistory,
    AttemptResultsResponse,
    QuizStatsResponse,
    UserQuizStatsResponse,
)
from .subscription import (
    BillingPeriod,
    CheckoutSession,
    Invoice,
    PlanSummary,
    PortalSession,
    ResourceKind,
    SubscriptionInfo,
    SubscriptionStatus,
    SubscriptionTier,
    UsageEntry,
    UsageResponse,
)

__all__ = [
    "Question",
    "QuestionType",
    "Quiz",
    "QuizAttempt",
    "QuizPage",
    "QuizSummary",
    "CreateQuizRequest",
    "GenerateQuizRequest",
    "GenerateQuizResponse",
    "GenerationDifficulty",
    "GenerationMetadata",
    "GenerationOptions",
    "AttemptHistory",
    "AttemptResultsResponse",
    "QuizStatsResponse",
    "UserQuizStatsResponse",
    "Answer",
    "AnswerResult",
    "ResultSummary",
    "SubmissionResult",
    "StartAttemptResponse",
    "SubmitQuizResponse",
    "SubscriptionTier",
    "SubscriptionStatus",
    "ResourceKind",
    "BillingPeriod",
    "UsageEntry",
    "UsageResponse",
    "PlanSummary",
    "SubscriptionInfo",
    "CheckoutSession",
    "PortalSession",
    "Invoice",
    "Upload",
    "BatchUploadResponse",
    "KnowledgeGraph",
    "FeedbackType",
    "FeedbackCategory",
    "FeedbackStatus",
    "FeedbackSubmission",
    "FeedbackRecord",
]
