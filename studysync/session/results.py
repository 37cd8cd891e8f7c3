"""Display helpers for timers and graded attempts."""

from studysync.models.quiz import SubmissionResult

LOW_TIME_SECONDS = 60

GRADE_THRESHOLDS = [
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
]


def percentage(result: SubmissionResult) -> int:
    """Share of correct answers in percent, 0 when the quiz had no questions."""
    total = result.summary.total
    if not total:
        return 0
    return round(result.summary.correct / total * 100)


def letter_grade(percent: float) -> str:
    """Map a percentage to a letter grade."""
    for threshold, grade in GRADE_THRESHOLDS:
        if percent >= threshold:
            return grade
    return "F"


def format_clock(seconds: int) -> str:
    """Format seconds as MM:SS."""
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


def is_low_time(seconds: int) -> bool:
    """Whether the countdown should be shown as running out."""
    return seconds < LOW_TIME_SECONDS
