"""Typer CLI application for StudySync."""

import threading
from pathlib import Path
from typing import Callable, List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from studysync import __version__
from studysync.api.client import StudySyncClient
from studysync.api.errors import ApiError
from studysync.config.settings import get_settings
from studysync.export.docx_generator import export_review_to_docx
from studysync.gating.plans import annual_savings_percentage, get_all_plans
from studysync.models.content import FeedbackCategory, FeedbackSubmission, FeedbackType
from studysync.models.quiz import (
    GenerateQuizRequest,
    GenerationDifficulty,
    GenerationOptions,
    QuestionType,
)
from studysync.models.stats import QuizStatsResponse, UserQuizStatsResponse
from studysync.models.subscription import BillingPeriod, ResourceKind
from studysync.session.attempt import AttemptSession, AttemptStatus
from studysync.session.results import format_clock, is_low_time, letter_grade, percentage
from studysync.session.ticker import SessionTicker
from studysync.utils.logging_config import configure_logging

app = typer.Typer(
    name="studysync",
    help="StudySync in the terminal: take quizzes, check usage and send feedback",
    add_completion=False,
)

console = Console()

OPTION_LABELS = "ABCDEFGH"

HELP_LINE = (
    "[dim]Answer with a letter or text  |  n next  p previous  g N go to  "
    "f flag  s submit  q quit[/dim]"
)


def get_client() -> StudySyncClient:
    """Build an API client from settings."""
    return StudySyncClient(settings=get_settings())


def fail(message: str) -> None:
    """Print an error and exit with code 1."""
    console.print(f"[red]Error:[/red] {message}", style="bold")
    raise typer.Exit(code=1)


@app.command()
def quizzes(
    page: int = typer.Option(1, "--page", "-p", min=1, help="Page number"),
    limit: int = typer.Option(20, "--limit", "-l", min=1, max=100, help="Quizzes per page"),
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Search text"),
    tag: Optional[str] = typer.Option(None, "--tag", "-t", help="Filter by tag"),
) -> None:
    """List your quizzes."""
    try:
        with get_client() as client:
            result = client.list_quizzes(page=page, limit=limit, search=search, tag=tag)
    except ApiError as e:
        fail(e.message)

    if not result.quizzes:
        console.print("[yellow]No quizzes found.[/yellow]")
        return

    table = Table(title="Quizzes", border_style="cyan")
    table.add_column("ID", style="cyan")
    table.add_column("Title", style="white")
    table.add_column("Questions", justify="right")
    table.add_column("Time", justify="right")
    table.add_column("Best", justify="right")

    for quiz in result.quizzes:
        table.add_row(
            quiz.id,
            quiz.title,
            str(quiz.question_count),
            f"{quiz.time_limit} min" if quiz.time_limit else "-",
            f"{quiz.best_score:g}%" if quiz.best_score is not None else "-",
        )

    console.print(table)
    pagination = result.pagination
    console.print(
        f"[dim]Page {pagination.page} of {max(pagination.total_pages, 1)} "
        f"({pagination.total} quizzes)[/dim]"
    )


@app.command()
def take(
    quiz_id: str = typer.Argument(..., help="Quiz to attempt"),
    export: bool = typer.Option(
        False,
        "--export/--no-export",
        help="Export the reviewed attempt to DOCX",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Export file name (without extension)",
    ),
) -> None:
    """
    Take a quiz interactively.

    Example:
        studysync take quiz-123 --export -o biology_review
    """
    settings = get_settings()
    with get_client() as client:
        session = AttemptSession(
            client,
            quiz_id,
            default_time_limit=settings.default_time_limit_seconds,
        )
        while True:
            console.print("\n[cyan]Starting attempt...[/cyan]")
            session.start()
            if session.status == AttemptStatus.ERROR:
                fail(f"Could not load quiz: {session.error}")

            if not run_attempt(session):
                session.close()
                console.print("[yellow]Attempt abandoned.[/yellow]")
                return

            display_results(session)

            if Confirm.ask("Review answers?", default=True):
                review_attempt(session)

            if export:
                path = export_review_to_docx(
                    session.quiz,
                    session.result,
                    answers=session.answers,
                    output_path=output or settings.default_output_path,
                    time_spent=session.time_spent,
                )
                console.print(f"\n[green]✓[/green] Review exported to: {path}")

            if not Confirm.ask("Retake quiz?", default=False):
                break

    console.print("\n[green bold]Done![/green bold]")


def run_attempt(
    session: AttemptSession,
    ask: Callable[[str], str] = lambda label: Prompt.ask(label, default=""),
    tick_interval: Optional[float] = 1.0,
) -> bool:
    """
    Drive an in-progress attempt until it is submitted.

    While the prompt waits for input a background ticker keeps the countdown
    running, so the attempt is submitted when time runs out even if the user
    is still typing.

    Returns:
        True once the attempt is completed, False if the user quit
    """
    lock = threading.Lock()
    announced = False

    def announce_time_up() -> None:
        nonlocal announced
        if announced or not session.timed_out:
            return
        announced = True
        if session.is_submitted:
            console.print("\n[yellow]Time is up! Your answers were submitted.[/yellow]")
        elif session.error:
            console.print(
                f"\n[red]Time is up, but the automatic submission failed:[/red] "
                f"{session.error}. Enter s to try again."
            )

    def time_is_up() -> bool:
        session.poll_timer()
        announce_time_up()
        return session.is_submitted

    ticker = None
    if tick_interval:
        ticker = SessionTicker(
            session, lock=lock, interval=tick_interval, on_poll=announce_time_up
        )
        ticker.start()

    try:
        while True:
            with lock:
                if time_is_up():
                    return True
                if session.question_count:
                    display_question(session)
                else:
                    console.print("[yellow]This quiz has no questions.[/yellow]")
                console.print(HELP_LINE)

            command = ask("Your answer")

            with lock:
                # The countdown may have run out while the user was typing
                if time_is_up():
                    return True
                if not handle_command(session, command):
                    return False
                if session.is_submitted:
                    return True
    finally:
        if ticker is not None:
            ticker.stop()


def handle_command(session: AttemptSession, command: str) -> bool:
    """
    Apply one line of input to the session.

    Returns:
        False when the user asked to quit
    """
    text = command.strip()
    lowered = text.lower()
    question = session.current_question

    if lowered in ("q", "quit"):
        return not Confirm.ask("Abandon this attempt?", default=False)
    if lowered in ("n", "next"):
        session.navigate(1)
    elif lowered in ("p", "prev"):
        session.navigate(-1)
    elif lowered in ("f", "flag") and question is not None:
        session.toggle_flag(question.id)
    elif lowered.startswith("g ") and lowered[2:].strip().isdigit():
        session.go_to(int(lowered[2:].strip()) - 1)
    elif lowered in ("s", "submit"):
        unanswered = session.question_count - session.answered_count
        if unanswered and not Confirm.ask(
            f"{unanswered} question(s) unanswered. Submit anyway?", default=False
        ):
            return True
        console.print("[cyan]Submitting...[/cyan]")
        session.submit()
        if session.error:
            console.print(f"[red]Submission failed:[/red] {session.error}")
    elif question is not None and text:
        value = resolve_answer(question.choices, text) if question.is_choice else text
        if value is None:
            console.print(f"[red]'{text}' is not one of the options.[/red]")
        else:
            session.answer(question.id, value)
            if question.is_choice and session.current_index < session.question_count - 1:
                session.navigate(1)
    return True


def resolve_answer(choices: List[str], text: str) -> Optional[str]:
    """Map a letter, a 1-based number or the option text to an option."""
    if len(text) == 1 and text.upper() in OPTION_LABELS[: len(choices)]:
        return choices[OPTION_LABELS.index(text.upper())]
    if text.isdigit() and 1 <= int(text) <= len(choices):
        return choices[int(text) - 1]
    for choice in choices:
        if choice.lower() == text.lower():
            return choice
    return None


def display_question(session: AttemptSession) -> None:
    """Render the current question with timer, progress and options."""
    question = session.current_question
    remaining = session.remaining_seconds
    clock = format_clock(remaining)
    clock = f"[red]{clock}[/red]" if is_low_time(remaining) else clock

    header = (
        f"Question {session.current_index + 1}/{session.question_count}  |  "
        f"Answered {session.answered_count} ({session.progress_percent}%)  |  "
        f"Time left {clock}"
    )
    if session.is_flagged(question.id):
        header += "  |  [orange3]flagged[/orange3]"

    current = session.get_answer(question.id)
    lines = [question.question, ""]
    for index, option in enumerate(question.choices):
        marker = "[bold cyan]>[/bold cyan]" if option == current else " "
        lines.append(f"{marker} {OPTION_LABELS[index]}. {option}")
    if not question.is_choice and current:
        lines.append(f"[dim]Current answer:[/dim] {current}")

    console.print()
    console.print(Panel("\n".join(lines), title=header, border_style="cyan"))


def display_results(session: AttemptSession) -> None:
    """Display the graded outcome of a submitted attempt."""
    result = session.result
    percent = percentage(result)

    console.print("\n[bold green]Quiz Complete![/bold green]")

    table = Table(title="Results", border_style="green")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")

    grade = letter_grade(percent)
    if percent >= 70:
        grade = f"[green]{grade}[/green]"
    elif percent >= 50:
        grade = f"[yellow]{grade}[/yellow]"
    else:
        grade = f"[red]{grade}[/red]"

    table.add_row("Grade", grade)
    table.add_row("Score", f"{result.score:g}%")
    table.add_row("Passed", "[green]Yes[/green]" if result.passed else "[red]No[/red]")
    table.add_row("Correct", str(result.summary.correct))
    table.add_row("Incorrect", str(result.summary.incorrect))
    table.add_row("Total", str(result.summary.total))
    if session.time_spent is not None:
        table.add_row("Time", format_clock(session.time_spent))
    if session.timed_out:
        table.add_row("Note", "[yellow]Submitted automatically when time ran out[/yellow]")

    console.print()
    console.print(table)


def review_attempt(session: AttemptSession) -> None:
    """Walk through every question showing the backend's verdict."""
    session.begin_review()
    for _ in range(session.question_count):
        question = session.current_question
        verdict = session.result_for(question.id)
        user_answer = session.get_answer(question.id)

        lines = [question.question, ""]
        for index, option in enumerate(question.choices):
            line = f"  {OPTION_LABELS[index]}. {option}"
            if verdict and option == verdict.correct_answer:
                line = f"[green]✓ {OPTION_LABELS[index]}. {option}[/green]"
            elif option == user_answer:
                line = f"[red]✗ {OPTION_LABELS[index]}. {option}[/red]"
            lines.append(line)
        lines.append(f"\nYour answer: {user_answer or '(not answered)'}")
        if verdict and not question.is_choice and verdict.correct_answer:
            lines.append(f"Correct answer: {verdict.correct_answer}")
        explanation = (verdict.explanation if verdict else None) or question.explanation
        if explanation:
            lines.append(f"[italic]{explanation}[/italic]")

        if verdict is None:
            border = "white"
        else:
            border = "green" if verdict.is_correct else "red"
        console.print(
            Panel(
                "\n".join(lines),
                title=f"Question {session.current_index + 1}/{session.question_count}",
                border_style=border,
            )
        )
        session.navigate(1)


def format_score(score: Optional[float]) -> str:
    return f"{score:g}%" if score is not None else "-"


@app.command()
def generate(
    upload_id: str = typer.Argument(..., help="Upload to generate the quiz from"),
    title: Optional[str] = typer.Option(None, "--title", help="Quiz title"),
    questions: Optional[int] = typer.Option(
        None,
        "--questions",
        "-n",
        min=1,
        max=50,
        help="Maximum number of questions",
    ),
    difficulty: GenerationDifficulty = typer.Option(
        GenerationDifficulty.MIXED,
        "--difficulty",
        "-d",
        help="Difficulty mix",
        case_sensitive=False,
    ),
    question_types: Optional[List[QuestionType]] = typer.Option(
        None,
        "--type",
        help="Question type to include (repeatable)",
        case_sensitive=False,
    ),
    time_limit: Optional[int] = typer.Option(
        None, "--time-limit", min=1, help="Time limit in minutes"
    ),
) -> None:
    """
    Generate a quiz from an uploaded study material.

    Example:
        studysync generate upload-123 -n 10 --difficulty hard --type MULTIPLE_CHOICE
    """
    try:
        request = GenerateQuizRequest(
            upload_id=upload_id,
            title=title,
            time_limit=time_limit,
            options=GenerationOptions(
                max_questions=questions,
                difficulty=difficulty,
                question_types=question_types or None,
            ),
        )
    except ValidationError as e:
        fail(f"Invalid request: {e.errors()[0]['msg']}")

    console.print("\n[cyan]Generating quiz...[/cyan]")
    try:
        with get_client() as client:
            response = client.generate_quiz(request)
    except ApiError as e:
        if e.is_usage_limit:
            console.print(f"[yellow]Upgrade at {e.upgrade_url} for more quizzes.[/yellow]")
        fail(e.message)

    quiz = response.quiz
    generation = response.generation
    console.print(
        f"\n[green]✓[/green] Generated [bold]{quiz.title}[/bold] "
        f"({quiz.question_count} questions), id: [cyan]{quiz.id}[/cyan]"
    )

    table = Table(title="Generation", border_style="cyan")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Questions", str(generation.total_generated))
    distribution = generation.difficulty_distribution
    table.add_row(
        "Difficulty",
        f"easy {distribution.easy} / medium {distribution.medium} / hard {distribution.hard}",
    )
    table.add_row("Quality", f"{generation.average_quality_score:.2f}")
    table.add_row("Topics", ", ".join(generation.topics) or "-")
    table.add_row("Took", f"{generation.processing_time_ms / 1000:.1f}s")
    console.print(table)
    console.print(f"[dim]Start it with: studysync take {quiz.id}[/dim]")


@app.command()
def history(
    quiz_id: str = typer.Argument(..., help="Quiz whose attempts to list"),
    page: int = typer.Option(1, "--page", "-p", min=1, help="Page number"),
    limit: int = typer.Option(10, "--limit", "-l", min=1, max=100, help="Attempts per page"),
) -> None:
    """Show your past attempts at a quiz."""
    try:
        with get_client() as client:
            result = client.get_quiz_attempts(quiz_id, page=page, limit=limit)
    except ApiError as e:
        fail(e.message)

    if not result.attempts:
        console.print("[yellow]No attempts yet.[/yellow]")
        return

    table = Table(title="Attempts", border_style="cyan")
    table.add_column("Attempt", style="cyan")
    table.add_column("Started")
    table.add_column("Score", justify="right")
    table.add_column("Time", justify="right")
    table.add_column("Status")

    for attempt in result.attempts:
        table.add_row(
            attempt.id,
            attempt.started_at.strftime("%Y-%m-%d %H:%M") if attempt.started_at else "-",
            format_score(attempt.score) if attempt.completed else "-",
            format_clock(attempt.time_spent),
            "[green]completed[/green]" if attempt.completed else "[yellow]in progress[/yellow]",
        )
    console.print(table)

    summary = result.stats
    average_time = (
        format_clock(int(summary.average_time)) if summary.average_time is not None else "-"
    )
    console.print(
        f"[dim]{summary.completed_attempts}/{summary.total_attempts} completed  |  "
        f"best {format_score(summary.best_score)}  |  "
        f"average {format_score(summary.average_score)}  |  "
        f"average time {average_time}[/dim]"
    )


@app.command()
def stats(
    quiz_id: Optional[str] = typer.Argument(
        None, help="Quiz to analyse (omit for your overall statistics)"
    ),
) -> None:
    """Show statistics for one quiz, or across all your quizzes."""
    try:
        with get_client() as client:
            if quiz_id:
                quiz_stats = client.get_quiz_stats(quiz_id)
            else:
                user_stats = client.get_user_quiz_stats()
    except ApiError as e:
        fail(e.message)

    if quiz_id:
        display_quiz_stats(quiz_stats)
    else:
        display_user_stats(user_stats)


def display_quiz_stats(quiz_stats: QuizStatsResponse) -> None:
    header = quiz_stats.quiz
    overall = quiz_stats.overall_stats
    console.print(
        f"\n[bold]{header.title}[/bold]  "
        f"[dim]{header.total_questions} questions, {header.total_attempts} attempts[/dim]"
    )

    table = Table(title="Overall", border_style="cyan")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Average score", format_score(overall.average_score))
    table.add_row("Highest score", format_score(overall.highest_score))
    table.add_row("Lowest score", format_score(overall.lowest_score))
    table.add_row("Pass rate", format_score(overall.pass_rate))
    table.add_row("Average time", format_clock(int(overall.average_time)))
    console.print(table)

    if quiz_stats.hardest_questions:
        hardest = Table(title="Hardest questions", border_style="red")
        hardest.add_column("Question")
        hardest.add_column("Accuracy", justify="right")
        for item in quiz_stats.hardest_questions:
            hardest.add_row(item.question, format_score(item.accuracy))
        console.print(hardest)


def display_user_stats(user_stats: UserQuizStatsResponse) -> None:
    summary = user_stats.stats
    console.print(
        f"\n[bold]Quizzes:[/bold] {summary.total_quizzes}  "
        f"[bold]Attempts:[/bold] {summary.total_attempts}  "
        f"[bold]Average:[/bold] {format_score(summary.average_score)}  "
        f"[bold]Best:[/bold] {format_score(summary.best_score)}"
    )

    if not user_stats.recent_attempts:
        return

    table = Table(title="Recent attempts", border_style="cyan")
    table.add_column("Quiz", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Time", justify="right")
    table.add_column("Completed")
    for attempt in user_stats.recent_attempts:
        table.add_row(
            attempt.quiz_title or attempt.quiz_id,
            format_score(attempt.score),
            format_clock(attempt.time_spent),
            attempt.completed_at.strftime("%Y-%m-%d %H:%M") if attempt.completed_at else "-",
        )
    console.print(table)


@app.command()
def usage() -> None:
    """Show subscription tier and resource usage."""
    try:
        with get_client() as client:
            subscription = client.get_current_subscription()
            usage_data = client.get_usage()
    except ApiError as e:
        fail(e.message)

    status = subscription.status.value if subscription.status else "n/a"
    console.print(
        f"\n[bold]Tier:[/bold] {subscription.tier.value}  "
        f"[bold]Status:[/bold] {status}"
    )
    if subscription.is_trialing and subscription.trial_days_remaining is not None:
        console.print(f"[cyan]Trial: {subscription.trial_days_remaining} day(s) left[/cyan]")

    table = Table(title="Usage", border_style="cyan")
    table.add_column("Resource", style="cyan")
    table.add_column("Used", justify="right")
    table.add_column("Limit", justify="right")

    for resource in ResourceKind:
        entry = usage_data.entry(resource)
        limit = "Unlimited" if entry.is_unlimited else str(entry.limit)
        used = str(entry.used)
        if entry.remaining == 0:
            used = f"[red]{used}[/red]"
        table.add_row(resource.label.capitalize(), used, limit)

    console.print(table)


@app.command()
def plans() -> None:
    """Show the available subscription plans."""
    table = Table(title="Plans", border_style="cyan")
    table.add_column("Plan", style="cyan")
    table.add_column("Monthly", justify="right")
    table.add_column("Yearly", justify="right")
    table.add_column("Quizzes", justify="right")
    table.add_column("Flashcard sets", justify="right")
    table.add_column("Trial", justify="right")

    for plan in get_all_plans():
        features = plan.features
        yearly = f"${plan.yearly_price:.2f}"
        savings = annual_savings_percentage(plan.tier)
        if savings:
            yearly += f" (save {savings}%)"
        table.add_row(
            plan.name,
            f"${plan.monthly_price:.2f}",
            yearly,
            str(features.max_quizzes) if features.max_quizzes is not None else "Unlimited",
            (
                str(features.max_flashcard_sets)
                if features.max_flashcard_sets is not None
                else "Unlimited"
            ),
            f"{plan.trial_days} days" if plan.trial_days else "-",
        )

    console.print(table)


@app.command()
def checkout(
    price_id: str = typer.Argument(..., help="Price ID of the plan to buy"),
    period: BillingPeriod = typer.Option(
        BillingPeriod.MONTHLY,
        "--period",
        help="Billing period",
        case_sensitive=False,
    ),
) -> None:
    """Create a checkout session and print its URL."""
    try:
        with get_client() as client:
            session = client.create_checkout_session(price_id, period)
    except ApiError as e:
        fail(e.message)

    console.print(f"\n[green]✓[/green] Complete your purchase at: {session.url}")


@app.command()
def portal(
    return_url: Optional[str] = typer.Option(
        None, "--return-url", help="Where the portal sends you back to"
    ),
) -> None:
    """Open the billing portal to manage your subscription."""
    try:
        with get_client() as client:
            session = client.create_portal_session(return_url)
    except ApiError as e:
        fail(e.message)

    console.print(f"\n[green]✓[/green] Manage your subscription at: {session.url}")


@app.command()
def cancel(
    now: bool = typer.Option(
        False, "--now", help="Cancel immediately instead of at the end of the period"
    ),
    reason: Optional[str] = typer.Option(None, "--reason", help="Why you are leaving"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation"),
) -> None:
    """Cancel your subscription."""
    when = "immediately" if now else "at the end of the billing period"
    if not yes and not Confirm.ask(f"Cancel your subscription {when}?", default=False):
        console.print("[yellow]Nothing changed.[/yellow]")
        return

    try:
        with get_client() as client:
            message = client.cancel_subscription(immediately=now, reason=reason)
    except ApiError as e:
        fail(e.message)

    console.print(f"\n[green]✓[/green] {message or 'Subscription canceled.'}")


@app.command()
def reactivate() -> None:
    """Undo a pending cancellation."""
    try:
        with get_client() as client:
            message = client.reactivate_subscription()
    except ApiError as e:
        fail(e.message)

    console.print(f"\n[green]✓[/green] {message or 'Subscription reactivated.'}")


@app.command()
def invoices(
    limit: Optional[int] = typer.Option(None, "--limit", "-l", min=1, help="Number of invoices"),
) -> None:
    """List your invoices."""
    try:
        with get_client() as client:
            items = client.get_invoices(limit=limit)
    except ApiError as e:
        fail(e.message)

    if not items:
        console.print("[yellow]No invoices.[/yellow]")
        return

    table = Table(title="Invoices", border_style="cyan")
    table.add_column("Date")
    table.add_column("Amount", justify="right")
    table.add_column("Status")
    table.add_column("Link", style="dim")
    for invoice in items:
        table.add_row(
            invoice.created_at.strftime("%Y-%m-%d") if invoice.created_at else "-",
            f"{invoice.amount_paid / 100:.2f} {invoice.currency.upper()}",
            invoice.status,
            invoice.pdf_url or invoice.invoice_url or "-",
        )
    console.print(table)


@app.command()
def upload(
    files: List[Path] = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Study materials to upload",
    ),
) -> None:
    """Upload study materials."""
    try:
        with get_client() as client:
            result = client.upload_batch(files)
    except ApiError as e:
        if e.is_usage_limit:
            console.print(f"[yellow]Upgrade at {e.upgrade_url} for more uploads.[/yellow]")
        fail(e.message)

    for item in result.uploads:
        console.print(f"[green]✓[/green] {item.original_name} ({item.processing_status.value})")
    for error in result.errors:
        console.print(f"[red]✗[/red] {error.file_name or 'file'}: {error.error}")


@app.command()
def feedback(
    content: str = typer.Argument(..., help="Your feedback"),
    feedback_type: FeedbackType = typer.Option(
        FeedbackType.GENERAL,
        "--type",
        help="Feedback type",
        case_sensitive=False,
    ),
    category: FeedbackCategory = typer.Option(
        FeedbackCategory.OTHER,
        "--category",
        "-c",
        help="Product area",
        case_sensitive=False,
    ),
    title: Optional[str] = typer.Option(None, "--title", help="Short summary"),
    rating: Optional[int] = typer.Option(None, "--rating", "-r", help="Rating from 1 to 5"),
) -> None:
    """Send beta feedback."""
    try:
        submission = FeedbackSubmission(
            type=feedback_type,
            category=category,
            title=title,
            content=content,
            rating=rating,
        )
    except ValidationError as e:
        fail(f"Invalid feedback: {e.errors()[0]['msg']}")

    try:
        with get_client() as client:
            record = client.submit_feedback(submission)
    except ApiError as e:
        fail(e.message)

    console.print(f"\n[green]✓[/green] Thanks! Feedback {record.id} recorded.")


@app.command()
def info() -> None:
    """Display information about the StudySync client."""
    settings = get_settings()
    info_text = f"""
[bold cyan]StudySync CLI[/bold cyan]
Version: {__version__}

[bold]API:[/bold] {settings.api_base_url}
[bold]Authenticated:[/bold] {"yes" if settings.access_token else "no"}

[bold]Commands:[/bold]
  • quizzes    - List your quizzes
  • generate   - Generate a quiz from an upload
  • take       - Take a timed quiz, review and export it
  • history    - Show your attempts at a quiz
  • stats      - Quiz and personal statistics
  • usage      - Show tier limits and usage
  • plans      - Compare subscription plans
  • checkout   - Start a subscription checkout
  • portal     - Manage billing
  • cancel     - Cancel your subscription
  • reactivate - Undo a pending cancellation
  • invoices   - List invoices
  • upload     - Upload study materials
  • feedback   - Send beta feedback
    """
    console.print(Panel(info_text, title="StudySync Info", border_style="cyan"))


@app.callback()
def callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """
    StudySync - Study materials, quizzes and flashcards from the terminal.
    """
    configure_logging("DEBUG" if verbose else get_settings().log_level)


if __name__ == "__main__":
    app()
