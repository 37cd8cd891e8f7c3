"""DOCX document generator for reviewed quiz attempts."""

from datetime import datetime
from pathlib import Path

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches, Pt, RGBColor

from studysync.models.quiz import AnswerResult, Question, Quiz, SubmissionResult
from studysync.session.results import format_clock, letter_grade, percentage

CORRECT_COLOR = RGBColor(0, 128, 0)
INCORRECT_COLOR = RGBColor(192, 0, 0)
HEADING_COLOR = RGBColor(0, 51, 102)
MUTED_COLOR = RGBColor(128, 128, 128)


def ensure_output_directory(output_dir: str = "output") -> Path:
    """
    Ensure the output directory exists.

    Args:
        output_dir: Directory path to create

    Returns:
        Path object for the output directory
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    return output_path


def generate_timestamped_filename(base_name: str, extension: str = "docx") -> str:
    """
    Generate a filename with timestamp.

    Args:
        base_name: Base name for the file
        extension: File extension (without dot)

    Returns:
        Filename with timestamp
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    # Only the final path component is kept
    base_name = Path(base_name).stem
    return f"{base_name}_{timestamp}.{extension}"


def export_review_to_docx(
    quiz: Quiz,
    result: SubmissionResult,
    answers: dict[str, str] | None = None,
    output_path: str = "quiz_review",
    time_spent: int | None = None,
    use_output_dir: bool = True,
    output_dir: str = "output",
) -> str:
    """
    Export a graded attempt to a formatted DOCX file.

    Args:
        quiz: Quiz that was attempted
        result: Graded result returned by the backend
        answers: The user's captured answers by question id, used when the
            result does not echo them back
        output_path: Path for the DOCX file (can be relative or absolute)
        time_spent: Elapsed seconds of the attempt
        use_output_dir: If True, saves to output directory with timestamp (default: True)
        output_dir: Directory to save files in (default: "output")

    Returns:
        Path to the created DOCX file
    """
    if use_output_dir:
        output_dir_path = ensure_output_directory(output_dir)
        output_path = str(output_dir_path / generate_timestamped_filename(output_path))

    answers = answers or {}

    doc = Document()
    setup_document_styles(doc)

    title = doc.add_heading(quiz.title, level=0)
    title.alignment = WD_ALIGN_PARAGRAPH.CENTER

    if quiz.description:
        desc_para = doc.add_paragraph(quiz.description)
        desc_para.alignment = WD_ALIGN_PARAGRAPH.CENTER
        desc_para.runs[0].italic = True

    add_score_summary(doc, result, time_spent)
    doc.add_page_break()

    for number, question in enumerate(quiz.questions, 1):
        verdict = result.result_for(question.id)
        add_question_review(doc, number, question, verdict, answers.get(question.id))

    doc.save(output_path)

    return output_path


def setup_document_styles(doc: Document) -> None:
    """
    Set up document-wide styles.

    Args:
        doc: Document to configure
    """
    style = doc.styles["Normal"]
    font = style.font
    font.name = "Calibri"
    font.size = Pt(11)

    for section in doc.sections:
        section.top_margin = Inches(1)
        section.bottom_margin = Inches(1)
        section.left_margin = Inches(1)
        section.right_margin = Inches(1)


def add_score_summary(
    doc: Document, result: SubmissionResult, time_spent: int | None = None
) -> None:
    """Add the score, grade, pass/fail line and correct/incorrect table."""
    percent = percentage(result)

    score_para = doc.add_paragraph()
    score_para.alignment = WD_ALIGN_PARAGRAPH.CENTER
    grade_run = score_para.add_run(f"{letter_grade(percent)}  ")
    grade_run.bold = True
    grade_run.font.size = Pt(28)
    score_para.add_run(f"Score: {result.score:g}%").bold = True

    status_para = doc.add_paragraph()
    status_para.alignment = WD_ALIGN_PARAGRAPH.CENTER
    status_run = status_para.add_run("Passed" if result.passed else "Not passed")
    status_run.bold = True
    status_run.font.color.rgb = CORRECT_COLOR if result.passed else INCORRECT_COLOR
    if result.passing_score is not None:
        status_para.add_run(f"  |  Passing score: {result.passing_score}%")
    if time_spent is not None:
        status_para.add_run(f"  |  Time: {format_clock(time_spent)}")

    table = doc.add_table(rows=2, cols=3)
    table.style = "Light Grid Accent 1"
    for cell, text in zip(table.rows[0].cells, ("Correct", "Incorrect", "Total")):
        cell.text = text
        for paragraph in cell.paragraphs:
            for run in paragraph.runs:
                run.bold = True
    summary = result.summary
    for cell, value in zip(
        table.rows[1].cells, (summary.correct, summary.incorrect, summary.total)
    ):
        cell.text = str(value)

    date_para = doc.add_paragraph(f"Exported: {datetime.now().strftime('%Y-%m-%d %H:%M')}")
    date_para.alignment = WD_ALIGN_PARAGRAPH.CENTER
    date_para.runs[0].font.size = Pt(9)
    date_para.runs[0].font.color.rgb = MUTED_COLOR


def add_question_review(
    doc: Document,
    number: int,
    question: Question,
    verdict: AnswerResult | None,
    captured_answer: str | None = None,
) -> None:
    """
    Add one question with the user's answer and the backend's verdict.

    Args:
        doc: Document to add to
        number: 1-based question number
        question: The question
        verdict: Backend result for the question, None if it was not graded
        captured_answer: Answer captured locally during the attempt
    """
    q_para = doc.add_paragraph()
    q_run = q_para.add_run(f"Q{number}. ")
    q_run.bold = True
    q_run.font.size = Pt(12)
    q_para.add_run(question.question)

    user_answer = verdict.user_answer if verdict and verdict.user_answer is not None else captured_answer
    correct_answer = verdict.correct_answer if verdict else None

    labels = "ABCDEFGH"
    for index, option in enumerate(question.choices):
        label = labels[index] if index < len(labels) else str(index + 1)
        opt_para = doc.add_paragraph(f"   {label}. {option}")
        opt_para.paragraph_format.left_indent = Inches(0.5)
        if correct_answer is not None and option == correct_answer:
            opt_para.runs[0].bold = True
            opt_para.runs[0].font.color.rgb = CORRECT_COLOR
            opt_para.add_run(" ✓").font.color.rgb = CORRECT_COLOR
        elif user_answer is not None and option == user_answer:
            opt_para.runs[0].font.color.rgb = INCORRECT_COLOR
            opt_para.add_run(" ✗").font.color.rgb = INCORRECT_COLOR

    answer_para = doc.add_paragraph()
    answer_para.paragraph_format.left_indent = Inches(0.5)
    answer_para.add_run("Your answer: ").bold = True
    answer_para.add_run(user_answer if user_answer else "(not answered)")

    if verdict is not None:
        verdict_run = answer_para.add_run(
            "  Correct" if verdict.is_correct else "  Incorrect"
        )
        verdict_run.bold = True
        verdict_run.font.color.rgb = CORRECT_COLOR if verdict.is_correct else INCORRECT_COLOR
        answer_para.add_run(f"  ({verdict.points:g}/{question.points} pts)")

        if not verdict.is_correct and correct_answer:
            correct_para = doc.add_paragraph()
            correct_para.paragraph_format.left_indent = Inches(0.5)
            correct_para.add_run("Correct answer: ").bold = True
            correct_para.add_run(correct_answer)

    explanation = (verdict.explanation if verdict else None) or question.explanation
    if explanation:
        exp_para = doc.add_paragraph()
        exp_para.paragraph_format.left_indent = Inches(0.5)
        exp_run = exp_para.add_run(f"Explanation: {explanation}")
        exp_run.italic = True
        exp_run.font.size = Pt(10)
        exp_run.font.color.rgb = RGBColor(64, 64, 64)

    # Spacing between questions
    doc.add_paragraph()
