"""
Typer CLI for the lexiquiz core.

Commands:
    lexiquiz validate QUIZ.json                 - Check a quiz definition
    lexiquiz grade QUIZ.json ANSWERS.json       - Grade a set of answers
    lexiquiz lexile INITIAL REVIEWS.json        - Recompute a reading level
    lexiquiz match INTERESTS.json BOOK.json     - Score a book for a student
    lexiquiz db init                            - Create database tables

QUIZ.json is either a quiz object ({"questions": [...], "book_id": ...}) or a
bare list of questions.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import typer
from loguru import logger
from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from config import get_settings
from lexiquiz.calibration import compute_current_lexile_measure, get_lexile_range
from lexiquiz.errors import LexiquizError
from lexiquiz.grading import grade_quiz, score_answers
from lexiquiz.models import Book, BookReview, Quiz, genre_interests_adapter, utcnow
from lexiquiz.questions import validate_answer, validate_question_definition
from lexiquiz.recommendation import compute_match_score

app = typer.Typer(
    help="lexiquiz: reading-comprehension quizzes, grading and reading levels",
    no_args_is_help=True,
)
db_app = typer.Typer(help="Database commands", no_args_is_help=True)
app.add_typer(db_app, name="db")

console = Console()


def configure_logging(level: str, log_file: str | None = None) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if log_file:
        logger.add(log_file, level=level, rotation="10 MB", retention=5)


def _load_json(path: Path) -> Any:
    if not path.exists():
        console.print(f"[red]Error: File not found: {path}[/red]")
        raise typer.Exit(1)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: {path} is not valid JSON: {escape(str(e))}[/red]")
        raise typer.Exit(1)


def _load_questions(path: Path) -> list:
    data = _load_json(path)
    if isinstance(data, dict):
        data = data.get("questions")
    if not isinstance(data, list):
        console.print(f"[red]Error: {path} has no list of questions[/red]")
        raise typer.Exit(1)
    return data


def _prompt_of(question: Any) -> str:
    return str(question.get("prompt", "")) if isinstance(question, dict) else ""


def _type_of(question: Any) -> str:
    return str(question.get("type", "?")) if isinstance(question, dict) else "?"


@app.command("validate")
def validate_quiz(
    quiz_file: Path = typer.Argument(..., help="Quiz definition JSON"),
):
    """Validate every question in a quiz definition."""
    questions = _load_questions(quiz_file)
    settings = get_settings()

    table = Table(title="Quiz Questions", box=box.SIMPLE)
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Type")
    table.add_column("Prompt")
    table.add_column("Status")

    failures = 0
    for i, question in enumerate(questions, 1):
        error = validate_question_definition(question)
        if error:
            failures += 1
        status = f"[red]{escape(error)}[/red]" if error else "[green]ok[/green]"
        table.add_row(str(i), escape(_type_of(question)), escape(_prompt_of(question)), status)
    console.print(table)

    count = len(questions)
    if not settings.min_questions_in_quiz <= count <= settings.max_questions_in_quiz:
        console.print(
            f"[red]A quiz must have between {settings.min_questions_in_quiz} and "
            f"{settings.max_questions_in_quiz} questions, got {count}[/red]"
        )
        raise typer.Exit(1)

    if failures:
        console.print(f"[red]{failures} invalid question(s)[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Quiz is valid ({count} questions)[/green]")


@app.command("grade")
def grade(
    quiz_file: Path = typer.Argument(..., help="Quiz definition JSON"),
    answers_file: Path = typer.Argument(..., help="JSON list of answers, one per question"),
    passing: int = typer.Option(None, "--passing", "-p", help="Passing grade (defaults to settings)"),
):
    """Grade answers against a quiz and report the score."""
    questions = _load_questions(quiz_file)
    answers = _load_json(answers_file)
    passing = get_settings().passing_quiz_grade if passing is None else passing

    if not isinstance(answers, list):
        console.print("[red]Error: answers must be a JSON list[/red]")
        raise typer.Exit(1)

    for question in questions:
        error = validate_question_definition(question)
        if error:
            console.print(f"[red]Question '{escape(_prompt_of(question))}' is invalid: {escape(error)}[/red]")
            raise typer.Exit(1)

    if len(questions) != len(answers):
        console.print(
            f"[red]There are {len(questions)} quiz questions, yet {len(answers)} answers were submitted[/red]"
        )
        raise typer.Exit(1)

    for question, answer in zip(questions, answers):
        error = validate_answer(question["type"], answer)
        if error:
            console.print(f"[red]Answer to '{escape(_prompt_of(question))}' is invalid: {escape(error)}[/red]")
            raise typer.Exit(1)

    try:
        results = score_answers(questions, answers)
        score = grade_quiz(Quiz(id=quiz_file.stem, questions=questions, date_created=utcnow()), answers)
    except LexiquizError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        raise typer.Exit(1)

    table = Table(box=box.SIMPLE)
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Prompt")
    table.add_column("Result")
    for i, (question, result) in enumerate(zip(questions, results), 1):
        table.add_row(str(i), escape(_prompt_of(question)), "[green]correct[/green]" if result else "[red]incorrect[/red]")
    console.print(table)

    verdict = "[green]PASSED[/green]" if score >= passing else "[red]FAILED[/red]"
    console.print(f"Score: [bold]{score}[/bold] {verdict}")


@app.command("lexile")
def lexile(
    initial: float = typer.Argument(..., help="Student's initial Lexile measure"),
    reviews_file: Path = typer.Argument(..., help="JSON list of book reviews"),
):
    """Recompute a reading level from comprehension-rated book reviews."""
    raw = _load_json(reviews_file)
    try:
        reviews = [BookReview.model_validate(r) for r in raw]
    except (ValidationError, TypeError) as e:
        console.print(f"[red]Error: invalid reviews: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    measure = compute_current_lexile_measure(initial, reviews)
    band = get_lexile_range(measure)
    console.print(f"Lexile measure: [bold]{measure:.0f}[/bold]")
    console.print(f"Readable range: {band.min:.0f} - {band.max:.0f}")


@app.command("match")
def match(
    interests_file: Path = typer.Argument(..., help="JSON object of genre id -> interest (1-4)"),
    book_file: Path = typer.Argument(..., help="Book JSON"),
):
    """Score how well a book suits a student's genre interests."""
    try:
        interests = genre_interests_adapter.validate_python(_load_json(interests_file))
    except ValidationError as e:
        console.print(f"[red]Error: invalid interests: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    try:
        book = Book.model_validate(_load_json(book_file))
        score = compute_match_score(interests, book)
    except ValidationError as e:
        console.print(f"[red]Error: invalid book: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    except LexiquizError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        raise typer.Exit(1)
    console.print(f"Match score for {escape(book.title or book.id)}: [bold]{score:.3f}[/bold]")


@db_app.command("init")
def db_init(
    database_url: str = typer.Option(None, "--database-url", help="Override the configured database URL"),
):
    """Create the quiz tables."""
    from lexiquiz.db import init_db, make_engine

    engine = make_engine(database_url)
    init_db(engine)
    console.print(f"[green]Initialized tables at {engine.url.render_as_string(hide_password=True)}[/green]")


def main() -> None:
    """CLI entry point."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_file)
    app()


if __name__ == "__main__":
    main()
