"""Typer CLI: serve the quiz API and play a quiz in the terminal."""

import sys
import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from studyquiz.client import QuizApiClient, start_quiz
from studyquiz.core.schemas import Question
from studyquiz.core.session import (
    Feedback,
    Phase,
    QuizSession,
    QuizSummary,
    current_question,
    dismiss_feedback,
    feedback_delay,
    new_session,
    progress_percent,
    restart,
    submit_answer,
    summarize,
)

app = typer.Typer(
    name="studyquiz",
    help="Turn study notes into an AI-generated quiz",
    add_completion=False,
)

console = Console()

CONTENT_TERMINATOR = "."


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the quiz generation API."""
    import uvicorn

    uvicorn.run("studyquiz.app:app", host=host, port=port, reload=reload)


@app.command()
def play(
    file: Optional[Path] = typer.Argument(
        None,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Text file with the study material (read from stdin when omitted)",
    ),
    api_url: Optional[str] = typer.Option(
        None,
        "--api-url",
        help="Quiz API base URL (defaults to $QUIZ_API_URL)",
    ),
) -> None:
    """
    Generate a quiz from study material and take it.

    Example:
        studyquiz play notes.txt --api-url http://127.0.0.1:8000
    """
    client = QuizApiClient(api_url)
    if file is not None:
        content = file.read_text(encoding="utf-8")
    else:
        content = read_content()

    session = new_session()
    while True:
        with console.status("[cyan]Generating quiz... please wait."):
            session = start_quiz(session, content, client)

        if session.phase is not Phase.ANSWERING:
            console.print(f"[red]Error:[/red] {escape(session.message or '')}", style="bold")
            raise typer.Exit(code=1)

        session = run_questions(session)
        display_summary(summarize(session))

        if not typer.confirm("Restart quiz?", default=False):
            break
        session = restart(session)
        content = read_content()


def read_content() -> str:
    """Read pasted notes up to a line holding only "." or end of input."""
    console.print(
        "Paste your study material, notes, or any text here. "
        "Finish with a line containing only [bold].[/bold] (or Ctrl-D)."
    )
    lines = []
    while True:
        line = sys.stdin.readline()
        if not line or line.rstrip("\r\n") == CONTENT_TERMINATOR:
            break
        lines.append(line)
    return "".join(lines)


def run_questions(session: QuizSession) -> QuizSession:
    """Ask every question; feedback blocks input for its whole delay."""
    while session.phase is Phase.ANSWERING:
        question = current_question(session)
        display_question(session, question)
        session = submit_answer(session, ask_response(question))
        display_feedback(session.feedback)
        time.sleep(feedback_delay(session))
        session = dismiss_feedback(session)
    return session


def display_question(session: QuizSession, question: Question) -> None:
    number = session.current_index + 1
    console.print()
    console.print(
        f"[cyan]Question {number} of {session.total}[/cyan] "
        f"[dim]({progress_percent(session):.0f}%)[/dim]"
    )
    console.print(Panel(Text(question.question), border_style="cyan"))
    if question.type == "mcq":
        for i, option in enumerate(question.options, start=1):
            console.print(f"  [bold]{i}.[/bold] {escape(option)}")


def ask_response(question: Question) -> str:
    """Return the answer text; for mcq that is the chosen option's text."""
    if question.type != "mcq":
        return typer.prompt("Your answer")
    options = question.options
    while True:
        choice = typer.prompt(f"Your choice (1-{len(options)})", type=int)
        if 1 <= choice <= len(options):
            return options[choice - 1]
        console.print(f"[yellow]Pick a number between 1 and {len(options)}.[/yellow]")


def display_feedback(feedback: Feedback) -> None:
    if feedback.is_correct:
        console.print("[green bold]Correct![/green bold]")
    else:
        console.print("[red bold]Incorrect.[/red bold]")
        if feedback.explanation:
            console.print(Text(feedback.explanation, style="red"))


def display_summary(summary: QuizSummary) -> None:
    console.print("\n[bold green]Quiz Completed![/bold green]")
    console.print(f"Your Score: [bold]{summary.score} / {summary.total}[/bold] ({summary.percent}%)")
    console.print(Panel(summary.rank, title="Rank", border_style="blue", expand=False))

    table = Table(title="Review", border_style="cyan")
    table.add_column("#", style="cyan")
    table.add_column("Question", style="white")
    table.add_column("Result")
    table.add_column("Explanation", style="dim")

    for i, record in enumerate(summary.history, start=1):
        result = (
            Text("Correct", style="green")
            if record.is_correct
            else Text(f"Wrong ({record.user_response})", style="red")
        )
        table.add_row(str(i), Text(record.question_text), result, Text(record.explanation))

    console.print()
    console.print(table)


@app.callback()
def callback() -> None:
    """
    Study Quiz - generate a quiz from your notes and test yourself.
    """
    pass


def main() -> None:
    app()


if __name__ == "__main__":
    main()
