import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer
from rich import print
from rich.logging import RichHandler
from rich.markup import escape

from .artifacts import save_json_error, save_run
from .config import ConfigError, Settings, load_settings
from .llm import AnthropicInvoker, InvalidModelJSON, ReasoningInvoker
from .models import CONTRACTS
from .prompts import schema_text
from .service import (
    Envelope,
    analyze_proctoring_logs,
    evaluate_answer,
    generate_company_motto,
    parse_mcq_questions,
)

app = typer.Typer()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (default: ASSESSCOPILOT_LOG_LEVEL or WARNING).",
    ),
):
    """Assesscopilot CLI entrypoint."""
    settings = _load_settings()
    level = (log_level or settings.log_level).upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
    ctx.obj = settings
    if ctx.invoked_subcommand is None:
        print(ctx.get_help())
        raise typer.Exit(code=0)


class ArtifactInvoker:
    """Saves rejected model output under the runs directory before re-raising."""

    def __init__(self, inner: ReasoningInvoker, runs_dir: str):
        self.inner = inner
        self.runs_dir = runs_dir

    async def invoke(self, prompt, contract, *, system=None):
        try:
            return await self.inner.invoke(prompt, contract, system=system)
        except InvalidModelJSON as exc:
            error_path = save_json_error(exc.raw_text, exc.error, exc.kind, runs_dir=self.runs_dir)
            print(f"[yellow]Model output rejected ({exc.kind}).[/yellow] Saved error artifact to [bold]{error_path}[/bold].")
            raise


def _load_settings() -> Settings:
    try:
        return load_settings()
    except ConfigError as exc:
        print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2)


def _build_invoker(settings: Settings) -> ReasoningInvoker:
    if not settings.api_key:
        print("[red]ANTHROPIC_API_KEY not found in environment.[/red]")
        raise typer.Exit(code=1)
    return AnthropicInvoker(settings)


def _read_file(file: Path) -> str:
    if not file.exists():
        print("[red]File not found[/red]")
        raise typer.Exit(code=1)
    return file.read_text(encoding="utf-8")


def _read_json(file: Path) -> Any:
    content = _read_file(file)
    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        print(f"[red]File is not valid JSON:[/red] {exc}")
        raise typer.Exit(code=1)


def _run_operation(ctx: typer.Context, name: str, operation, payload: Any) -> Envelope:
    settings: Settings = ctx.obj
    invoker = ArtifactInvoker(_build_invoker(settings), runs_dir=settings.runs_dir)
    envelope = asyncio.run(operation(payload, invoker=invoker, settings=settings))
    paths = save_run(name, payload, envelope.to_dict(), runs_dir=settings.runs_dir)
    if not envelope.ok:
        print(f"[red]{envelope.error}[/red]")
        raise typer.Exit(code=1)
    print(f"Saved result to [bold]{paths['result_path']}[/bold]")
    return envelope


@app.command("analyze-logs")
def analyze_logs(ctx: typer.Context, file: Path):
    """Flag suspicious activity in a JSON array of proctoring log entries."""
    entries = _read_json(file)
    report = _run_operation(ctx, "analyze_proctoring_logs", analyze_proctoring_logs, entries).data

    print("[bold]Summary[/bold]")
    print(escape(report.summary))
    print("\n[bold]Suspicious Activities[/bold]")
    if not report.suspicious_activities:
        print("none")
    for i, finding in enumerate(report.suspicious_activities, 1):
        print(escape(f"{i}. {finding.candidate_id} / {finding.test_id}: {finding.reason}"))
        print(escape(f"   timestamps: {', '.join(finding.timestamps)}"))


@app.command()
def evaluate(ctx: typer.Context, file: Path):
    """Suggest feedback and a score for a candidate answer described in a JSON file."""
    request = _read_json(file)
    result = _run_operation(ctx, "evaluate_answer", evaluate_answer, request).data

    print(f"[bold]Suggested Score[/bold]: {result.suggested_score:g} / {request['marks']:g}")
    print("\n[bold]Feedback[/bold]")
    print(escape(result.feedback))


@app.command("parse-questions")
def parse_questions(ctx: typer.Context, file: Path):
    """Extract multiple-choice questions from a raw text file."""
    text = _read_file(file)
    batch = _run_operation(ctx, "parse_mcq_questions", parse_mcq_questions, text).data

    print(f"[bold]Parsed {len(batch.questions)} question(s)[/bold]")
    for i, question in enumerate(batch.questions, 1):
        print(escape(f"\n{i}. {question.question_text} ({question.marks:g} marks)"))
        for option in question.options:
            marker = "[green]*[/green]" if option == question.answer else " "
            print(f"   {marker} {escape(option)}")


@app.command()
def motto(ctx: typer.Context, company_name: str):
    """Generate a short motto for a company."""
    text = _run_operation(ctx, "generate_company_motto", generate_company_motto, company_name).data
    print(f"[bold]{escape(text)}[/bold]")


@app.command()
def contracts(operation: Optional[str] = typer.Argument(None)):
    """Print the registered input and output JSON schemas."""
    if operation is not None and operation not in CONTRACTS:
        print(f"[red]Unknown operation. Use one of: {', '.join(CONTRACTS)}.[/red]")
        raise typer.Exit(code=2)
    names = [operation] if operation else list(CONTRACTS)
    for name in names:
        contract = CONTRACTS[name]
        print(f"[bold]{name}[/bold]")
        typer.echo(f"input: {schema_text(contract.input_model)}")
        typer.echo(f"output: {schema_text(contract.output_model)}")


if __name__ == "__main__":
    app()
