import json
import logging
from pathlib import Path
from typing import List

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from tqdm import tqdm

from .core import config
from .core.engine import evaluate
from .core.errors import CallQAError, ValidationError
from .core.events import CollectingSink
from .core.profiles import PROFILES, get_profile
from .core.provider import from_deepgram
from .core.registry import registry_for

app = typer.Typer(help="Call Quality Scorer CLI")
console = Console()


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.LOG_LEVEL,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_profile(locale: str):
    try:
        return get_profile(locale)
    except ValidationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(2)


def _load_payload(path: Path, deepgram: bool):
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValidationError(f"not valid JSON: {e}") from e
    return from_deepgram(data) if deepgram else data


def _score_table(name: str, card) -> Table:
    table = Table(title=f"{name}: {card.percentage:.1f}%")
    table.add_column("Parameter", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("Score", justify="right")
    for p in card.parameters:
        got = card.scores[p.key]
        style = "green" if got == p.weight else ("red" if got == 0 else "yellow")
        table.add_row(p.display_name, p.kind.value, f"[{style}]{got}[/{style}]/{p.weight}")
    return table


def _events_table(sink: CollectingSink) -> Table:
    table = Table(title="Scoring events")
    table.add_column("Parameter", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Matched")
    table.add_column("Details")
    for ev in sink.events:
        details = ", ".join(f"{k}={v}" for k, v in ev.details.items())
        table.add_row(ev.parameter, str(ev.score), ", ".join(ev.matched_terms), details)
    return table


@app.command()
def score(files: List[Path] = typer.Argument(..., help="Provider payload JSON files"),
          locale: str = typer.Option(config.DEFAULT_LOCALE, "--locale", "-l", help="Locale profile code"),
          as_json: bool = typer.Option(False, "--json", help="Print JSON results instead of tables"),
          explain: bool = typer.Option(False, "--explain", help="Show the scoring events per call"),
          deepgram: bool = typer.Option(False, "--deepgram", help="Files are raw Deepgram responses"),
          verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    """Score transcribed calls against the call-quality rubric."""
    _setup_logging(verbose)
    profile = _load_profile(locale)
    registry = registry_for(profile)

    failed = 0
    results = []
    for f in tqdm(files, desc="Scoring calls", disable=len(files) < 2 or as_json):
        sink = CollectingSink()
        try:
            card = evaluate(_load_payload(f, deepgram), profile, registry, sink)
        except (CallQAError, OSError) as e:
            failed += 1
            console.print(f"[red]✗[/red] {f.name}: {e}")
            continue

        if as_json:
            results.append({"file": f.name, **card.to_dict()})
            continue
        console.print(_score_table(f.name, card))
        console.print(f"[bold]Feedback:[/bold] {card.overall_feedback}")
        console.print(f"[bold]Observation:[/bold] {card.observation}\n")
        if explain:
            console.print(_events_table(sink))

    if as_json:
        typer.echo(json.dumps(results, indent=2, ensure_ascii=False))
    if failed:
        console.print(f"[red]{failed} of {len(files)} call(s) failed[/red]")
        raise typer.Exit(1)


@app.command()
def parameters(locale: str = typer.Option(config.DEFAULT_LOCALE, "--locale", "-l")):
    """Show the scoring rubric for a locale."""
    registry = registry_for(_load_profile(locale))
    table = Table(title="Parameters")
    table.add_column("Key", style="cyan")
    table.add_column("Name")
    table.add_column("Weight", justify="right")
    table.add_column("Type", style="magenta")
    table.add_column("Description")
    for p in registry:
        table.add_row(p.key, p.display_name, str(p.weight), p.kind.value, p.description)
    console.print(table)


@app.command()
def profiles():
    """List the built-in locale profiles."""
    table = Table(title="Locale profiles")
    table.add_column("Code", style="cyan")
    table.add_column("Name")
    table.add_column("Greeting")
    table.add_column("Urgency")
    table.add_column("Feedback")
    for code, p in sorted(PROFILES.items()):
        greeting = "time+lexicon" if p.greeting_requires_lexicon else "time only"
        urgency = f"+{p.urgency_increment}/hit" + (", compound" if p.urgency_compound else "")
        if p.urgency_penalty:
            urgency += f", -{p.urgency_penalty}"
        table.add_row(code, p.name, greeting, urgency, p.feedback_strategy)
    console.print(table)


if __name__ == "__main__":
    app()
