# ABOUTME: Provides the Typer CLI for scoring sandbox submissions and deriving ratings.
# ABOUTME: Wraps baseline estimation, single evaluations, and batch reports with Rich output.

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import pandas as pd
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .baseline import estimate_baseline_ms
from .config import DEFAULT_CONFIG, EngineConfig, load_engine_config
from .evaluate import evaluate_submission
from .rating import rating_label
from .report import score_submissions, summarize_ratings
from .serialization import load_interactions, load_user_state, outcome_to_dict

console = Console()
app = typer.Typer(help="Score sandbox interactions and derive spaced-repetition ratings.")

RATING_COLORS = {1: "red", 2: "orange3", 3: "green", 4: "cyan"}


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log evaluation steps at DEBUG level."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config(config: Optional[Path]) -> EngineConfig:
    if config is None:
        return DEFAULT_CONFIG
    try:
        return load_engine_config(config)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc


@app.command()
def baseline(
    interaction: Path = typer.Option(..., "--interaction", exists=True, dir_okay=False, help="Interaction JSON/YAML file."),
    config: Optional[Path] = typer.Option(None, "--config", exists=True, dir_okay=False, help="Engine config YAML."),
) -> None:
    """
    Print the expected completion time for each interaction in the file.
    """
    cfg = _load_config(config)
    try:
        interactions = load_interactions(interaction)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--interaction") from exc

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Interaction")
    table.add_column("Type")
    table.add_column("Baseline (s)", justify="right")
    for item in interactions:
        baseline_ms = estimate_baseline_ms(item, cfg.baseline)
        table.add_row(item.interaction_id, item.interaction_type.value, f"{baseline_ms / 1000:.1f}")
    console.print(table)


@app.command()
def evaluate(
    interaction: Path = typer.Option(..., "--interaction", exists=True, dir_okay=False, help="Interaction JSON/YAML file."),
    state: Path = typer.Option(..., "--state", exists=True, dir_okay=False, help="User canvas state JSON/YAML file."),
    attempts: int = typer.Option(1, "--attempts", help="Submission attempt number."),
    hints: int = typer.Option(0, "--hints", help="Hints used before submitting."),
    time_ms: float = typer.Option(..., "--time-ms", help="Elapsed time to complete in milliseconds."),
    config: Optional[Path] = typer.Option(None, "--config", exists=True, dir_okay=False, help="Engine config YAML."),
    as_json: bool = typer.Option(False, "--json", help="Emit the rating-ready result as JSON."),
) -> None:
    """
    Evaluate one submission and derive its rating.
    """
    cfg = _load_config(config)
    try:
        interactions = load_interactions(interaction)
        user_state = load_user_state(state)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    if len(interactions) != 1:
        raise typer.BadParameter(
            f"Expected exactly one interaction in {interaction}, found {len(interactions)}.",
            param_hint="--interaction",
        )

    try:
        outcome = evaluate_submission(interactions[0], user_state, attempts, hints, time_ms, config=cfg)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(outcome_to_dict(outcome), indent=2))
        return

    result = outcome.result
    color = RATING_COLORS.get(int(outcome.rating), "white")
    console.rule(f"[bold blue]Sandbox Evaluation: {result.interaction_id}[/bold blue]")
    summary = Table(show_header=True, header_style="bold magenta")
    summary.add_column("Score")
    summary.add_column("Passed")
    summary.add_column("Baseline (s)")
    summary.add_column("Rating")
    summary.add_row(
        f"{result.score:.2f}",
        "yes" if result.passed else "no",
        f"{outcome.baseline_ms / 1000:.1f}",
        f"[{color}]{int(outcome.rating)} ({rating_label(outcome.rating)})[/{color}]",
    )
    console.print(summary)
    console.print(f"[bold]Feedback:[/] {result.feedback}")

    if result.element_results:
        elements = Table(show_header=True, header_style="bold magenta")
        elements.add_column("Element")
        elements.add_column("Correct")
        elements.add_column("Expected")
        elements.add_column("Actual")
        for element in result.element_results:
            elements.add_row(
                element.element_id,
                "[green]✓[/green]" if element.correct else "[red]✗[/red]",
                element.expected_zone or "-",
                element.actual_zone or "-",
            )
        console.print(elements)


def _read_submissions(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".jsonl":
        return pd.read_json(path, lines=True, convert_dates=False, dtype=False)
    if suffix == ".json":
        return pd.read_json(path, convert_dates=False, dtype=False)
    raise typer.BadParameter(f"Unsupported submissions file '{path.suffix}'. Expected .jsonl or .json.", param_hint="--submissions")


def _write_frame(frame: pd.DataFrame, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() == ".csv":
        frame.to_csv(path, index=False)
    else:
        frame.to_parquet(path, index=False)


@app.command()
def batch(
    interactions: Path = typer.Option(..., "--interactions", exists=True, dir_okay=False, help="Interaction JSON/YAML file (list)."),
    submissions: Path = typer.Option(..., "--submissions", exists=True, dir_okay=False, help="Submissions as JSON lines."),
    output: Path = typer.Option(Path("reports/sandbox_ratings.parquet"), "--output", help="Report output (.parquet or .csv)."),
    summary: bool = typer.Option(False, "--summary", help="Print per-concept rating summary."),
    config: Optional[Path] = typer.Option(None, "--config", exists=True, dir_okay=False, help="Engine config YAML."),
) -> None:
    """
    Score a batch of submissions and write the rating report.
    """
    cfg = _load_config(config)
    submissions_df = _read_submissions(submissions)
    try:
        report_df = score_submissions(load_interactions(interactions), submissions_df, config=cfg)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    _write_frame(report_df, output)
    console.print(f"[bold]Scored {len(report_df):,} submissions; report saved to {output}[/bold]")

    if summary:
        summary_df = summarize_ratings(report_df)
        table = Table(show_header=True, header_style="bold magenta")
        for column in summary_df.columns:
            table.add_column(str(column))
        for _, row in summary_df.iterrows():
            table.add_row(
                str(row["concept_id"]),
                str(int(row["submissions"])),
                f"{row['pass_rate']:.0%}",
                f"{row['mean_score']:.2f}",
                *[str(int(row[col])) for col in summary_df.columns[4:]],
            )
        console.print(table)


if __name__ == "__main__":
    app()
