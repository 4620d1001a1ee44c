"""CLI for the Assessment Scoring Engine.

Provides command-line access to instrument scoring, the BBD flat scorer,
work-values alignment and the knowledge-passion matrix.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import BaseModel
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .bbd import calculate_bbd_score
from .config import find_config_file, get_config, load_config, reset_config
from .engine import ScoringEngine, load_responses_file, validate_instrument
from .instruments import list_builtin_instruments
from .quadrant import QUADRANT_INFO, SkillMatrix, classify_quadrant
from .schema import AssessmentResult, Quadrant, Skill
from .values_workflow import JsonFileStorage, get_value_label, score_workflow

console = Console()


@click.group()
@click.version_option(version="1.0.0", prog_name="assessment-scorer")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to a scorer-config.yaml (default: auto-detect)"
)
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(config: Optional[Path], debug: bool):
    """Assessment Scoring Engine.

    Scores career diagnostic instruments (BBD, CLIQI, Work Values) and
    classifies skills on the knowledge-passion matrix.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config_path = config or find_config_file()
    if config_path:
        try:
            load_config(config_path)
        except Exception as e:
            console.print(f"[yellow]Warning:[/yellow] Could not load config: {e}")
            reset_config()
    else:
        reset_config()


@main.command("score")
@click.option(
    "--instrument", "-i",
    required=True,
    help="Instrument file (YAML/JSON) or built-in id/code"
)
@click.option(
    "--responses", "-r",
    required=True,
    type=click.Path(exists=True),
    help="Path to responses JSON file"
)
@click.option("--user", "-u", default="anonymous", help="Participant id")
@click.option(
    "--out", "-o",
    type=click.Path(),
    help="Output file for JSON results"
)
@click.option(
    "--json-output", "-j",
    is_flag=True,
    help="Output raw JSON instead of formatted text"
)
def score_cmd(instrument: str, responses: str, user: str, out: Optional[str], json_output: bool):
    """Score responses against an instrument.

    Examples:
        assessment-scorer score -i cliqi-assessment -r answers.json
        assessment-scorer score -i my-instrument.yaml -r answers.json -j
    """
    try:
        engine = ScoringEngine()
        engine.load_instrument(instrument)
        result = engine.score(responses, user_id=user)

        if json_output:
            output_json(result, out)
        else:
            display_result(result, engine.instrument.name)
            if out:
                output_json(result, out)
                console.print(f"\n[green]Results saved to {out}[/green]")

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("bbd")
@click.option(
    "--responses", "-r",
    required=True,
    type=click.Path(exists=True),
    help="Path to BBD responses JSON file"
)
@click.option("--json-output", "-j", is_flag=True, help="Output raw JSON")
def bbd_cmd(responses: str, json_output: bool):
    """Quick BBD severity from prefix-grouped raw answer sums."""
    try:
        result = calculate_bbd_score(load_responses_file(responses).values())
        if json_output:
            output_json(result, None)
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("Group")
        table.add_column("Score", justify="right")
        table.add_row("Boredom", f"{result.bored:g}")
        table.add_row("Burnout", f"{result.burned_out:g}")
        table.add_row("Dissatisfaction", f"{result.dissatisfied:g}")
        console.print(table)
        console.print(f"\nTotal: [bold]{result.total:g}[/bold]  Severity: [bold]{result.level}[/bold]")

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("values")
@click.option(
    "--state", "-s",
    required=True,
    type=click.Path(exists=True, path_type=Path),
    help="Saved work-values workflow state (JSON)"
)
@click.option("--json-output", "-j", is_flag=True, help="Output raw JSON")
def values_cmd(state: Path, json_output: bool):
    """Score a saved work-values workflow."""
    try:
        saved = JsonFileStorage(state).load()
        result = score_workflow(saved)
        if json_output:
            output_json(result, None)
            return

        console.print(Panel(
            f"Alignment Score: [bold cyan]{result.alignment_score}%[/bold cyan]\n"
            f"Level: [bold]{result.level}[/bold]",
            title="Work Values Alignment",
        ))
        console.print("\n[bold]Best aligned:[/bold]")
        for item in result.top_aligned:
            console.print(f"  [green]•[/green] {get_value_label(item.value)} ({item.score:g}%)")
        console.print("\n[bold]Least aligned:[/bold]")
        for item in result.low_aligned:
            console.print(f"  [yellow]•[/yellow] {get_value_label(item.value)} ({item.score:g}%)")

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("quadrant")
@click.option("--knowledge", "-k", required=True, type=float, help="Knowledge rating (0-10)")
@click.option("--passion", "-p", required=True, type=float, help="Passion rating (0-10)")
def quadrant_cmd(knowledge: float, passion: float):
    """Classify a single knowledge/passion rating."""
    quadrant = classify_quadrant(knowledge, passion)
    info = QUADRANT_INFO[quadrant]
    console.print(f"Quadrant: [bold]{quadrant.label}[/bold]")
    console.print(f"[bold cyan]{info.name}[/bold cyan] ({info.description})")
    console.print(info.recommendation)


@main.command("matrix")
@click.option(
    "--skills", "-f",
    required=True,
    type=click.Path(exists=True),
    help="JSON list of skills with name, knowledge and passion"
)
def matrix_cmd(skills: str):
    """Group a list of rated skills by quadrant."""
    try:
        with open(skills, "r", encoding="utf-8") as f:
            data = json.load(f)
        entries = [
            Skill(id=item.get("id", f"skill-{i}"), **{k: v for k, v in item.items() if k != "id"})
            for i, item in enumerate(data, 1)
        ]
        matrix = SkillMatrix(entries)

        if not matrix.can_proceed_to_rating():
            console.print(
                f"[yellow]Only {len(entries)} skills; at least "
                f"{get_config().quadrant.min_skills} are expected.[/yellow]"
            )

        for quadrant, members in matrix.groups().items():
            info = QUADRANT_INFO[quadrant]
            table = Table(title=f"{info.name} ({len(members)})", show_header=True, header_style="bold")
            table.add_column("Skill")
            table.add_column("Knowledge", justify="right")
            table.add_column("Passion", justify="right")
            for skill in members:
                table.add_row(skill.name, f"{skill.knowledge:g}", f"{skill.passion:g}")
            console.print(table)
            if members and quadrant is not Quadrant.GROWTH:
                console.print(f"[dim]{info.recommendation}[/dim]\n")

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("validate")
@click.option(
    "--instrument", "-i",
    required=True,
    help="Instrument file (YAML/JSON) or built-in id/code"
)
def validate_cmd(instrument: str):
    """Check an instrument's threshold coverage and dimension mappings.

    Examples:
        assessment-scorer validate -i bbd-assessment
        assessment-scorer validate -i my-instrument.yaml
    """
    try:
        engine = ScoringEngine()
        loaded = engine.load_instrument(instrument)
    except Exception as e:
        console.print(f"[red]✗ Instrument invalid: {instrument}[/red]")
        console.print(f"  - {e}")
        sys.exit(1)

    is_valid, issues = validate_instrument(loaded)
    if is_valid:
        console.print(f"[green]✓ Instrument valid: {loaded.code}[/green]")
    else:
        console.print(f"[red]✗ Instrument has issues: {loaded.code}[/red]")
        for issue in issues:
            console.print(f"  - {issue}")

    sys.exit(0 if is_valid else 1)


@main.command("instruments")
def instruments_cmd():
    """List built-in instruments."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Code")
    table.add_column("Name")
    table.add_column("Questions", justify="right")
    table.add_column("Minutes", justify="right")

    for instrument in list_builtin_instruments():
        table.add_row(
            instrument.id,
            instrument.code,
            instrument.name,
            str(len(instrument.questions)),
            str(instrument.estimated_time),
        )

    console.print(table)


def display_result(result: AssessmentResult, instrument_name: str):
    """Display an assessment result in formatted text."""
    level_color = "red" if result.overall_level == "Unknown" else "cyan"
    console.print(Panel(
        f"[bold]{instrument_name}[/bold]\n\n"
        f"Overall Level: [bold {level_color}]{result.overall_level}[/bold {level_color}]\n"
        f"Total: {result.total_score} / {result.total_max_score}",
        title="Assessment Result",
    ))

    table = Table(show_header=True, header_style="bold")
    table.add_column("Dimension", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Max", justify="right")
    table.add_column("%", justify="right")
    table.add_column("Level")

    for score in result.dimension_scores:
        table.add_row(
            score.dimension,
            f"{score.score:g}",
            f"{score.max_score:g}",
            str(score.percentage),
            score.level,
        )
    console.print(table)

    if result.recommendations:
        console.print("\n[bold]Recommendations:[/bold]")
        for rec in result.recommendations:
            console.print(f"  [green]•[/green] {rec}")


def output_json(result: BaseModel, out_path: Optional[str]):
    """Output result as JSON."""
    json_str = result.model_dump_json(indent=2)

    if out_path:
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(json_str)
    else:
        print(json_str)


@main.command("init-config")
@click.option(
    "--out", "-o",
    type=click.Path(),
    default="scorer-config.yaml",
    help="Output path for the configuration file"
)
@click.option(
    "--force", "-f",
    is_flag=True,
    help="Overwrite existing config file"
)
def init_config_cmd(out: str, force: bool):
    """Generate a default scorer configuration file.

    Example:
        assessment-scorer init-config --out my-config.yaml
    """
    from .config import save_default_config

    out_path = Path(out)
    if out_path.exists() and not force:
        console.print(f"[red]Error:[/red] Config file already exists: {out}")
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        save_default_config(out_path)
        console.print(f"[green]✓[/green] Config file created: {out}")
        console.print("\nThis file configures:")
        console.print("  • scales - Likert bounds and default denominators")
        console.print("  • dimension_levels - Fixed per-dimension level cut points")
        console.print("  • bbd - BBD prefixes and raw-total cut points")
        console.print("  • values_workflow - Work-values selection caps and defaults")
        console.print("  • quadrant - Knowledge-passion midpoint and skill limits")
        console.print("\nThe scorer will look for config in this order:")
        console.print("  1. ASSESSMENT_SCORER_CONFIG environment variable")
        console.print("  2. ./scorer-config.yaml (current directory)")
        console.print("  3. ~/.config/assessment-scorer/config.yaml")
    except Exception as e:
        console.print(f"[red]Error creating config:[/red] {e}")
        sys.exit(1)


@main.command("show-config")
def show_config_cmd():
    """Print the active configuration."""
    console.print_json(json.dumps(get_config().model_dump()))


if __name__ == "__main__":
    main()
