#!/usr/bin/env python3
"""
Resume Preprocessing CLI

Runs a structured resume (JSON or YAML) through the layout engine.

Commands:
    run    - Preprocess a resume and write the annotated JSON
    report - Show content metrics and the layout chosen for each template

Usage:
    python preprocess_resume.py run resume.json
    python preprocess_resume.py run resume.yaml -o processed.json --template creative
    python preprocess_resume.py report resume.json
"""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import typer
from dotenv import load_dotenv
from omegaconf import OmegaConf
from typing_extensions import Annotated

from pagefit.contexts.layout import TemplateKind, analyze_content, optimize_layout
from pagefit.contexts.preprocessing.exceptions import InvalidResumeInputError
from pagefit.contexts.preprocessing.logger import setup_preprocessing_logger
from pagefit.contexts.preprocessing.preprocessor import preprocess_resume

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(
    add_completion=False,
    help="Fit structured resumes to a single A4 page",
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def load_resume_file(path: Path) -> Any:
    """Load a resume mapping from .json, .yaml or .yml."""
    if path.suffix.lower() in (".yaml", ".yml"):
        return OmegaConf.to_container(OmegaConf.load(path), resolve=True)
    return json.loads(path.read_text(encoding="utf-8"))


def validate_template_kind(template_kind: str) -> str:
    if template_kind not in TemplateKind.get_all():
        raise typer.BadParameter(
            f"Invalid template: {template_kind}. "
            f"Valid templates are: {', '.join(sorted(TemplateKind.get_all()))}"
        )
    return template_kind


@app.command("run")
def run_command(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="Structured resume (.json or .yaml)",
            exists=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ],
    output_file: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Output JSON (defaults to <input>_processed.json)",
            dir_okay=False,
            resolve_path=True,
        ),
    ] = None,
    template_kind: Annotated[
        str,
        typer.Option(
            "--template",
            "-t",
            help="Template the attached layout config is computed for",
            callback=validate_template_kind,
        ),
    ] = TemplateKind.MODERN,
    log: Annotated[
        bool,
        typer.Option("--log/--no-log", help="Write a session log under LOGS_PATH"),
    ] = False,
):
    """
    Preprocess a resume and write it with _layout, _layoutConfig and
    _contentMetrics attached.

    Examples:\n

        $ preprocess_resume.py run resume.json

        $ preprocess_resume.py run resume.yaml -o out.json -t minimal --log
    """
    if log:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = setup_preprocessing_logger(LOGS_PATH / f"preprocess_{timestamp}")
        typer.echo(f"Log file: {log_file}")

    try:
        processed = preprocess_resume(load_resume_file(input_file), template_kind)
    except (InvalidResumeInputError, json.JSONDecodeError) as e:
        typer.secho(f"✗ {input_file.name}: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if output_file is None:
        output_file = input_file.with_name(f"{input_file.stem}_processed.json")

    output_file.write_text(
        json.dumps(processed.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8"
    )

    layout = processed.layout
    typer.secho(f"✓ {input_file.name} → {output_file.name}", fg=typer.colors.GREEN)
    typer.echo(
        f"  compact={layout.compact_mode}  name={layout.name_font_size}px  "
        f"achievements={len(processed.achievements)}"
    )


@app.command("report")
def report_command(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="Structured resume (.json or .yaml)",
            exists=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ],
):
    """
    Show content metrics and the layout each template would use.

    Examples:\n

        $ preprocess_resume.py report resume.json
    """
    try:
        resume = load_resume_file(input_file)
        metrics = analyze_content(resume)
    except (InvalidResumeInputError, json.JSONDecodeError) as e:
        typer.secho(f"✗ {input_file.name}: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho(f"\n{input_file.name}", fg=typer.colors.BLUE, bold=True)
    typer.echo(
        f"Estimated height: {metrics.estimated_height}px "
        f"({metrics.page_fill_ratio:.0%} of page) → {metrics.content_density}"
    )
    typer.echo(
        f"Sections: {metrics.section_count}  Experience: {metrics.experience_count}  "
        f"Bullets: {metrics.total_bullet_points}  Skills: {metrics.skills_count}"
    )
    typer.echo("=" * 80)

    for template_kind in sorted(TemplateKind.get_all()):
        config = optimize_layout(resume, template_kind)
        typer.echo(
            f"{template_kind:<9} name={config.name_font_size}px body={config.body_font_size}px "
            f"line={config.line_height} scale={config.scale_factor} "
            f"compact={config.compact_mode} exp≤{config.max_experience_items} "
            f"bullets≤{config.max_bullets_per_exp}"
        )


if __name__ == "__main__":
    app()
