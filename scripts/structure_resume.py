#!/usr/bin/env python3
"""
Resume Structuring CLI

Sends free-text career details to the structuring model, preprocesses the
result, and writes the annotated JSON.

Usage:
    python structure_resume.py notes.txt "Data Engineer"
    python structure_resume.py notes.txt "Data Engineer" --name "Ada Lovelace" -o ada.json
    python structure_resume.py notes.txt "Data Engineer" --provider openai --model gpt-4o-mini
"""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from pagefit.contexts.intake import (
    InvalidModelResponseError,
    ModelQuotaExhaustedError,
    ModelSelector,
    ModelSpec,
    structure_resume,
)
from pagefit.contexts.intake.logger import setup_intake_logger
from pagefit.contexts.preprocessing.preprocessor import preprocess_resume
from pagefit.utils.llm import get_provider

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

# Single-model catalog used when --model pins a model outside the default catalog
PINNED_MODEL_LIMITS = {"rpm": 60, "tpm": 1_000_000, "rpd": 10_000, "priority": 1}

app = typer.Typer(
    help="Structure free-text career details into a print-ready resume",
    add_completion=False,
)


@app.command()
def main(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="Text file with free-text career details",
            exists=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ],
    target_role: Annotated[str, typer.Argument(help="Role the resume is tailored to")],
    full_name: Annotated[
        Optional[str], typer.Option("--name", help="Candidate's full name")
    ] = None,
    output_file: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Output JSON (defaults to <input>_resume.json)",
            dir_okay=False,
            resolve_path=True,
        ),
    ] = None,
    provider_name: Annotated[
        Optional[str],
        typer.Option("--provider", "-p", help="gemini, openai or anthropic (default: LLM_PROVIDER)"),
    ] = None,
    model: Annotated[
        Optional[str],
        typer.Option("--model", "-m", help="Pin a single model instead of the Gemini catalog"),
    ] = None,
):
    """
    Structure, preprocess and save a resume.

    Examples:\n

        $ structure_resume.py notes.txt "Backend Engineer"

        $ structure_resume.py notes.txt "Backend Engineer" -p anthropic -m claude-sonnet-4-20250514
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = setup_intake_logger(LOGS_PATH / f"structure_{timestamp}")
    typer.echo(f"Log file: {log_file}")

    selector = (
        ModelSelector([ModelSpec(name=model, **PINNED_MODEL_LIMITS)])
        if model
        else ModelSelector.from_env()
    )

    try:
        provider = get_provider(provider_name=provider_name, model=model)
        record = structure_resume(
            input_file.read_text(encoding="utf-8"),
            target_role,
            full_name=full_name,
            provider=provider,
            selector=selector,
        )
    except (ModelQuotaExhaustedError, InvalidModelResponseError, ValueError, ImportError) as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    processed = preprocess_resume(record)

    if output_file is None:
        output_file = input_file.with_name(f"{input_file.stem}_resume.json")
    output_file.write_text(
        json.dumps(processed.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8"
    )

    typer.secho(f"✓ {record.name} → {output_file}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
