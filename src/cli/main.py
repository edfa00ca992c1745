"""x-context command-line interface (Typer).

Converts AI coding assistant context files between formats:

    x-context --from claude-code --to cursor --provider openai CLAUDE.md

The command only parses flags, wires collaborators and renders output; the
conversion flow itself lives in `core.services.conversion_pipeline`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import typer
from rich.console import Console

from adapters.docs_fetcher import HttpDocumentationSource
from adapters.llm_providers import build_generator
from cli.doctor import run_diagnostics
from cli.ui_components import (
    RichProgress,
    build_models_table,
    configure_logging,
    print_error,
    print_planned_files,
    print_summary,
)
from core.config import AppSettings
from core.domain.models import GeneratedFile
from core.domain.registry import SUPPORTED_FORMATS, SUPPORTED_PROVIDERS
from core.errors import ValidationError, XContextError
from core.services.conversion_pipeline import ConversionOptions, ConversionPipeline, Outcome

__version__ = "0.1.0"

app = typer.Typer(
    name="x-context",
    help="Convert AI coding tool context files between different formats.",
    add_completion=False,
)

_console = Console()
_err_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"x-context {__version__}")
        raise typer.Exit()


def _list_models_callback(value: bool) -> None:
    if value:
        _console.print(build_models_table())
        raise typer.Exit()


def _doctor_callback(value: bool) -> None:
    if value:
        ok = run_diagnostics(console=_console, settings=AppSettings())
        raise typer.Exit(code=0 if ok else 1)


def _confirm_write(files: Sequence[GeneratedFile]) -> bool:
    print_planned_files(_console, files)
    try:
        answer = typer.prompt("\nProceed with writing these files? (y/N)", default="", show_default=False)
    except typer.Abort:
        return False
    return answer.strip().lower() in ("y", "yes")


@app.command()
def convert(
    files: list[Path] = typer.Argument(
        None,
        help="Context file(s) to convert.",
        show_default=False,
    ),
    from_format: str | None = typer.Option(
        None,
        "--from",
        help=f"Source format ({', '.join(SUPPORTED_FORMATS)}).",
        show_default=False,
    ),
    to_format: str | None = typer.Option(
        None,
        "--to",
        help=f"Target format ({', '.join(SUPPORTED_FORMATS)}).",
        show_default=False,
    ),
    provider: str | None = typer.Option(
        None,
        "--provider",
        "-p",
        help=f"AI provider ({', '.join(SUPPORTED_PROVIDERS)}). Inferred from --model when omitted.",
        show_default=False,
    ),
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="AI model. Defaults per provider; see --list-models.",
        show_default=False,
    ),
    out_dir: Path = typer.Option(
        Path("."),
        "--out-dir",
        help="Directory the converted files are written under.",
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Write files without asking for confirmation."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
    list_models: bool = typer.Option(
        False,
        "--list-models",
        callback=_list_models_callback,
        is_eager=True,
        help="List supported providers and models and exit.",
    ),
    doctor: bool = typer.Option(
        False,
        "--doctor",
        callback=_doctor_callback,
        is_eager=True,
        help="Check credentials and documentation reachability and exit.",
    ),
) -> None:
    """Convert context files from one AI coding tool's format to another's."""

    configure_logging(verbose=verbose, console=_err_console)

    settings = AppSettings()
    pipeline = ConversionPipeline(
        settings=settings,
        documents=HttpDocumentationSource(settings),
        generator_factory=build_generator,
        confirm=_confirm_write,
        progress=RichProgress(_console),
    )
    options = ConversionOptions(
        from_format=from_format,
        to_format=to_format,
        files=files or [],
        provider=provider,
        model=model,
        out_dir=out_dir,
        assume_yes=yes,
    )

    try:
        report = pipeline.run(options)
    except ValidationError as exc:
        print_error(_err_console, "Invalid options", exc.messages)
        raise typer.Exit(code=exc.exit_code) from exc
    except XContextError as exc:
        print_error(_err_console, f"Conversion failed: {exc}", [])
        raise typer.Exit(code=exc.exit_code) from exc

    if report.outcome is Outcome.DECLINED:
        _console.print("Operation cancelled.")
        return

    print_summary(_console, report)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
