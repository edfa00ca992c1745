"""UI components for the CLI (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- The progress reporter is handed to the pipeline explicitly, so nothing
  else owns a global spinner.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.status import Status
from rich.table import Table

from core.domain.models import GeneratedFile
from core.domain.registry import DEFAULT_MODELS, FORMAT_NAMES, PROVIDER_NAMES, SUPPORTED_MODELS
from core.services.conversion_pipeline import ConversionReport


class RichProgress:
    """`ProgressReporter` backed by a Rich status spinner."""

    def __init__(self, console: Console) -> None:
        self._console = console
        self._status: Status | None = None

    def _stop(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None

    def start(self, message: str) -> None:
        self._stop()
        self._status = self._console.status(escape(message))
        self._status.start()

    def succeed(self, message: str) -> None:
        self._stop()
        self._console.print(f"[green]✔[/green] {escape(message)}", soft_wrap=True)

    def fail(self, message: str) -> None:
        self._stop()
        self._console.print(f"[red]✖[/red] {escape(message)}", soft_wrap=True)


def configure_logging(*, verbose: bool, console: Console) -> None:
    """Route `logging` through Rich on stderr. WARNING by default, DEBUG with --verbose."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, rich_tracebacks=True)],
        force=True,
    )
    # SDK and transport chatter stays out of --verbose output.
    for noisy in ("httpx", "httpcore", "openai", "anthropic"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def build_models_table() -> Table:
    table = Table(title="Supported models")
    table.add_column("Provider", style="cyan", no_wrap=True)
    table.add_column("Model", style="white")
    table.add_column("Default", style="green")
    for provider, models in SUPPORTED_MODELS.items():
        for model in models:
            is_default = "yes" if DEFAULT_MODELS[provider] == model else ""
            table.add_row(f"{PROVIDER_NAMES[provider]} ({provider.value})", model, is_default)
    return table


def print_planned_files(console: Console, files: Sequence[GeneratedFile]) -> None:
    console.print("\n📁 Files to be written:")
    for file in files:
        console.print(f"- {escape(file.path)}", soft_wrap=True, highlight=False)


def _display_path(path: Path) -> str:
    try:
        return path.relative_to(Path.cwd().resolve()).as_posix()
    except ValueError:
        return str(path)


def print_summary(console: Console, report: ConversionReport) -> None:
    options = report.options
    usage = report.result.usage

    console.print("\n📝 Written files:")
    for path in report.written:
        console.print(f"- {escape(_display_path(path))}", soft_wrap=True, highlight=False)
    console.print(
        f"\n💡 Converted {FORMAT_NAMES[options.source_format]} context files "
        f"to {FORMAT_NAMES[options.target_format]} format!",
        soft_wrap=True,
    )
    console.print(f"🤖 Model: {PROVIDER_NAMES[options.provider]} ({escape(options.model)})", soft_wrap=True)
    console.print(
        f"💬 Tokens: {usage.input_tokens} input, {usage.output_tokens} output, "
        f"{usage.total_tokens} total",
        soft_wrap=True,
    )


def print_error(console: Console, title: str, messages: Sequence[str]) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(title)}", soft_wrap=True)
    for message in messages:
        console.print(f"  - {escape(message)}", soft_wrap=True, highlight=False)
