"""Conversion orchestration.

This module drives one invocation through its stages:

    ParsingArgs -> ValidatingCredentials -> ReadingInput -> FetchingDocs
    -> Generating -> AwaitingConfirmation -> WritingOutput -> Done

Any stage may end in `Failed` (the error propagates to the caller); a
declined confirmation ends in `Declined` without writing anything.

Collaborators (documentation source, generator factory, confirmation,
progress) are injected, so the CLI owns printing and prompts while tests run
the same flow against stubs.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterator, Sequence

from core.config import AppSettings, require_api_key
from core.domain.models import (
    ConversionRequest,
    ConversionResult,
    DocumentBundle,
    GeneratedFile,
    SourceFile,
)
from core.domain.registry import (
    Format,
    Provider,
    default_model,
    documents_for,
    parse_format,
    parse_provider,
    provider_for_model,
)
from core.errors import FileAccessError, ValidationError, XContextError
from core.interfaces.documents import DocumentSource
from core.interfaces.generator import StructuredGenerator
from core.interfaces.progress import ProgressReporter, SilentProgress
from core.services.model_invoker import invoke_model
from core.services.prompt_builder import build_prompt

logger = logging.getLogger(__name__)

GeneratorFactory = Callable[[Provider, AppSettings], StructuredGenerator]
ConfirmCallback = Callable[[Sequence[GeneratedFile]], bool]


class Stage(str, Enum):
    PARSING_ARGS = "parsing-args"
    VALIDATING_CREDENTIALS = "validating-credentials"
    READING_INPUT = "reading-input"
    FETCHING_DOCS = "fetching-docs"
    GENERATING = "generating"
    AWAITING_CONFIRMATION = "awaiting-confirmation"
    WRITING_OUTPUT = "writing-output"
    DONE = "done"
    DECLINED = "declined"
    FAILED = "failed"


class Outcome(str, Enum):
    WRITTEN = "written"
    DECLINED = "declined"


@dataclass
class ConversionOptions:
    """Raw, unvalidated options as received from the command line."""

    from_format: str | None
    to_format: str | None
    files: Sequence[Path]
    provider: str | None = None
    model: str | None = None
    out_dir: Path = Path(".")
    assume_yes: bool = False


@dataclass(frozen=True)
class ResolvedOptions:
    source_format: Format
    target_format: Format
    provider: Provider
    model: str
    files: tuple[Path, ...]
    out_dir: Path
    assume_yes: bool = False


@dataclass
class ConversionReport:
    outcome: Outcome
    options: ResolvedOptions
    result: ConversionResult
    written: list[Path] = field(default_factory=list)


def validate_options(options: ConversionOptions) -> ResolvedOptions:
    """Check every flag against the registries and resolve defaults.

    All violations are collected and raised together as one `ValidationError`.
    """

    errors: list[str] = []
    source: Format | None = None
    target: Format | None = None
    provider: Provider | None = None
    model_provider: Provider | None = None

    if not options.from_format:
        errors.append("--from is required")
    else:
        try:
            source = parse_format(options.from_format, flag="--from")
        except ValidationError as exc:
            errors.extend(exc.messages)

    if not options.to_format:
        errors.append("--to is required")
    else:
        try:
            target = parse_format(options.to_format, flag="--to")
        except ValidationError as exc:
            errors.extend(exc.messages)

    if options.provider:
        try:
            provider = parse_provider(options.provider)
        except ValidationError as exc:
            errors.extend(exc.messages)

    if options.model:
        try:
            model_provider = provider_for_model(options.model)
        except ValidationError as exc:
            errors.extend(exc.messages)

    if not options.provider and not options.model:
        errors.append("--provider is required unless --model is given")

    if source is not None and source == target:
        errors.append(f"--from and --to must be different formats (both are {source.value})")

    if provider is not None and model_provider is not None and provider != model_provider:
        errors.append(
            f"Model {options.model!r} belongs to provider {model_provider.value!r}, "
            f"not {provider.value!r}"
        )

    if not options.files:
        errors.append("At least one FILE is required")

    resolved_provider = provider or model_provider
    if errors or source is None or target is None or resolved_provider is None:
        raise ValidationError(errors)

    return ResolvedOptions(
        source_format=source,
        target_format=target,
        provider=resolved_provider,
        model=options.model or default_model(resolved_provider),
        files=tuple(options.files),
        out_dir=options.out_dir,
        assume_yes=options.assume_yes,
    )


def read_sources(paths: Sequence[Path]) -> list[SourceFile]:
    """Read every input as UTF-8. One unreadable path aborts the whole run."""

    sources: list[SourceFile] = []
    for path in paths:
        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise FileAccessError(path, f"not valid UTF-8 ({exc.reason})") from exc
        except OSError as exc:
            raise FileAccessError(path, exc.strerror or str(exc)) from exc
        sources.append(SourceFile(path=path, content=content))
    return sources


def resolve_output_path(file: GeneratedFile, *, root: Path) -> Path:
    base = root.resolve()
    target = (base / file.path).resolve()
    if not target.is_relative_to(base):
        raise FileAccessError(file.path, f"resolves outside the output directory {base}")
    return target


def write_outputs(files: Sequence[GeneratedFile], *, root: Path) -> list[Path]:
    """Write each file under `root`, creating parent directories.

    Not transactional: a failure leaves earlier files on disk.
    """

    targets = [(file, resolve_output_path(file, root=root)) for file in files]
    written: list[Path] = []
    for file, target in targets:
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(file.content.encode("utf-8"))
        except OSError as exc:
            raise FileAccessError(target, exc.strerror or str(exc)) from exc
        logger.debug("Wrote %s", target)
        written.append(target)
    return written


async def fetch_format_documents(
    source: DocumentSource,
    *,
    source_format: Format,
    target_format: Format,
) -> DocumentBundle:
    """Run the source and target fan-outs concurrently."""

    source_docs, target_docs = await asyncio.gather(
        source.fetch(documents_for(source_format)),
        source.fetch(documents_for(target_format)),
    )
    return DocumentBundle(source=source_docs, target=target_docs)


class ConversionPipeline:
    """Runs one conversion from raw options to written files."""

    def __init__(
        self,
        *,
        settings: AppSettings,
        documents: DocumentSource,
        generator_factory: GeneratorFactory,
        confirm: ConfirmCallback,
        progress: ProgressReporter | None = None,
    ) -> None:
        self._settings = settings
        self._documents = documents
        self._generator_factory = generator_factory
        self._confirm = confirm
        self._progress = progress or SilentProgress()
        self.stage = Stage.PARSING_ARGS
        self.failure: XContextError | None = None

    @contextmanager
    def _step(self, stage: Stage, start: str, done: str) -> Iterator[None]:
        self.stage = stage
        self._progress.start(start)
        try:
            yield
        except Exception:
            self._progress.fail(start.rstrip(".") + " failed")
            raise
        self._progress.succeed(done)

    async def _fetch_and_generate(
        self,
        options: ResolvedOptions,
        sources: list[SourceFile],
        generator: StructuredGenerator,
    ) -> ConversionResult:
        with self._step(Stage.FETCHING_DOCS, "Fetching format documentation...", "Documentation fetched"):
            documents = await fetch_format_documents(
                self._documents,
                source_format=options.source_format,
                target_format=options.target_format,
            )

        request = ConversionRequest(
            source_format=options.source_format,
            target_format=options.target_format,
            provider=options.provider,
            model=options.model,
            sources=sources,
            documents=documents,
        )
        with self._step(Stage.GENERATING, "Generating converted context files...", "Context files generated"):
            return await invoke_model(
                generator,
                provider=options.provider,
                model=options.model,
                prompt=build_prompt(request),
            )

    def run(self, options: ConversionOptions) -> ConversionReport:
        try:
            return self._run(options)
        except XContextError as exc:
            logger.debug("Conversion failed during %s: %s", self.stage.value, exc)
            self.failure = exc
            self.stage = Stage.FAILED
            raise

    def _run(self, options: ConversionOptions) -> ConversionReport:
        self.stage = Stage.PARSING_ARGS
        resolved = validate_options(options)

        self.stage = Stage.VALIDATING_CREDENTIALS
        require_api_key(resolved.provider, self._settings)
        generator = self._generator_factory(resolved.provider, self._settings)

        with self._step(Stage.READING_INPUT, "Reading source context files...", "Source context files read"):
            sources = read_sources(resolved.files)

        result = asyncio.run(self._fetch_and_generate(resolved, sources, generator))

        self.stage = Stage.AWAITING_CONFIRMATION
        if not resolved.assume_yes and not self._confirm(result.files):
            self.stage = Stage.DECLINED
            return ConversionReport(outcome=Outcome.DECLINED, options=resolved, result=result)

        with self._step(Stage.WRITING_OUTPUT, "Writing converted files...", "Files written"):
            written = write_outputs(result.files, root=resolved.out_dir)

        self.stage = Stage.DONE
        return ConversionReport(outcome=Outcome.WRITTEN, options=resolved, result=result, written=written)
