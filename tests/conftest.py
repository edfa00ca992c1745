"""Shared pytest configuration, markers and stub collaborators."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pytest

from core.config import AppSettings
from core.domain.models import FileSet, GeneratedFile, GenerationOutcome, ParsedFiles, PromptParts, TokenUsage

_CREDENTIAL_ENV = (
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "GEMINI_API_KEY",
    "GOOGLE_GENERATIVE_AI_API_KEY",
)


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Attach suite markers based on test file path."""
    del config
    for item in items:
        parts = set(Path(str(item.fspath)).parts)
        if "e2e_tests" in parts:
            item.add_marker(pytest.mark.e2e)
        elif "unit_tests" in parts:
            item.add_marker(pytest.mark.unit)


class RecordingDocuments:
    """Document source stub that records every batch it is asked for."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []

    async def fetch(self, urls: Sequence[str]) -> list[str]:
        self.calls.append(list(urls))
        return [f"docs for {url}" for url in urls]


class StubGenerator:
    """Structured generator returning a fixed outcome."""

    def __init__(self, outcome: GenerationOutcome) -> None:
        self.outcome = outcome
        self.calls: list[tuple[str, PromptParts]] = []

    async def generate(self, *, model: str, prompt: PromptParts) -> GenerationOutcome:
        self.calls.append((model, prompt))
        return self.outcome


def parsed_files(*files: tuple[str, str], input_tokens: int = 120, output_tokens: int = 30) -> ParsedFiles:
    return ParsedFiles(
        file_set=FileSet(files=[GeneratedFile(path=path, content=content) for path, content in files]),
        usage=TokenUsage(input_tokens=input_tokens, output_tokens=output_tokens),
    )


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _CREDENTIAL_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings(clean_env: None) -> AppSettings:
    return AppSettings(
        _env_file=None,
        openai_api_key="sk-test",
        anthropic_api_key="sk-ant-test",
        gemini_api_key="gm-test",
    )


@pytest.fixture
def keyless_settings(clean_env: None) -> AppSettings:
    return AppSettings(_env_file=None)


@pytest.fixture
def documents() -> RecordingDocuments:
    return RecordingDocuments()
