"""Unit tests for the single-attempt model invoker."""

from __future__ import annotations

import asyncio

import pytest

from conftest import StubGenerator, parsed_files
from core.domain.models import ParseFailure, PromptParts, TokenUsage
from core.domain.registry import Provider
from core.errors import GenerationError
from core.services.model_invoker import invoke_model

PROMPT = PromptParts(system="sys", user="usr")


def test_parsed_files_become_conversion_result() -> None:
    generator = StubGenerator(parsed_files(("GEMINI.md", "# Rules\n"), input_tokens=7, output_tokens=3))

    result = asyncio.run(invoke_model(generator, provider=Provider.GEMINI, model="gemini-2.5-flash", prompt=PROMPT))

    assert [(f.path, f.content) for f in result.files] == [("GEMINI.md", "# Rules\n")]
    assert result.usage.total_tokens == 10
    assert result.provider is Provider.GEMINI
    assert result.model == "gemini-2.5-flash"
    assert generator.calls == [("gemini-2.5-flash", PROMPT)]


def test_parse_failure_raises_generation_error_after_one_call() -> None:
    generator = StubGenerator(ParseFailure(reason="no structured output returned", usage=TokenUsage()))

    with pytest.raises(GenerationError, match="no structured output returned"):
        asyncio.run(invoke_model(generator, provider=Provider.OPENAI, model="gpt-4.1", prompt=PROMPT))

    assert len(generator.calls) == 1
