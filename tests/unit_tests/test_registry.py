"""Unit tests for the format/provider/model registries."""

from __future__ import annotations

import pytest

from core.domain import registry
from core.domain.registry import Format, Provider
from core.errors import UnknownFormatError, UnknownModelError, UnknownProviderError, ValidationError


def test_every_format_has_documents_name_and_output_hint() -> None:
    for fmt in Format:
        assert registry.documents_for(fmt)
        assert registry.FORMAT_NAMES[fmt]
        assert registry.FORMAT_OUTPUT_HINTS[fmt]


def test_default_model_belongs_to_its_provider() -> None:
    for provider in Provider:
        model = registry.default_model(provider)
        assert model in registry.SUPPORTED_MODELS[provider]
        assert registry.provider_for_model(model) is provider


def test_model_strings_are_unique_across_providers() -> None:
    seen: list[str] = [m for models in registry.SUPPORTED_MODELS.values() for m in models]
    assert len(seen) == len(set(seen))


def test_model_index_rejects_shared_model() -> None:
    with pytest.raises(ValueError, match="gpt-4.1"):
        registry._build_model_index(
            {Provider.OPENAI: ("gpt-4.1",), Provider.GEMINI: ("gpt-4.1",)}
        )


def test_provider_for_model_reverse_lookup() -> None:
    assert registry.provider_for_model("gpt-4.1-mini") is Provider.OPENAI
    assert registry.provider_for_model("claude-sonnet-4-20250514") is Provider.ANTHROPIC
    assert registry.provider_for_model("gemini-2.5-pro") is Provider.GEMINI


@pytest.mark.parametrize(
    ("call", "error"),
    [
        (lambda: registry.parse_format("windsurf"), UnknownFormatError),
        (lambda: registry.parse_provider("mistral"), UnknownProviderError),
        (lambda: registry.provider_for_model("llama-3"), UnknownModelError),
    ],
)
def test_unknown_identifiers_raise_validation_errors(call, error) -> None:
    with pytest.raises(error) as excinfo:
        call()
    assert isinstance(excinfo.value, ValidationError)
    assert excinfo.value.messages


def test_parse_format_names_the_flag() -> None:
    with pytest.raises(UnknownFormatError, match="--to must be one of"):
        registry.parse_format("vim", flag="--to")


@pytest.mark.parametrize(
    ("model", "requested", "expected"),
    [
        ("claude-3-5-haiku-latest", 16000, 8192),
        ("claude-3-5-haiku-latest", 4000, 4000),
        ("claude-sonnet-4-20250514", 16000, 16000),
    ],
)
def test_output_token_limit_clamps_to_model_ceiling(model: str, requested: int, expected: int) -> None:
    assert registry.output_token_limit(model, requested) == expected


def test_output_token_ceilings_only_cover_catalogued_models() -> None:
    for model in registry.MODEL_MAX_OUTPUT_TOKENS:
        registry.provider_for_model(model)
