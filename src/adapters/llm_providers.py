"""LLM provider backends (OpenAI, Anthropic, Gemini).

Responsibility:
- Build one provider-specific client per run, selected once by `build_generator`.
- Issue a single structured-generation request constrained to `FileSet`.
- Report the typed outcome: `ParsedFiles` or `ParseFailure`. Transport and
  API errors become `GenerationError`.

Every client is created with `max_retries=0`: one attempt, surfaced verbatim.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

import anthropic
import openai
from anthropic import AsyncAnthropic
from openai import AsyncOpenAI
from pydantic import ValidationError as SchemaValidationError

from core.config import AppSettings, require_api_key
from core.domain.models import FileSet, GenerationOutcome, ParsedFiles, ParseFailure, PromptParts, TokenUsage
from core.domain.registry import PROVIDER_NAMES, Provider, output_token_limit
from core.errors import GenerationError
from core.interfaces.generator import StructuredGenerator

logger = logging.getLogger(__name__)

_TOOL_NAME = "write_context_files"


def _messages(prompt: PromptParts) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": prompt.system},
        {"role": "user", "content": prompt.user},
    ]


def _chat_usage(usage: Any) -> TokenUsage:
    if usage is None:
        return TokenUsage()
    return TokenUsage(input_tokens=usage.prompt_tokens, output_tokens=usage.completion_tokens)


def _parse_failure(exc: SchemaValidationError, raw: str | None, usage: TokenUsage | None = None) -> ParseFailure:
    errors = "; ".join(f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors())
    return ParseFailure(reason=f"response does not match the file schema ({errors})", raw=raw, usage=usage)


class OpenAIGenerator(StructuredGenerator):
    """OpenAI Responses API with a Pydantic `text_format`."""

    def __init__(self, client: AsyncOpenAI) -> None:
        self._client = client

    async def generate(self, *, model: str, prompt: PromptParts) -> GenerationOutcome:
        try:
            response = await self._client.responses.parse(
                model=model,
                input=_messages(prompt),  # type: ignore[arg-type]
                text_format=FileSet,
            )
        except SchemaValidationError as exc:
            return _parse_failure(exc, raw=None)
        except openai.APIError as exc:
            raise GenerationError(f"OpenAI request failed: {exc}") from exc

        usage = TokenUsage()
        if response.usage is not None:
            usage = TokenUsage(
                input_tokens=response.usage.input_tokens,
                output_tokens=response.usage.output_tokens,
            )

        parsed = response.output_parsed
        if parsed is None:
            return ParseFailure(reason="no structured output returned", raw=response.output_text, usage=usage)
        return ParsedFiles(file_set=parsed, usage=usage)


class GeminiGenerator(StructuredGenerator):
    """Gemini through its OpenAI-compatible Chat Completions endpoint."""

    def __init__(self, client: AsyncOpenAI) -> None:
        self._client = client

    async def generate(self, *, model: str, prompt: PromptParts) -> GenerationOutcome:
        try:
            completion = await self._client.chat.completions.parse(
                model=model,
                messages=_messages(prompt),  # type: ignore[arg-type]
                response_format=FileSet,
            )
        except SchemaValidationError as exc:
            return _parse_failure(exc, raw=None)
        except openai.LengthFinishReasonError as exc:
            return ParseFailure(
                reason="output was truncated at the length limit",
                usage=_chat_usage(exc.completion.usage),
            )
        except openai.ContentFilterFinishReasonError:
            return ParseFailure(reason="output was blocked by the content filter")
        except openai.APIError as exc:
            raise GenerationError(f"Gemini request failed: {exc}") from exc

        usage = _chat_usage(completion.usage)

        if not completion.choices:
            return ParseFailure(reason="no choices returned", usage=usage)
        message = completion.choices[0].message
        if message.parsed is None:
            reason = f"model refused: {message.refusal}" if message.refusal else "no structured output returned"
            return ParseFailure(reason=reason, raw=message.content, usage=usage)
        return ParsedFiles(file_set=message.parsed, usage=usage)


class AnthropicGenerator(StructuredGenerator):
    """Anthropic Messages API with a single forced tool carrying the schema."""

    def __init__(self, client: AsyncAnthropic, *, max_tokens: int) -> None:
        self._client = client
        self._max_tokens = max_tokens

    async def generate(self, *, model: str, prompt: PromptParts) -> GenerationOutcome:
        try:
            response = await self._client.messages.create(
                model=model,
                max_tokens=output_token_limit(model, self._max_tokens),
                system=prompt.system,
                messages=[{"role": "user", "content": prompt.user}],
                tools=[
                    {
                        "name": _TOOL_NAME,
                        "description": "Write the converted context files.",
                        "input_schema": FileSet.model_json_schema(),
                    }
                ],
                tool_choice={"type": "tool", "name": _TOOL_NAME},
            )
        except anthropic.APIError as exc:
            raise GenerationError(f"Anthropic request failed: {exc}") from exc

        usage = TokenUsage(
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )

        if response.stop_reason == "max_tokens":
            return ParseFailure(reason="output was truncated at the max_tokens limit", usage=usage)

        tool_input: Any = None
        for block in response.content:
            if block.type == "tool_use" and block.name == _TOOL_NAME:
                tool_input = block.input
                break
        if tool_input is None:
            return ParseFailure(reason="no tool call in response", usage=usage)

        try:
            file_set = FileSet.model_validate(tool_input)
        except SchemaValidationError as exc:
            return _parse_failure(exc, raw=json.dumps(tool_input, ensure_ascii=False), usage=usage)
        return ParsedFiles(file_set=file_set, usage=usage)


def _openai_generator(api_key: str, settings: AppSettings) -> StructuredGenerator:
    client = AsyncOpenAI(api_key=api_key, timeout=settings.ai_timeout_seconds, max_retries=0)
    return OpenAIGenerator(client)


def _anthropic_generator(api_key: str, settings: AppSettings) -> StructuredGenerator:
    client = AsyncAnthropic(api_key=api_key, timeout=settings.ai_timeout_seconds, max_retries=0)
    return AnthropicGenerator(client, max_tokens=settings.max_output_tokens)


def _gemini_generator(api_key: str, settings: AppSettings) -> StructuredGenerator:
    client = AsyncOpenAI(
        api_key=api_key,
        base_url=settings.gemini_base_url,
        timeout=settings.ai_timeout_seconds,
        max_retries=0,
    )
    return GeminiGenerator(client)


_BACKENDS: dict[Provider, Callable[[str, AppSettings], StructuredGenerator]] = {
    Provider.OPENAI: _openai_generator,
    Provider.ANTHROPIC: _anthropic_generator,
    Provider.GEMINI: _gemini_generator,
}


def build_generator(provider: Provider, settings: AppSettings) -> StructuredGenerator:
    """Select the backend for `provider` once, during setup."""

    factory = _BACKENDS.get(provider)
    if factory is None:
        raise GenerationError(f"Unsupported provider: {provider}")
    api_key = require_api_key(provider, settings)
    logger.debug("Using %s backend", PROVIDER_NAMES[provider])
    return factory(api_key, settings)
