"""Single-attempt structured generation.

There is no retry and no backoff: one request per invocation, and whatever
the provider reports is surfaced verbatim as a `GenerationError`.
"""

from __future__ import annotations

import logging

from core.domain.models import ConversionResult, ParseFailure, PromptParts
from core.domain.registry import Provider
from core.errors import GenerationError
from core.interfaces.generator import StructuredGenerator

logger = logging.getLogger(__name__)


async def invoke_model(
    generator: StructuredGenerator,
    *,
    provider: Provider,
    model: str,
    prompt: PromptParts,
) -> ConversionResult:
    logger.debug("Requesting structured output from %s (%s)", provider.value, model)
    outcome = await generator.generate(model=model, prompt=prompt)

    if isinstance(outcome, ParseFailure):
        logger.debug("Unparseable provider output: %r", outcome.raw)
        raise GenerationError(f"Failed to generate context files: {outcome.reason}")

    usage = outcome.usage
    logger.debug(
        "Received %d file(s); tokens in=%d out=%d",
        len(outcome.file_set.files),
        usage.input_tokens,
        usage.output_tokens,
    )
    return ConversionResult(
        files=list(outcome.file_set.files),
        usage=usage,
        provider=provider,
        model=model,
    )
