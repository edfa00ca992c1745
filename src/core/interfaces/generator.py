"""Structured generation contract.

Why Protocol:
- One capability per provider behind a uniform operation, picked once at
  setup instead of string comparisons at call time.
- Tests plug in a stub returning a fixed `FileSet`.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import GenerationOutcome, PromptParts


@runtime_checkable
class StructuredGenerator(Protocol):
    """Issues one structured-generation request and reports the typed outcome.

    Provider errors (auth, rate limit, quota) are raised as `GenerationError`;
    output that does not satisfy the schema is returned as `ParseFailure`.
    """

    async def generate(self, *, model: str, prompt: PromptParts) -> GenerationOutcome:
        ...
