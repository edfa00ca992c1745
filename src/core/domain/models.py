"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- The same `FileSet` model is the JSON schema sent to every provider and the
  validator applied to what comes back.
- Every entity lives for a single invocation; nothing here is persisted.

Note:
- Constraints on `FileSet` are expressed as validators, not schema keywords,
  so the generated JSON schema stays inside what strict structured-output
  modes accept.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.domain.registry import Format, Provider


class SourceFile(BaseModel):
    """An input context file, read once and never modified."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(..., description="Path as given on the command line.")
    content: str = Field(..., description="Raw UTF-8 text of the file.")


class DocumentBundle(BaseModel):
    """Documentation texts for both sides of a conversion, in URL order."""

    source: list[str] = Field(default_factory=list)
    target: list[str] = Field(default_factory=list)


class PromptParts(BaseModel):
    model_config = ConfigDict(frozen=True)

    system: str
    user: str


class GeneratedFile(BaseModel):
    """One file of the converted output."""

    path: str = Field(..., description="Relative path where the file should be written.")
    content: str = Field(..., description="Complete file content in the target format.")

    @field_validator("path")
    @classmethod
    def _path_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("path must be a non-empty string")
        return value


class FileSet(BaseModel):
    """Structured-output contract: the converted file set."""

    files: list[GeneratedFile] = Field(
        ...,
        description="Converted files. Prefer a single file unless the target format requires several.",
    )

    @field_validator("files")
    @classmethod
    def _files_not_empty(cls, value: list[GeneratedFile]) -> list[GeneratedFile]:
        if not value:
            raise ValueError("files must contain at least one entry")
        return value


class TokenUsage(BaseModel):
    """Provider-reported token accounting."""

    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass(frozen=True)
class ParsedFiles:
    """Successful structured generation."""

    file_set: FileSet
    usage: TokenUsage


@dataclass(frozen=True)
class ParseFailure:
    """The provider answered but the answer does not satisfy `FileSet`."""

    reason: str
    raw: str | None = None
    usage: TokenUsage | None = None


GenerationOutcome = Union[ParsedFiles, ParseFailure]


class ConversionRequest(BaseModel):
    """Everything a single generation call needs."""

    source_format: Format
    target_format: Format
    provider: Provider
    model: str
    sources: list[SourceFile]
    documents: DocumentBundle


class ConversionResult(BaseModel):
    """Output of the model invoker, consumed by confirmation and writing."""

    files: list[GeneratedFile]
    usage: TokenUsage
    provider: Provider
    model: str
