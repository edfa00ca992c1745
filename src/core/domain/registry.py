"""Closed registries: formats, providers and models.

This module is the single source of truth for every identifier the CLI
accepts. Lookups fail with a `ValidationError` subclass so that bad input is
rejected before any network or LLM call happens.
"""

from __future__ import annotations

from enum import Enum

from core.errors import UnknownFormatError, UnknownModelError, UnknownProviderError


class Format(str, Enum):
    """Context-file conventions of the supported coding assistants."""

    CLAUDE_CODE = "claude-code"
    COPILOT = "copilot"
    CURSOR = "cursor"
    GEMINI_CLI = "gemini-cli"


class Provider(str, Enum):
    """LLM vendors able to run the conversion."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"


SUPPORTED_FORMATS: tuple[str, ...] = tuple(f.value for f in Format)
SUPPORTED_PROVIDERS: tuple[str, ...] = tuple(p.value for p in Provider)

FORMAT_NAMES: dict[Format, str] = {
    Format.CLAUDE_CODE: "Claude Code",
    Format.COPILOT: "GitHub Copilot",
    Format.CURSOR: "Cursor",
    Format.GEMINI_CLI: "Gemini CLI",
}

PROVIDER_NAMES: dict[Provider, str] = {
    Provider.OPENAI: "OpenAI",
    Provider.ANTHROPIC: "Anthropic",
    Provider.GEMINI: "Google Gemini",
}

FORMAT_DOCUMENTS: dict[Format, tuple[str, ...]] = {
    Format.CLAUDE_CODE: (
        "https://docs.anthropic.com/en/docs/claude-code/memory.md",
    ),
    Format.COPILOT: (
        "https://docs.github.com/api/article/body?pathname=/en/copilot/customizing-copilot/"
        "adding-repository-custom-instructions-for-github-copilot",
    ),
    Format.CURSOR: (
        "https://docs.cursor.com/context/rules",
    ),
    Format.GEMINI_CLI: (
        "https://raw.githubusercontent.com/google-gemini/gemini-cli/main/docs/cli/configuration.md",
    ),
}

# Where each tool expects its context files; embedded in the prompt so the
# model picks idiomatic paths instead of inventing them.
FORMAT_OUTPUT_HINTS: dict[Format, str] = {
    Format.CLAUDE_CODE: (
        "Project memory lives in a file named `CLAUDE.md` at the project root. "
        "Additional memory files may be imported from it with `@path/to/file` syntax."
    ),
    Format.COPILOT: (
        "Repository-wide instructions live in `.github/copilot-instructions.md`. "
        "Path-specific instructions live in `.github/instructions/<name>.instructions.md` "
        "with an `applyTo` glob in YAML frontmatter."
    ),
    Format.CURSOR: (
        "Project rules live in `.cursor/rules/<name>.mdc`, each with YAML frontmatter "
        "containing `description`, `globs` and `alwaysApply`."
    ),
    Format.GEMINI_CLI: (
        "Project context lives in a file named `GEMINI.md` at the project root. "
        "Settings, when needed, live in `.gemini/settings.json`."
    ),
}

SUPPORTED_MODELS: dict[Provider, tuple[str, ...]] = {
    Provider.OPENAI: (
        "gpt-4.1",
        "gpt-4.1-mini",
        "gpt-4.1-nano",
        "gpt-4o",
        "gpt-4o-mini",
        "gpt-5",
        "gpt-5-mini",
        "gpt-5-nano",
        "o3",
        "o4-mini",
    ),
    Provider.ANTHROPIC: (
        "claude-opus-4-1-20250805",
        "claude-opus-4-20250514",
        "claude-sonnet-4-20250514",
        "claude-sonnet-4-5",
        "claude-3-7-sonnet-latest",
        "claude-3-5-haiku-latest",
        "claude-haiku-4-5",
    ),
    Provider.GEMINI: (
        "gemini-2.5-pro",
        "gemini-2.5-flash",
        "gemini-2.5-flash-lite",
        "gemini-2.0-flash",
        "gemini-2.0-flash-lite",
    ),
}

DEFAULT_MODELS: dict[Provider, str] = {
    Provider.OPENAI: "gpt-4.1",
    Provider.ANTHROPIC: "claude-sonnet-4-20250514",
    Provider.GEMINI: "gemini-2.5-flash",
}

CREDENTIAL_VARIABLES: dict[Provider, tuple[str, ...]] = {
    Provider.OPENAI: ("OPENAI_API_KEY",),
    Provider.ANTHROPIC: ("ANTHROPIC_API_KEY",),
    Provider.GEMINI: ("GEMINI_API_KEY", "GOOGLE_GENERATIVE_AI_API_KEY"),
}

# Output token ceilings for models whose cap sits below the configured default.
MODEL_MAX_OUTPUT_TOKENS: dict[str, int] = {
    "claude-3-5-haiku-latest": 8192,
}


def _build_model_index(models: dict[Provider, tuple[str, ...]]) -> dict[str, Provider]:
    index: dict[str, Provider] = {}
    for provider, names in models.items():
        for name in names:
            owner = index.get(name)
            if owner is not None and owner is not provider:
                raise ValueError(f"Model {name!r} is listed under both {owner.value} and {provider.value}")
            index[name] = provider
    return index


_MODEL_INDEX: dict[str, Provider] = _build_model_index(SUPPORTED_MODELS)


def parse_format(value: str, *, flag: str = "--from") -> Format:
    try:
        return Format(value)
    except ValueError:
        raise UnknownFormatError(
            f"{flag} must be one of: {', '.join(SUPPORTED_FORMATS)} (got {value!r})"
        ) from None


def parse_provider(value: str) -> Provider:
    try:
        return Provider(value)
    except ValueError:
        raise UnknownProviderError(
            f"--provider must be one of: {', '.join(SUPPORTED_PROVIDERS)} (got {value!r})"
        ) from None


def provider_for_model(model: str) -> Provider:
    """Reverse lookup: the provider that owns `model`."""

    provider = _MODEL_INDEX.get(model)
    if provider is None:
        raise UnknownModelError(f"Unknown model {model!r}. Run with --list-models to see supported models")
    return provider


def documents_for(fmt: Format) -> tuple[str, ...]:
    return FORMAT_DOCUMENTS[fmt]


def default_model(provider: Provider) -> str:
    return DEFAULT_MODELS[provider]


def output_token_limit(model: str, requested: int) -> int:
    """Clamp `requested` to the model's output ceiling, when one is known."""

    cap = MODEL_MAX_OUTPUT_TOKENS.get(model)
    return requested if cap is None else min(requested, cap)
