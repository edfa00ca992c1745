"""Error taxonomy for x-context.

Why a dedicated module:
- Adapters translate third-party exceptions (httpx, openai, anthropic,
  pydantic) into these types at their boundary.
- The CLI is the only layer that turns them into output and exit codes.
"""

from __future__ import annotations

from pathlib import Path


class XContextError(Exception):
    """Base class for every failure surfaced to the user."""

    exit_code: int = 1


class ValidationError(XContextError):
    """Bad command-line options. Carries every violated constraint."""

    def __init__(self, messages: list[str] | str) -> None:
        if isinstance(messages, str):
            messages = [messages]
        self.messages = list(messages)
        super().__init__("; ".join(self.messages))


class UnknownFormatError(ValidationError):
    pass


class UnknownProviderError(ValidationError):
    pass


class UnknownModelError(ValidationError):
    pass


class CredentialError(XContextError):
    """The provider's API key is not present in the environment."""

    def __init__(self, provider: str, variables: tuple[str, ...]) -> None:
        self.provider = provider
        self.variables = variables
        names = " or ".join(variables)
        super().__init__(f"{names} environment variable is required for the {provider} provider")


class FileAccessError(XContextError):
    """An input file could not be read or an output file could not be written."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class DocumentationFetchError(XContextError):
    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch documentation from {url}: {reason}")


class GenerationError(XContextError):
    """The provider rejected the request or returned output outside the schema."""
