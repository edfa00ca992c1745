"""Prompt assembly for the conversion call.

The prompt is deterministic for a given request: fixed instructions, then
source docs, target docs and source files, each in its own delimited block.
No truncation is applied; oversized inputs surface as provider errors.
"""

from __future__ import annotations

from core.domain.models import ConversionRequest, PromptParts
from core.domain.registry import FORMAT_NAMES, FORMAT_OUTPUT_HINTS


def _build_system_prompt(request: ConversionRequest) -> str:
    source_name = FORMAT_NAMES[request.source_format]
    target_name = FORMAT_NAMES[request.target_format]
    return (
        "You are a configuration file conversion assistant. Your task is to convert "
        f"{source_name} context files into the {target_name} format.\n\n"
        "You will be provided with:\n"
        f"- Documentation for the {source_name} format\n"
        f"- Documentation for the {target_name} format\n"
        "- The path and content of every source file\n\n"
        "Convert the source files based on the documentation provided. Ensure that:\n"
        "- All relevant instructions and settings are preserved\n"
        "- The output follows the target format's syntax and conventions\n"
        "- Format-specific features are properly adapted\n"
        "- The converted files keep the same functional intent\n"
        "- You output both the file path and the complete file content of every file\n\n"
        "The conversion may result in one or several files. Prefer a single file unless the "
        "target format requires splitting. Paths must be relative to the project root.\n\n"
        f"Output location for {target_name}:\n"
        f"{FORMAT_OUTPUT_HINTS[request.target_format]}"
    )


def _wrap_documents(tag: str, documents: list[str]) -> str:
    body = "\n".join(f"<document>\n{doc}\n</document>" for doc in documents)
    return f"<{tag}>\n{body}\n</{tag}>"


def build_prompt(request: ConversionRequest) -> PromptParts:
    """Build the system/user instruction pair for `request`."""

    source_name = FORMAT_NAMES[request.source_format]
    target_name = FORMAT_NAMES[request.target_format]

    files = "\n".join(
        f'<source_file path="{source.path.as_posix()}">\n{source.content}\n</source_file>'
        for source in request.sources
    )

    user = (
        f"{source_name} documentation:\n"
        f"{_wrap_documents('source_docs', request.documents.source)}\n\n"
        f"{target_name} documentation:\n"
        f"{_wrap_documents('target_docs', request.documents.target)}\n\n"
        "Source files:\n"
        f"<source_files>\n{files}\n</source_files>"
    )
    return PromptParts(system=_build_system_prompt(request), user=user)
