"""Unit tests for prompt assembly."""

from __future__ import annotations

from pathlib import Path

from core.domain.models import ConversionRequest, DocumentBundle, SourceFile
from core.domain.registry import FORMAT_OUTPUT_HINTS, Format, Provider
from core.services.prompt_builder import build_prompt


def _request() -> ConversionRequest:
    return ConversionRequest(
        source_format=Format.CLAUDE_CODE,
        target_format=Format.CURSOR,
        provider=Provider.OPENAI,
        model="gpt-4.1",
        sources=[
            SourceFile(path=Path("CLAUDE.md"), content="Use pnpm."),
            SourceFile(path=Path("docs/style.md"), content="Prefer tabs."),
        ],
        documents=DocumentBundle(source=["SRC-DOC-1", "SRC-DOC-2"], target=["TGT-DOC-1"]),
    )


def test_user_prompt_orders_source_docs_target_docs_then_files() -> None:
    user = build_prompt(_request()).user

    positions = [
        user.index("<source_docs>"),
        user.index("SRC-DOC-1"),
        user.index("SRC-DOC-2"),
        user.index("<target_docs>"),
        user.index("TGT-DOC-1"),
        user.index("<source_files>"),
        user.index('<source_file path="CLAUDE.md">'),
        user.index('<source_file path="docs/style.md">'),
    ]
    assert positions == sorted(positions)


def test_file_contents_are_embedded_untruncated() -> None:
    user = build_prompt(_request()).user
    assert "Use pnpm." in user
    assert "Prefer tabs." in user
    assert user.count("<document>") == 3


def test_system_prompt_carries_target_output_hint() -> None:
    system = build_prompt(_request()).system
    assert FORMAT_OUTPUT_HINTS[Format.CURSOR] in system
    assert "Claude Code" in system
    assert "Cursor" in system


def test_prompt_is_deterministic() -> None:
    assert build_prompt(_request()) == build_prompt(_request())
