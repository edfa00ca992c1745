"""Unit tests for `--doctor` diagnostics."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from cli import doctor
from core.config import AppSettings
from core.domain.registry import FORMAT_DOCUMENTS


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=200), buffer


def _reachable(monkeypatch: pytest.MonkeyPatch, failing: set[str] | None = None) -> list[str]:
    checked: list[str] = []

    async def fake_check(url: str, settings: AppSettings) -> tuple[bool, str]:
        checked.append(url)
        if failing and url in failing:
            return False, "HTTP 503"
        return True, "HTTP 200"

    monkeypatch.setattr(doctor, "_check_http", fake_check)
    return checked


def test_all_checks_pass(settings: AppSettings, monkeypatch: pytest.MonkeyPatch) -> None:
    checked = _reachable(monkeypatch)
    console, buffer = _console()

    assert doctor.run_diagnostics(console=console, settings=settings) is True

    expected = [url for urls in FORMAT_DOCUMENTS.values() for url in urls]
    assert sorted(checked) == sorted(expected)
    assert "FAIL" not in buffer.getvalue()


def test_no_keys_is_reported(keyless_settings: AppSettings, monkeypatch: pytest.MonkeyPatch) -> None:
    _reachable(monkeypatch)
    console, buffer = _console()

    assert doctor.run_diagnostics(console=console, settings=keyless_settings) is False
    assert "OPENAI_API_KEY not set" in buffer.getvalue()


def test_unreachable_documentation_fails(settings: AppSettings, monkeypatch: pytest.MonkeyPatch) -> None:
    first_url = FORMAT_DOCUMENTS[next(iter(FORMAT_DOCUMENTS))][0]
    _reachable(monkeypatch, failing={first_url})
    console, buffer = _console()

    assert doctor.run_diagnostics(console=console, settings=settings) is False
    assert "HTTP 503" in buffer.getvalue()
