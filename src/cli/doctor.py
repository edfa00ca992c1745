"""Doctor checks for environment diagnostics (`x-context --doctor`)."""

from __future__ import annotations

import asyncio

import httpx
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from core.config import AppSettings, require_api_key
from core.domain.registry import CREDENTIAL_VARIABLES, FORMAT_DOCUMENTS, FORMAT_NAMES, PROVIDER_NAMES, Provider
from core.errors import CredentialError


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return response.is_success, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc) or type(exc).__name__


async def _check_documents(settings: AppSettings) -> list[tuple[str, str, bool, str]]:
    targets = [(FORMAT_NAMES[fmt], url) for fmt, urls in FORMAT_DOCUMENTS.items() for url in urls]
    results = await asyncio.gather(*(_check_http(url, settings) for _, url in targets))
    return [(name, url, ok, detail) for (name, url), (ok, detail) in zip(targets, results)]


def run_diagnostics(*, console: Console, settings: AppSettings) -> bool:
    """Print a table of credential and documentation checks.

    Missing keys are reported as OPTIONAL (only the provider in use needs
    one); unreachable documentation is a failure because every conversion
    depends on it.
    """

    table = Table(title="x-context Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    any_key = False
    for provider in Provider:
        try:
            require_api_key(provider, settings)
            any_key = True
            table.add_row(f"{PROVIDER_NAMES[provider]} key", "OK", CREDENTIAL_VARIABLES[provider][0])
        except CredentialError as exc:
            table.add_row(f"{PROVIDER_NAMES[provider]} key", "OPTIONAL", f"{' or '.join(exc.variables)} not set")

    docs_ok = True
    for name, url, ok, detail in asyncio.run(_check_documents(settings)):
        docs_ok = docs_ok and ok
        table.add_row(f"{name} docs", "OK" if ok else "FAIL", f"{detail} {url}")

    console.print(table)

    if not any_key:
        console.print("\n[yellow]Note:[/yellow] Set at least one provider API key to run conversions.")
    return any_key and docs_ok
