"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts, headers and redirects for every documentation fetch.
- Eases testing: a `transport` can be injected (e.g. `httpx.MockTransport`).
"""

from __future__ import annotations

import httpx
from bs4 import BeautifulSoup

from core.config import AppSettings

_NOISE_TAGS = ["script", "style", "noscript", "nav", "header", "footer", "svg"]


def build_async_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with safe defaults."""

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "text/markdown,text/plain;q=0.9,text/html;q=0.8,*/*;q=0.5",
    }
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def is_html_response(response: httpx.Response) -> bool:
    content_type = response.headers.get("content-type", "")
    return "html" in content_type.lower()


def html_to_text(html: str) -> str:
    """Reduce an HTML page to its readable text.

    Keeps `<main>`/`<article>` when present; drops scripts, styles and chrome.
    """

    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all(_NOISE_TAGS):
        tag.decompose()

    root = soup.find("main") or soup.find("article") or soup.body or soup
    lines = [line.strip() for line in root.get_text("\n").splitlines()]
    return "\n".join(line for line in lines if line)
