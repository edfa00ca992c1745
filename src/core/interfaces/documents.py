"""Documentation source contract."""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable


@runtime_checkable
class DocumentSource(Protocol):
    """Retrieves reference documents describing a format.

    Design rules:
    - `fetch` is async because it does network I/O.
    - Results come back in the order of `urls`; any failure aborts the batch.
    """

    async def fetch(self, urls: Sequence[str]) -> list[str]:
        ...
