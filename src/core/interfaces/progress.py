"""Progress reporting contract passed into each pipeline stage."""

from __future__ import annotations

from typing import Protocol


class ProgressReporter(Protocol):
    def start(self, message: str) -> None:
        ...

    def succeed(self, message: str) -> None:
        ...

    def fail(self, message: str) -> None:
        ...


class SilentProgress:
    """No-op reporter for tests and non-interactive callers."""

    def start(self, message: str) -> None:
        pass

    def succeed(self, message: str) -> None:
        pass

    def fail(self, message: str) -> None:
        pass
