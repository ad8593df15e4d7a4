"""Category source abstraction consumed by the attribution engine."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from pagertally.timespan import Span


@runtime_checkable
class CategorySource(Protocol):
    """Anything that can supply the spans defining one attribution category."""

    def spans(self) -> list[Span]:
        """Return the category's spans for the reporting period, ordered by start."""
        ...


class StaticSource:
    """Category source backed by a pre-computed collection of spans."""

    def __init__(self, spans: Iterable[Span] = ()) -> None:
        self._spans = sorted(spans, key=lambda span: (span.start, span.end))

    def spans(self) -> list[Span]:
        return list(self._spans)

    def __repr__(self) -> str:
        return f"StaticSource({len(self._spans)} spans)"


__all__ = ["CategorySource", "StaticSource"]
