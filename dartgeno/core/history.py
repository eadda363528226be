"""Append-only record of the operations applied to a dataset."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Tuple

__all__ = ["HistoryRecord", "TransformationHistory"]


def _freeze(value: Any) -> Any:
    """Convert mutable containers into hashable, immutable equivalents."""
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return tuple(sorted(_freeze(v) for v in value))
    if isinstance(value, dict):
        return tuple((k, _freeze(v)) for k, v in value.items())
    return value


@dataclass(frozen=True)
class HistoryRecord:
    """One applied operation and the parameters it was called with.

    Attributes:
        operation: Operation name (e.g. "keep_pop")
        parameters: Parameter name/value pairs in call order

    Example:
        >>> rec = HistoryRecord.create("filter_rdepth", lower=5, upper=50)
        >>> rec.params
        {'lower': 5, 'upper': 50}
        >>> str(rec)
        'filter_rdepth(lower=5, upper=50)'
    """

    operation: str
    parameters: Tuple[Tuple[str, Any], ...] = ()

    @classmethod
    def create(cls, operation: str, **parameters: Any) -> "HistoryRecord":
        return cls(
            operation=operation,
            parameters=tuple((k, _freeze(v)) for k, v in parameters.items()),
        )

    @property
    def params(self) -> Dict[str, Any]:
        return dict(self.parameters)

    def __str__(self) -> str:
        args = ", ".join(f"{k}={v!r}" for k, v in self.parameters)
        return f"{self.operation}({args})"


@dataclass(frozen=True)
class TransformationHistory:
    """Immutable, ordered sequence of HistoryRecord.

    ``append`` returns a new history; the receiver is never modified, so a
    history can be shared by datasets on independent pipelines.

    Example:
        >>> h0 = TransformationHistory()
        >>> h1 = h0.append(HistoryRecord.create("keep_pop", pop_list=["A"]))
        >>> len(h0), len(h1)
        (0, 1)
    """

    records: Tuple[HistoryRecord, ...] = field(default_factory=tuple)

    def append(self, record: HistoryRecord) -> "TransformationHistory":
        return TransformationHistory(records=self.records + (record,))

    @property
    def last(self) -> HistoryRecord:
        if not self.records:
            raise IndexError("history is empty")
        return self.records[-1]

    def operations(self) -> Tuple[str, ...]:
        return tuple(r.operation for r in self.records)

    def __iter__(self) -> Iterator[HistoryRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)
