"""Mapping-backed host instance.

A Record exposes the entries of a mapping as attributes so that functors
can resolve dependencies on it the same way they would on a declared host
object. Unknown names resolve to None (absent).

Record defines no public methods of its own, so every public attribute
name is a mapping entry. Copying and exporting go through the module
functions ``record_get``, ``record_with`` and ``record_values``.
"""

from collections.abc import Iterator, Mapping
from typing import Any


class Record:
    """Read-only attribute view over a mapping of parameter values."""

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[Any, Any] | None = None):
        object.__setattr__(self, "_values", dict(values or {}))

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self._values.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Record is read-only")

    def __getitem__(self, name: Any) -> Any:
        return self._values[name]

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[Any]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return self._values == other._values

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Record({self._values!r})"


def record_get(record: Record, name: Any, default: Any = None) -> Any:
    """Entry ``name`` of record, or ``default`` when absent."""
    return record[name] if name in record else default


def record_with(record: Record, name: Any, value: Any) -> Record:
    """Return a copy of record with one entry replaced."""
    values = record_values(record)
    values[name] = value
    return Record(values)


def record_values(record: Record) -> dict[Any, Any]:
    return {name: record[name] for name in record}
