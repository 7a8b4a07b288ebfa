"""Typed row decoding.

A query declares its column types once; ``RowDecoder`` resolves a decoding rule
for each of them up front and then turns every positioned row into a
``Record`` in a single pass, without inspecting the schema again.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from rank_store.errors import (
    ColumnCountError,
    ColumnDecodeError,
    NullColumnError,
    UnsupportedColumnTypeError,
)


class ColumnType(StrEnum):
    """Closed set of column types the decoder understands."""

    INTEGER = "integer"
    TEXT = "text"


@dataclass(frozen=True, slots=True)
class ColumnValue:
    """One decoded cell. ``type`` always matches the declared column type."""

    type: ColumnType
    value: int | str


def _decode_integer(raw: Any, ordinal: int) -> ColumnValue:
    if raw is None:
        raise NullColumnError(
            f"column {ordinal} is NULL, expected integer",
            ordinal=ordinal,
            column_type=ColumnType.INTEGER,
        )
    # bool is an int subclass but never a valid engine integer
    if not isinstance(raw, int) or isinstance(raw, bool):
        raise ColumnDecodeError(
            f"column {ordinal} holds {type(raw).__name__}, expected integer",
            ordinal=ordinal,
            column_type=ColumnType.INTEGER,
        )
    return ColumnValue(ColumnType.INTEGER, raw)


def _decode_text(raw: Any, ordinal: int) -> ColumnValue:
    if raw is None:
        raise NullColumnError(
            f"column {ordinal} is NULL, expected text",
            ordinal=ordinal,
            column_type=ColumnType.TEXT,
        )
    if isinstance(raw, str):
        return ColumnValue(ColumnType.TEXT, raw)
    if isinstance(raw, bytes):
        try:
            return ColumnValue(ColumnType.TEXT, raw.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise ColumnDecodeError(
                f"column {ordinal} is not valid UTF-8: {exc}",
                ordinal=ordinal,
                column_type=ColumnType.TEXT,
            ) from exc
    raise ColumnDecodeError(
        f"column {ordinal} holds {type(raw).__name__}, expected text",
        ordinal=ordinal,
        column_type=ColumnType.TEXT,
    )


Decoder = Callable[[Any, int], ColumnValue]

DECODERS: dict[ColumnType, Decoder] = {
    ColumnType.INTEGER: _decode_integer,
    ColumnType.TEXT: _decode_text,
}


def resolve_decoder(column_type: ColumnType | str) -> Decoder:
    """Look up the decoding rule for a column type.

    Raises UnsupportedColumnTypeError for anything outside ``ColumnType``.
    """
    try:
        return DECODERS[ColumnType(column_type)]
    except (KeyError, ValueError):
        raise UnsupportedColumnTypeError(
            f"no decoding rule for column type {column_type!r}"
        ) from None


class Record(Sequence[Any]):
    """An ordered row of decoded cells.

    Indexing and iteration yield plain Python values so a record unpacks like
    a tuple (``name, score = record``); ``cell()`` returns the tagged value.
    The empty record is the end-of-sequence sentinel and is falsy.
    """

    __slots__ = ("_cells",)

    def __init__(self, cells: Iterable[ColumnValue] = ()) -> None:
        """Initialize from decoded cells."""
        self._cells: tuple[ColumnValue, ...] = tuple(cells)

    @property
    def cells(self) -> tuple[ColumnValue, ...]:
        """The tagged cells in declared order."""
        return self._cells

    def cell(self, index: int) -> ColumnValue:
        """Return the tagged cell at ``index``."""
        return self._cells[index]

    def as_tuple(self) -> tuple[Any, ...]:
        """Return the raw values as a tuple."""
        return tuple(c.value for c in self._cells)

    def __getitem__(self, index: int | slice) -> Any:
        if isinstance(index, slice):
            return tuple(c.value for c in self._cells[index])
        return self._cells[index].value

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Any]:
        return (c.value for c in self._cells)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Record):
            return self._cells == other._cells
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._cells)

    def __repr__(self) -> str:
        return f"Record{self.as_tuple()!r}"


EMPTY_RECORD = Record()


class RowDecoder:
    """Decodes rows against a fixed, ordered list of column types."""

    def __init__(self, column_types: Sequence[ColumnType | str]) -> None:
        """Resolve a decoding rule per declared column.

        Fails here, not per row, if a type has no rule or no columns are declared.
        """
        if not column_types:
            raise UnsupportedColumnTypeError("at least one column type must be declared")
        self._decoders = tuple(resolve_decoder(t) for t in column_types)
        self.column_types = tuple(ColumnType(t) for t in column_types)

    @property
    def column_count(self) -> int:
        """Number of declared columns."""
        return len(self._decoders)

    def decode(self, row: Sequence[Any] | None) -> Record:
        """Decode one positioned row, or return EMPTY_RECORD when there is none."""
        if row is None:
            return EMPTY_RECORD
        if len(row) != len(self._decoders):
            raise ColumnCountError(
                f"row has {len(row)} columns, expected {len(self._decoders)}"
            )
        return Record(
            decode(raw, ordinal)
            for ordinal, (decode, raw) in enumerate(zip(self._decoders, row, strict=True))
        )
