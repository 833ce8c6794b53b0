"""
Closed set of column kinds that have a canonicalization rule, and the
mapping from Arrow types onto them.

Anything not listed (booleans, temporal, binary, decimal, dictionary,
nested types, all-null columns) is rejected up front rather than hashed.
"""

from __future__ import annotations

from enum import Enum

import pyarrow as pa

from unfhash.errors import UnsupportedColumnType


class ColumnKind(str, Enum):
    FLOAT64 = "float64"
    FLOAT32 = "float32"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    TEXT = "text"

    @property
    def is_float(self) -> bool:
        return self in _FLOAT_KINDS

    @property
    def is_integer(self) -> bool:
        return self in _INTEGER_KINDS


_FLOAT_KINDS = frozenset({ColumnKind.FLOAT64, ColumnKind.FLOAT32})
_INTEGER_KINDS = frozenset(
    {
        ColumnKind.INT8,
        ColumnKind.INT16,
        ColumnKind.INT32,
        ColumnKind.INT64,
        ColumnKind.UINT8,
        ColumnKind.UINT16,
        ColumnKind.UINT32,
        ColumnKind.UINT64,
    }
)

_ARROW_KINDS: dict[pa.DataType, ColumnKind] = {
    pa.float64(): ColumnKind.FLOAT64,
    pa.float32(): ColumnKind.FLOAT32,
    pa.int8(): ColumnKind.INT8,
    pa.int16(): ColumnKind.INT16,
    pa.int32(): ColumnKind.INT32,
    pa.int64(): ColumnKind.INT64,
    pa.uint8(): ColumnKind.UINT8,
    pa.uint16(): ColumnKind.UINT16,
    pa.uint32(): ColumnKind.UINT32,
    pa.uint64(): ColumnKind.UINT64,
    pa.string(): ColumnKind.TEXT,
    pa.large_string(): ColumnKind.TEXT,
}


def kind_for_arrow_type(arrow_type: pa.DataType, *, column: str = "<column>") -> ColumnKind:
    kind = _ARROW_KINDS.get(arrow_type)
    if kind is None:
        raise UnsupportedColumnType(column, arrow_type)
    return kind


def kinds_for_schema(schema: pa.Schema) -> list[ColumnKind]:
    """Resolve every field of a schema, in order; the first unsupported field raises."""
    return [kind_for_arrow_type(f.type, column=f.name) for f in schema]


def schema_signature(schema: pa.Schema) -> list[tuple[str, str]]:
    """(name, type) pairs used to compare batch schemas; nullability and metadata are ignored."""
    return [(f.name, str(f.type)) for f in schema]
