"""
Delimited-file reader: header row + typed record batches.

Column types are inferred from the first `inference_rows` data rows, then the
whole file is streamed with those types fixed, so every batch shares one
schema.
"""

from __future__ import annotations

import itertools
from pathlib import Path
from typing import Iterator

import pyarrow as pa
import pyarrow.csv as pacsv
import structlog

from unfhash.config import DEFAULT_INFERENCE_ROWS

log = structlog.get_logger()


def _head_bytes(path: Path, n_lines: int) -> bytes:
    with open(path, "rb") as f:
        return b"".join(itertools.islice(f, n_lines))


def infer_csv_schema(path: Path, inference_rows: int = DEFAULT_INFERENCE_ROWS) -> pa.Schema:
    """
    Infer column types from the header and the first `inference_rows` rows.

    Columns that are empty in the sample are typed as strings.
    """
    head = _head_bytes(path, max(1, int(inference_rows)) + 1)
    sample = pacsv.read_csv(pa.BufferReader(head))
    fields = []
    for f in sample.schema:
        t = pa.string() if pa.types.is_null(f.type) else f.type
        fields.append(pa.field(f.name, t))
    return pa.schema(fields)


def read_csv_batches(
    path: str | Path,
    *,
    inference_rows: int = DEFAULT_INFERENCE_ROWS,
    block_size: int | None = None,
) -> tuple[pa.Schema, Iterator[pa.RecordBatch]]:
    """
    Open a CSV file for streaming.

    Returns the schema and an iterator of record batches in file order.
    Conversion errors (`pa.ArrowInvalid`) for values that do not fit the
    inferred types are raised either by this call, which already converts the
    first block, or while iterating the batches.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(str(p))
    schema = infer_csv_schema(p, inference_rows)
    read_options = pacsv.ReadOptions(block_size=block_size) if block_size else pacsv.ReadOptions()
    convert_options = pacsv.ConvertOptions(column_types={f.name: f.type for f in schema})
    reader = pacsv.open_csv(str(p), read_options=read_options, convert_options=convert_options)
    log.debug("unf.csv_open", path=str(p), columns=len(schema), inference_rows=int(inference_rows))
    return reader.schema, iter(reader)
