"""
Dataset-level UNF fingerprints.

Column short hashes are sorted and hashed again as a one-column text
dataset with the same configuration; the result is the dataset fingerprint.
Sorting makes column order irrelevant while column content stays significant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

import pandas as pd
import pyarrow as pa
import structlog

from unfhash.config import UnfConfig, UnfConfigBuilder, UnfVersion
from unfhash.errors import EmptyDataset
from unfhash.hasher import ColumnDigest, UnfHashBuilder

log = structlog.get_logger()

COMBINER_COLUMN = "column_hashes"
COMBINER_SCHEMA = pa.schema([pa.field(COMBINER_COLUMN, pa.string(), nullable=False)])


@dataclass(frozen=True)
class Fingerprint:
    digest: bytes
    short_hash: str
    version: UnfVersion
    config: UnfConfig
    columns: tuple[ColumnDigest, ...] = field(default_factory=tuple)

    @property
    def label(self) -> str:
        """UNF label, e.g. `UNF:6:BpeZgr7Q0Gs93IE8flkCBw==` or `UNF:6:N9,H256:...`."""
        header = self.config.header()
        if header:
            return f"UNF:{self.version}:{header}:{self.short_hash}"
        return f"UNF:{self.version}:{self.short_hash}"

    def __str__(self) -> str:
        return self.label

    def to_dict(self) -> dict[str, Any]:
        return {
            "unf": self.label,
            "short_hash": self.short_hash,
            "digest": self.digest.hex(),
            "version": str(self.version),
            "config": self.config.to_dict(),
            "columns": [
                {"name": c.name, "kind": c.kind.value, "short_hash": c.short_hash, "digest": c.digest.hex()}
                for c in self.columns
            ],
        }


def combine_short_hashes(short_hashes: Iterable[str], config: UnfConfig) -> tuple[bytes, str]:
    """
    Sort column short hashes and hash them as a single text column.

    Returns (digest, short_hash) of that one-column dataset.
    """
    ordered = sorted(str(h) for h in short_hashes)
    if not ordered:
        raise EmptyDataset("No column hashes to combine")
    batch = pa.RecordBatch.from_arrays([pa.array(ordered, type=pa.string())], schema=COMBINER_SCHEMA)
    builder = UnfHashBuilder(COMBINER_SCHEMA, config)
    builder.ingest(batch)
    (combined,) = builder.finalize()
    return combined.digest, combined.short_hash


def compute_fingerprint(
    schema: pa.Schema,
    batches: Iterable[pa.RecordBatch | pa.Table],
    config: UnfConfig | None = None,
) -> Fingerprint:
    """
    Fingerprint a dataset delivered as sequential batches sharing `schema`.

    Raises UnsupportedColumnType, SchemaMismatch or EmptyDataset; no partial
    result is returned on failure.
    """
    cfg = config if config is not None else UnfConfigBuilder().build()
    builder = UnfHashBuilder(schema, cfg)
    for batch in batches:
        builder.ingest(batch)
    if builder.rows == 0:
        raise EmptyDataset(f"Dataset has no rows (columns={len(schema)})")

    columns = builder.finalize()
    digest, short = combine_short_hashes([c.short_hash for c in columns], cfg)
    log.info(
        "unf.fingerprint",
        version=str(cfg.version),
        columns=len(columns),
        rows=builder.rows,
        batches=builder.batches,
        short_hash=short,
    )
    return Fingerprint(digest=digest, short_hash=short, version=cfg.version, config=cfg, columns=tuple(columns))


def fingerprint_table(table: pa.Table, config: UnfConfig | None = None) -> Fingerprint:
    return compute_fingerprint(table.schema, table.to_batches(), config)


def fingerprint_dataframe(df: pd.DataFrame, config: UnfConfig | None = None) -> Fingerprint:
    """
    Fingerprint a pandas DataFrame (the index is not part of the data).

    Object columns holding strings become Arrow strings; `None`/NaN in them
    are nulls.
    """
    table = pa.Table.from_pandas(df, preserve_index=False)
    return fingerprint_table(table, config)
