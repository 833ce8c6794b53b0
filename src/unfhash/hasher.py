"""
Per-column streaming hashes.

`UnfHashBuilder` owns one `ColumnHasher` per schema field. Each ingested
batch is canonicalized column by column, encoded, and absorbed row by row;
nothing but the hash contexts survives between batches.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any

import pyarrow as pa
import structlog

from unfhash.canonical import canonical_column, encode_raw
from unfhash.columns import ColumnKind, kinds_for_schema, schema_signature
from unfhash.config import UnfAlgorithm, UnfConfig
from unfhash.errors import EmptyDataset, HasherFinalized, SchemaMismatch

log = structlog.get_logger()


def short_hash(digest: bytes, truncation: int) -> str:
    """Standard base64 (padded) of the first truncation/8 digest bytes."""
    return base64.b64encode(digest[: int(truncation) // 8]).decode("ascii")


class ColumnHasher:
    """Streaming hash accumulator for one column."""

    def __init__(self, algorithm: UnfAlgorithm) -> None:
        self._h: Any = algorithm.new()
        self._finalized = False

    def absorb(self, data: bytes) -> None:
        if self._finalized:
            raise HasherFinalized("absorb() after finalize()")
        self._h.update(data)

    def finalize(self) -> bytes:
        if self._finalized:
            raise HasherFinalized("finalize() called twice")
        self._finalized = True
        return self._h.digest()


@dataclass(frozen=True)
class ColumnDigest:
    name: str
    kind: ColumnKind
    digest: bytes
    short_hash: str


class UnfHashBuilder:
    """
    Orchestrates canonicalization and hashing for one dataset.

    Hashers are created as soon as the schema is known. `ingest()` may be
    called for any number of batches, in row order; `finalize()` consumes
    the builder.
    """

    def __init__(self, schema: pa.Schema, config: UnfConfig) -> None:
        if len(schema) == 0:
            raise EmptyDataset("Schema has no columns")
        self.schema = schema
        self.config = config
        self.kinds = kinds_for_schema(schema)
        self._signature = schema_signature(schema)
        self._hashers = [ColumnHasher(config.algorithm) for _ in self.kinds]
        self._finalized = False
        self.rows = 0
        self.batches = 0

    def ingest(self, batch: pa.RecordBatch | pa.Table) -> None:
        if self._finalized:
            raise HasherFinalized("ingest() after finalize()")
        if isinstance(batch, pa.Table):
            self._check_schema(batch.schema)
            for b in batch.to_batches():
                self._ingest_batch(b)
            return
        self._check_schema(batch.schema)
        self._ingest_batch(batch)

    def _check_schema(self, schema: pa.Schema) -> None:
        actual = schema_signature(schema)
        if actual != self._signature:
            raise SchemaMismatch(self._signature, actual)

    def _ingest_batch(self, batch: pa.RecordBatch) -> None:
        digits = self.config.digits
        characters = self.config.characters
        for idx, (kind, hasher) in enumerate(zip(self.kinds, self._hashers)):
            for s in canonical_column(batch.column(idx), kind, digits):
                hasher.absorb(encode_raw(s, characters))
        self.rows += int(batch.num_rows)
        self.batches += 1
        log.debug("unf.ingest_batch", batch=self.batches, rows=int(batch.num_rows), columns=len(self.kinds))

    def finalize(self) -> list[ColumnDigest]:
        if self._finalized:
            raise HasherFinalized("finalize() called twice")
        self._finalized = True
        out: list[ColumnDigest] = []
        for field, kind, hasher in zip(self.schema, self.kinds, self._hashers):
            digest = hasher.finalize()
            out.append(
                ColumnDigest(
                    name=field.name,
                    kind=kind,
                    digest=digest,
                    short_hash=short_hash(digest, self.config.truncation),
                )
            )
        self._hashers = []
        return out
