from __future__ import annotations

import numpy as np
import pandas as pd
import pyarrow as pa
import pytest

from unfhash import (
    EmptyDataset,
    UnfConfigBuilder,
    UnfVersion,
    UnsupportedColumnType,
    combine_short_hashes,
    compute_fingerprint,
    fingerprint_dataframe,
    fingerprint_table,
)

FLOAT32_DATASET_HASH = "BpeZgr7Q0Gs93IE8flkCBw=="
FLOAT32_DATASET_DIGEST = "06979982bed0d06b3ddc813c7e590207c22a861ab2d081ca02c644f4ca7affd0"
TWO_COLUMN_DATASET_HASH = "kJMIb+Y+G9mjTjUkDohp0g=="
THREE_COLUMN_DATASET_HASH = "k/BdlVc0LJOxMte/xBQ94w=="


def test_reference_float32_dataset(float32_table: pa.Table) -> None:
    fp = fingerprint_table(float32_table)
    assert fp.columns[0].short_hash == "aWgJoh/Y7/Qo6uK9zs7ovQ=="
    assert fp.short_hash == FLOAT32_DATASET_HASH
    assert fp.digest.hex() == FLOAT32_DATASET_DIGEST
    assert fp.version is UnfVersion.SIX
    assert str(fp) == f"UNF:6:{FLOAT32_DATASET_HASH}"


def test_reference_mixed_dataset(mixed_table: pa.Table) -> None:
    assert fingerprint_table(mixed_table).short_hash == THREE_COLUMN_DATASET_HASH
    assert fingerprint_table(mixed_table.select(["x", "n"])).short_hash == TWO_COLUMN_DATASET_HASH


def test_deterministic(mixed_table: pa.Table) -> None:
    a = fingerprint_table(mixed_table)
    b = fingerprint_table(mixed_table)
    assert (a.digest, a.short_hash) == (b.digest, b.short_hash)


def test_batch_split_invariance(mixed_table: pa.Table) -> None:
    whole = fingerprint_table(mixed_table)
    batches = [mixed_table.slice(i, 1).combine_chunks().to_batches()[0] for i in range(mixed_table.num_rows)]
    split = compute_fingerprint(mixed_table.schema, batches)
    assert split.digest == whole.digest
    assert split.short_hash == whole.short_hash


def test_column_order_invariance(mixed_table: pa.Table) -> None:
    base = fingerprint_table(mixed_table)
    permuted = fingerprint_table(mixed_table.select(["t", "x", "n"]))
    assert permuted.short_hash == base.short_hash
    # Per-column hashes follow their columns, not positions.
    assert {c.name: c.short_hash for c in permuted.columns} == {c.name: c.short_hash for c in base.columns}


def test_row_order_changes_fingerprint(float32_table: pa.Table) -> None:
    reversed_rows = pa.table({"x": pa.array([4.0, 3.0, 2.0, 1.0], type=pa.float32())})
    assert fingerprint_table(reversed_rows).short_hash != fingerprint_table(float32_table).short_hash


def test_content_and_column_count_matter(float32_table: pa.Table) -> None:
    base = fingerprint_table(float32_table).short_hash
    changed = pa.table({"x": pa.array([1.0, 2.0, 3.0, 5.0], type=pa.float32())})
    duplicated = pa.table({"x": float32_table.column("x"), "x2": float32_table.column("x")})
    assert fingerprint_table(changed).short_hash != base
    assert fingerprint_table(duplicated).short_hash != base


def test_rounding_hides_noise_below_digits() -> None:
    a = pa.table({"x": pa.array([0.107352613238618, 2.0])})
    b = pa.table({"x": pa.array([0.10735261, 2.0000000001])})
    assert fingerprint_table(a).short_hash == fingerprint_table(b).short_hash
    cfg = UnfConfigBuilder().digits(9).build()
    assert fingerprint_table(a, cfg).short_hash != fingerprint_table(b, cfg).short_hash


def test_combiner_sorts_short_hashes() -> None:
    cfg = UnfConfigBuilder().build()
    hashes = ["aWgJoh/Y7/Qo6uK9zs7ovQ==", "F4m1M5OLQexuyAMh9tq3Pw=="]
    assert combine_short_hashes(hashes, cfg) == combine_short_hashes(list(reversed(hashes)), cfg)
    assert combine_short_hashes(hashes, cfg)[1] == TWO_COLUMN_DATASET_HASH


def test_non_default_parameters_in_label(float32_table: pa.Table) -> None:
    cfg = UnfConfigBuilder().digits(9).truncation(256).build()
    fp = fingerprint_table(float32_table, cfg)
    assert str(fp) == f"UNF:6:N9,H256:{fp.short_hash}"
    assert len(fp.short_hash) == 44
    payload = fp.to_dict()
    assert payload["config"] == {"digits": 9, "characters": 128, "truncation": 256, "version": "6"}
    assert payload["columns"][0]["name"] == "x"


def test_zero_rows_is_an_error(float32_table: pa.Table) -> None:
    with pytest.raises(EmptyDataset):
        compute_fingerprint(float32_table.schema, [])
    with pytest.raises(EmptyDataset):
        fingerprint_table(float32_table.slice(0, 0))


def test_temporal_column_is_rejected() -> None:
    table = pa.table({"when": pa.array([0, 1], type=pa.timestamp("s")), "x": pa.array([1.0, 2.0])})
    with pytest.raises(UnsupportedColumnType):
        fingerprint_table(table)


def test_dataframe_matches_table(mixed_table: pa.Table) -> None:
    df = pd.DataFrame(
        {
            "x": np.array([1.0, 2.0, 3.0, 4.0], dtype="float32"),
            "n": np.array([10, -3, 0, 1], dtype="int64"),
            "t": ["a", None, "café", "+nan"],
        },
        index=[7, 8, 9, 10],
    )
    assert fingerprint_dataframe(df).short_hash == fingerprint_table(mixed_table).short_hash
