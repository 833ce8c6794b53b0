from __future__ import annotations

from pathlib import Path

import pyarrow as pa
import pytest


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("UNFHASH_DISABLE_DOTENV", "true")
    for key in ("UNFHASH_DIGITS", "UNFHASH_CHARACTERS", "UNFHASH_TRUNCATION", "UNFHASH_INFERENCE_ROWS"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def float32_table() -> pa.Table:
    """Single float32 column [1, 2, 3, 4]."""
    return pa.table({"x": pa.array([1.0, 2.0, 3.0, 4.0], type=pa.float32())})


@pytest.fixture()
def mixed_table() -> pa.Table:
    return pa.table(
        {
            "x": pa.array([1.0, 2.0, 3.0, 4.0], type=pa.float32()),
            "n": pa.array([10, -3, 0, 1], type=pa.int64()),
            "t": pa.array(["a", None, "café", "+nan"], type=pa.string()),
        }
    )


@pytest.fixture()
def write_csv(tmp_path: Path):
    def _write(text: str, name: str = "data.csv") -> Path:
        p = tmp_path / name
        p.write_text(text, encoding="utf-8")
        return p

    return _write
