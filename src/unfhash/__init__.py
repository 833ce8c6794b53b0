"""
unfhash: Universal Numeric Fingerprint (UNF v6) for Arrow tables.

This package provides:
- Canonical UNF string forms for float, integer and text values
- Per-column streaming SHA-256 over record batches of any size
- Order-independent combination of column hashes into one dataset fingerprint
- CSV and pandas adapters plus a small CLI (`unfhash hash -i data.csv`)

Usage:
    from unfhash import fingerprint_table

    fp = fingerprint_table(table)
    print(fp)  # UNF:6:...
"""

from __future__ import annotations

from unfhash.canonical import canonicalize, encode_raw
from unfhash.columns import ColumnKind
from unfhash.config import UnfConfig, UnfConfigBuilder, UnfVersion
from unfhash.errors import (
    EmptyDataset,
    HasherFinalized,
    InvalidConfiguration,
    SchemaMismatch,
    UnfError,
    UnsupportedColumnType,
)
from unfhash.fingerprint import (
    Fingerprint,
    combine_short_hashes,
    compute_fingerprint,
    fingerprint_dataframe,
    fingerprint_table,
)
from unfhash.hasher import ColumnDigest, ColumnHasher, UnfHashBuilder

__version__ = "0.1.0"

__all__ = [
    "ColumnDigest",
    "ColumnHasher",
    "ColumnKind",
    "EmptyDataset",
    "Fingerprint",
    "HasherFinalized",
    "InvalidConfiguration",
    "SchemaMismatch",
    "UnfConfig",
    "UnfConfigBuilder",
    "UnfError",
    "UnfHashBuilder",
    "UnfVersion",
    "UnsupportedColumnType",
    "canonicalize",
    "combine_short_hashes",
    "compute_fingerprint",
    "encode_raw",
    "fingerprint_dataframe",
    "fingerprint_table",
]
