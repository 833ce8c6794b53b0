"""
Error types raised by the fingerprint pipeline.

Every failure is structural (bad schema, bad config, unsupported input), so
nothing here is retried: callers get the exception and no partial result.
"""

from __future__ import annotations

from typing import Any


class UnfError(Exception):
    """Base class for all unfhash errors."""


class UnsupportedColumnType(UnfError):
    """A column's declared type has no canonicalization rule."""

    def __init__(self, column: str, arrow_type: Any) -> None:
        self.column = str(column)
        self.arrow_type = arrow_type
        super().__init__(f"Unsupported column type for {self.column!r}: {arrow_type}")


class SchemaMismatch(UnfError):
    """A batch disagrees with the schema the builder was created with."""

    def __init__(self, expected: list[tuple[str, str]], actual: list[tuple[str, str]]) -> None:
        self.expected = list(expected)
        self.actual = list(actual)
        super().__init__(f"Batch schema does not match: expected={self.expected} actual={self.actual}")


class InvalidConfiguration(UnfError, ValueError):
    """Configuration values out of range (rejected at build time)."""


class EmptyDataset(UnfError):
    """Dataset has no columns or no rows."""


class HasherFinalized(UnfError):
    """A hasher or builder was used after finalize()."""
