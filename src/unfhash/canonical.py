"""
Canonical UNF string forms and their raw byte encoding.

Numbers are written in a fixed exponential notation:

    <sign><digit>.<digits>e<exponent>

- the sign is always explicit (`+` / `-`)
- trailing zeros of the mantissa are dropped; a lone digit keeps its point (`+1.e+1`)
- a zero exponent is a bare `e+`, otherwise `e+N` / `e-N` without leading zeros

Floats are first rounded to `digits` significant digits. Integers are exact.
Text passes through unchanged. NaN and missing numbers are `+nan`; missing
text is the empty string.
"""

from __future__ import annotations

import math
from functools import partial
from typing import Any, Callable, Iterator

import numpy as np
import pyarrow as pa

from unfhash.columns import ColumnKind
from unfhash.errors import UnsupportedColumnType

NAN_TOKEN = "+nan"
POS_INF_TOKEN = "+inf"
NEG_INF_TOKEN = "-inf"

# Raw byte terminator appended to every canonical string.
TERMINATOR = "\n\x00"

# Largest power of ten applied in one multiplication/division (10**300 is finite).
_MAX_POW_STEP = 300


def _exp_form(negative: bool, digits: str, exponent: int) -> str:
    sign = "-" if negative else "+"
    if exponent == 0:
        exp = "+"
    elif exponent > 0:
        exp = f"+{exponent}"
    else:
        exp = str(exponent)
    return f"{sign}{digits[0]}.{digits[1:]}e{exp}"


def _round_half_away(x: float) -> float:
    # a - floor(a) is exact, so only one rounding happens.
    a = abs(x)
    f = math.floor(a)
    if a - f >= 0.5:
        f += 1
    return math.copysign(f, x)


def _scale(x: float, power: int) -> float:
    """x * 10**power, split into steps so no factor overflows."""
    while power > _MAX_POW_STEP:
        x *= 10.0**_MAX_POW_STEP
        power -= _MAX_POW_STEP
    while power < -_MAX_POW_STEP:
        x /= 10.0**_MAX_POW_STEP
        power += _MAX_POW_STEP
    if power >= 0:
        return x * 10.0**power
    return x / 10.0**-power


def round_significant(x: float, digits: int) -> float:
    """
    Round a finite float to `digits` significant decimal digits.

    The value is scaled by 10**(digits - 1 - floor(log10|x|)), rounded half
    away from zero, and scaled back.
    """
    if x == 0.0 or not math.isfinite(x):
        return x
    e = math.floor(math.log10(abs(x)))
    power = int(digits) - 1 - e
    scaled = _scale(x, power)
    if not math.isfinite(scaled):
        return x
    out = _scale(_round_half_away(scaled), -power)
    # Rounding up at the top of the double range overflows; keep the input.
    return out if math.isfinite(out) else x


def canonical_float(value: Any, digits: int) -> str:
    if value is None:
        return NAN_TOKEN
    x = float(value)
    if math.isnan(x):
        return NAN_TOKEN
    if math.isinf(x):
        return POS_INF_TOKEN if x > 0 else NEG_INF_TOKEN
    if x == 0.0:
        return _exp_form(math.copysign(1.0, x) < 0, "0", 0)

    y = round_significant(x, digits)
    # Shortest round-trip digits of the rounded double.
    sci = np.format_float_scientific(abs(y), unique=True, trim="-", exp_digits=1)
    mantissa, exp = sci.split("e")
    return _exp_form(y < 0, mantissa.replace(".", ""), int(exp))


def canonical_int(value: Any) -> str:
    if value is None:
        return NAN_TOKEN
    n = int(value)
    s = str(abs(n))
    return _exp_form(n < 0, s.rstrip("0") or "0", len(s) - 1)


def canonical_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def rule_for(kind: ColumnKind, digits: int) -> Callable[[Any], str]:
    """The canonicalization rule for a column kind (the single dispatch point)."""
    if not isinstance(kind, ColumnKind):
        raise UnsupportedColumnType("<value>", kind)
    if kind.is_float:
        return partial(canonical_float, digits=int(digits))
    if kind.is_integer:
        return canonical_int
    return canonical_text


def canonicalize(value: Any, kind: ColumnKind, digits: int = 7) -> str:
    """Canonical UNF string for one value of the given column kind."""
    return rule_for(kind, digits)(value)


def canonical_column(values: pa.Array | pa.ChunkedArray, kind: ColumnKind, digits: int) -> Iterator[str]:
    """Lazily yield the canonical string of every value, nulls included, in row order."""
    rule = rule_for(kind, digits)
    for v in values:
        yield rule(v.as_py())


def encode_raw(canonical: str, characters: int) -> bytes:
    """
    Truncate to `characters` code points, append "\\n\\0", UTF-8 encode.
    """
    return (canonical[: int(characters)] + TERMINATOR).encode("utf-8")
