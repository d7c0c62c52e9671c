from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, localcontext
from types import MappingProxyType
import math
import numbers
import re

import numpy as np

from plotscale.transforms import round_half_up


SUPERSCRIPTS = MappingProxyType(
    {
        "0": "⁰",
        "1": "¹",
        "2": "²",
        "3": "³",
        "4": "⁴",
        "5": "⁵",
        "6": "⁶",
        "7": "⁷",
        "8": "⁸",
        "9": "⁹",
        "+": "⁺",
        "-": "⁻",
        ".": "⋅",
    }
)

SI_PREFIXES = ("y", "z", "a", "f", "p", "n", "µ", "m", "", "k", "M", "G", "T", "P", "E", "Z", "Y")

_EXPONENT_PADDING = re.compile(r"e([+-])0*(\d)")
# Integers at or above this print in exponent form, like floats.
_EXPONENT_FORM_MIN = 10**21


def is_number(value: object) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def to_float(value: object) -> float:
    """float(value), with integers past the float range saturating to +/-inf."""
    try:
        return float(value)  # type: ignore[arg-type]
    except OverflowError:
        return math.inf if value > 0 else -math.inf  # type: ignore[operator]


def number_to_string(value: object) -> str:
    """Shortest display form of a number: 2.0 -> "2", 1e21 -> "1e+21", 1e-7 -> "1e-7".

    Non-finite floats keep Python's spelling ("nan", "inf", "-inf") and
    anything that is not a number goes through `str()`.
    """
    if not is_number(value):
        return str(value)
    if isinstance(value, numbers.Integral) and abs(int(value)) < _EXPONENT_FORM_MIN:
        return str(int(value))
    x = to_float(value)
    if not math.isfinite(x):
        return str(x)
    if x == 0:
        return "0"
    magnitude = abs(x)
    if magnitude >= 1e21 or magnitude < 1e-6:
        return np.format_float_scientific(x, trim="-", exp_digits=1)
    if x.is_integer():
        return str(int(x))
    return np.format_float_positional(x, trim="-")


def to_fixed(value: float, precision: int) -> str:
    """Exactly `precision` decimals, ties rounded away from zero."""
    x = to_float(value)
    if not math.isfinite(x) or abs(x) >= 1e21:
        return number_to_string(x)
    if x == 0:
        x = 0.0
    with localcontext() as ctx:
        ctx.rounding = ROUND_HALF_UP
        return format(Decimal(x), f".{precision}f")


def to_exponential(value: float, precision: int) -> str:
    """`precision` mantissa decimals and an unpadded exponent: 1.500e+3."""
    x = to_float(value)
    if not math.isfinite(x):
        return number_to_string(x)
    if x == 0:
        return ("0." + "0" * precision if precision else "0") + "e+0"
    with localcontext() as ctx:
        ctx.rounding = ROUND_HALF_UP
        out = format(Decimal(x), f".{precision}e")
    return _EXPONENT_PADDING.sub(r"e\1\2", out)


def to_si_prefix(value: float, significant_figures: int) -> str:
    """`significant_figures` digits followed by an SI prefix, trailing zeros kept."""
    x = to_float(value)
    if not math.isfinite(x):
        return number_to_string(x)
    p = max(1, min(21, significant_figures))
    negative = x < 0
    coefficient, exponent = _decimal_parts(abs(x), p)
    prefix_exponent = max(-8, min(8, math.floor(exponent / 3))) * 3
    i = exponent - prefix_exponent + 1
    n = len(coefficient)
    if i == n:
        body = coefficient
    elif i > n:
        body = coefficient + "0" * (i - n)
    elif i > 0:
        body = coefficient[:i] + "." + coefficient[i:]
    else:
        # Smaller than the smallest prefix.
        body = "0." + "0" * (-i) + _decimal_parts(abs(x), max(0, p + i - 1))[0]
    return ("-" if negative else "") + body + SI_PREFIXES[8 + prefix_exponent // 3]


def _decimal_parts(x: float, significant_figures: int) -> tuple[str, int]:
    if significant_figures == 0:
        text = np.format_float_scientific(x, trim="-", exp_digits=1)
    else:
        text = to_exponential(x, significant_figures - 1)
    mantissa, _, exponent = text.partition("e")
    return mantissa.replace(".", ""), int(exponent)


def to_superscript(text: str) -> str:
    return "".join(SUPERSCRIPTS.get(c, c) for c in text)


def fractional_digit_count(value: float) -> int:
    d = Decimal(repr(float(value))).normalize()
    return max(0, -int(d.as_tuple().exponent))


def correct_float_drift(original: float, scaled: float) -> float:
    """Snap `scaled` back onto the decimal grid implied by `original`.

    `original * 100` in binary floating point can land just off the intended
    decimal (0.1 * 100 == 10.000000000000002). Rounding at the power of ten
    given by the original's own fractional digit count removes that error
    without discarding any digit the original actually carried.
    """
    if not math.isfinite(original) or not math.isfinite(scaled):
        return scaled
    digits = fractional_digit_count(original)
    if digits > 300:
        return scaled
    power = 10.0 ** digits
    product = scaled * power
    if not math.isfinite(product):
        return scaled
    return round_half_up(product) / power
