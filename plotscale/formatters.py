from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
import datetime as dt
import math
import re
from typing import Any, Callable

from plotscale.config import (
    DEFAULT_CURRENCY_PRECISION,
    DEFAULT_CURRENCY_PREFIX,
    DEFAULT_CURRENCY_SYMBOL,
    DEFAULT_PERCENTAGE_PRECISION,
    DEFAULT_PRECISION,
    DEFAULT_USE_UTC,
    validate_precision,
)
from plotscale.errors import ConfigurationError
from plotscale.numeric_text import (
    correct_float_drift,
    is_number,
    number_to_string,
    to_exponential,
    to_fixed,
    to_float,
    to_si_prefix,
    to_superscript,
)
from plotscale.transforms import round_half_up


Formatter = Callable[[Any], str]

SHORT_SCALE_SUFFIXES = "KMBTQ"
SHORT_SCALE_MAX = 1000.0 ** (len(SHORT_SCALE_SUFFIXES) + 1)

_MILLISECONDS_DIRECTIVE = re.compile(r"%%|%L")


@dataclass(frozen=True)
class PredicatedFormat:
    specifier: str
    predicate: Callable[[dt.datetime], bool]


# Finest to coarsest; the first candidate whose predicate holds wins.
MULTI_TIME_FORMATS: tuple[PredicatedFormat, ...] = (
    PredicatedFormat(".%L", lambda d: d.microsecond // 1000 != 0),
    PredicatedFormat(":%S", lambda d: d.second != 0),
    PredicatedFormat("%I:%M", lambda d: d.minute != 0),
    PredicatedFormat("%I %p", lambda d: d.hour != 0),
    PredicatedFormat("%a %d", lambda d: d.isoweekday() % 7 != 0 and d.day != 1),
    PredicatedFormat("%b %d", lambda d: d.day != 1),
    PredicatedFormat("%b", lambda d: d.month != 1),
)
MULTI_TIME_FALLBACK = "%Y"


def fixed(precision: int = DEFAULT_PRECISION) -> Formatter:
    """Exactly `precision` decimal places."""
    places = validate_precision(precision)

    def format_fixed(value: Any) -> str:
        return to_fixed(value, places)

    return format_fixed


def general(max_number_of_decimal_places: int = DEFAULT_PRECISION) -> Formatter:
    """At most `max_number_of_decimal_places` decimals, trailing zeros dropped.

    Anything that is not a number is stringified unchanged.
    """
    places = validate_precision(max_number_of_decimal_places)
    multiplier = 10.0**places

    def format_general(value: Any) -> str:
        if not is_number(value):
            return str(value)
        return number_to_string(_round_to_places(to_float(value), multiplier))

    return format_general


def exponential(max_number_of_decimal_places: int = DEFAULT_PRECISION) -> Formatter:
    """Human readable scientific notation: 2.5×10³, 10⁻², -10³.

    Zero, None, NaN and infinities are stringified as they are. Values whose
    exponent is 0 get no ×10⁰ suffix, and a mantissa that rounds to exactly 1
    is left out.
    """
    places = validate_precision(max_number_of_decimal_places)
    multiplier = 10.0**places

    def format_exponential(value: Any) -> str:
        if not is_number(value):
            return str(value)
        x = to_float(value)
        if x == 0 or not math.isfinite(x):
            return number_to_string(value)
        sign = -1 if x < 0 else 1
        exponent = math.floor(math.log10(sign * x))
        mantissa = float(Decimal(sign * x).scaleb(-exponent))
        rounded = _round_to_places(mantissa, multiplier)
        if exponent == 0:
            return number_to_string(sign * rounded)
        if rounded == 1:
            return ("10" if sign > 0 else "-10") + to_superscript(str(exponent))
        return number_to_string(sign * rounded) + "×10" + to_superscript(str(exponent))

    return format_exponential


def identity() -> Formatter:
    return number_to_string


def percentage(precision: int = DEFAULT_PERCENTAGE_PRECISION) -> Formatter:
    """Multiplies by 100 and appends "%". Non-numbers render as "nan%"."""
    format_fixed = fixed(precision)

    def format_percentage(value: Any) -> str:
        x = to_float(value) if is_number(value) else math.nan
        return format_fixed(correct_float_drift(x, x * 100)) + "%"

    return format_percentage


def currency(
    precision: int = DEFAULT_CURRENCY_PRECISION,
    symbol: str = DEFAULT_CURRENCY_SYMBOL,
    prefix: bool = DEFAULT_CURRENCY_PREFIX,
) -> Formatter:
    """Fixed-precision money; the minus sign goes outside the symbol (-$5.00)."""
    format_fixed = fixed(precision)
    if not isinstance(symbol, str):
        raise ConfigurationError(f"currency symbol must be a string, got {symbol!r}")

    def format_currency(value: Any) -> str:
        formatted = format_fixed(abs(value))
        if formatted != "":
            formatted = symbol + formatted if prefix else formatted + symbol
            if value < 0:
                formatted = "-" + formatted
        return formatted

    return format_currency


def si_suffix(number_of_significant_figures: int = DEFAULT_PRECISION) -> Formatter:
    """Significant figures plus an SI prefix (1.50k, 250µ)."""
    figures = validate_precision(number_of_significant_figures)

    def format_si_suffix(value: Any) -> str:
        return to_si_prefix(value, figures)

    return format_si_suffix


def short_scale(precision: int = DEFAULT_PRECISION) -> Formatter:
    """Abbreviates with K, M, B, T and Q (10³ through 10¹⁵).

    Magnitudes outside (10^-precision, 10^18), zero excepted, use scientific
    notation instead of producing very long decimal strings. Past the Q tier
    (values that would display as 1000Q) scientific notation is used as well.
    """
    places = validate_precision(precision)
    min_value = 10.0**-places
    last = len(SHORT_SCALE_SUFFIXES) - 1

    def format_short_scale(value: Any) -> str:
        num = to_float(value)
        abs_num = abs(num)
        if (abs_num < min_value or abs_num >= SHORT_SCALE_MAX) and abs_num != 0:
            return to_exponential(num, places)
        idx = -1
        while abs_num >= 1000.0 ** (idx + 2) and idx < last:
            idx += 1
        if idx == -1:
            output = to_fixed(num, places)
        else:
            output = to_fixed(num / 1000.0 ** (idx + 1), places) + SHORT_SCALE_SUFFIXES[idx]
        # Rounding can carry the mantissa up to 1000; move to the next tier.
        if (num > 0 and output[:4] == "1000") or (num < 0 and output[:5] == "-1000"):
            if idx < last:
                idx += 1
                output = to_fixed(num / 1000.0 ** (idx + 1), places) + SHORT_SCALE_SUFFIXES[idx]
            else:
                output = to_exponential(num, places)
        return output

    return format_short_scale


def multi_time() -> Formatter:
    """Formats each date at the finest granularity actually present in it."""

    def format_multi_time(value: Any) -> str:
        moment = _to_datetime(value, use_utc=False)
        for candidate in MULTI_TIME_FORMATS:
            if candidate.predicate(moment):
                return _strftime(moment, candidate.specifier)
        return _strftime(moment, MULTI_TIME_FALLBACK)

    return format_multi_time


def time(specifier: str, use_utc: bool = DEFAULT_USE_UTC) -> Formatter:
    """strftime-style formatting; `%L` is the zero-padded millisecond."""
    if not isinstance(specifier, str):
        raise ConfigurationError(f"time specifier must be a string, got {specifier!r}")

    def format_time(value: Any) -> str:
        return _strftime(_to_datetime(value, use_utc=use_utc), specifier)

    return format_time


def _round_to_places(value: float, multiplier: float) -> float:
    scaled = value * multiplier
    if not math.isfinite(scaled):
        return value
    return round_half_up(scaled) / multiplier


def _to_datetime(value: Any, *, use_utc: bool) -> dt.datetime:
    # Naive datetimes are already in the requested zone; numbers are epoch milliseconds.
    if isinstance(value, dt.datetime):
        moment = value
    elif isinstance(value, dt.date):
        moment = dt.datetime(value.year, value.month, value.day)
    elif is_number(value):
        moment = dt.datetime.fromtimestamp(float(value) / 1000.0, tz=dt.timezone.utc)
    else:
        raise TypeError(f"cannot format {type(value).__name__} as a time")
    if moment.tzinfo is None:
        return moment
    if use_utc:
        return moment.astimezone(dt.timezone.utc)
    return moment.astimezone()


def _strftime(moment: dt.datetime, specifier: str) -> str:
    millis = f"{moment.microsecond // 1000:03d}"
    expanded = _MILLISECONDS_DIRECTIVE.sub(lambda m: "%%" if m.group(0) == "%%" else millis, specifier)
    return moment.strftime(expanded)
