from __future__ import annotations

from decimal import Decimal
import math
from typing import Sequence

import numpy as np

from plotscale.formatters import Formatter, exponential
from plotscale.numeric_text import number_to_string, to_fixed
from plotscale.quantitative import QuantitativeScale


_LARGE_TICK = 1e6
_SMALL_TICK = 1e-6
_format_exponential = exponential(3)


def tick_labels(scale: QuantitativeScale, formatter: Formatter | None = None) -> list[tuple[float, str]]:
    """Current ticks of `scale` paired with their display strings.

    Without a formatter, every label gets the decimals implied by the finest
    spacing between ticks, so 1.5, 2, 2.5 stay aligned.
    """
    ticks = scale.ticks()
    fmt = formatter if formatter is not None else step_formatter(ticks)
    return [(tick, fmt(tick)) for tick in ticks]


def step_formatter(ticks: Sequence[float]) -> Formatter:
    step = infer_step(np.asarray(ticks, dtype=np.float64))

    def format_step_tick(value: float) -> str:
        return format_tick(value, step=step)

    return format_step_tick


def format_tick(value: float, *, step: float | None = None) -> str:
    if not math.isfinite(value):
        return number_to_string(value)
    if step is not None and math.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    abs_v = abs(value)
    if abs_v != 0 and (abs_v >= _LARGE_TICK or abs_v < _SMALL_TICK):
        return _format_exponential(value)
    decimals = decimals_from_step(step) if step is not None else 6
    out = to_fixed(value, decimals)
    # Integer labels such as 30 keep their zeros.
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def infer_step(values: np.ndarray) -> float | None:
    finite = values[np.isfinite(values)]
    if finite.size < 2:
        return None
    uniq = np.unique(finite)
    if uniq.size < 2:
        return None
    diffs = np.diff(uniq)
    span = float(uniq[-1] - uniq[0])
    eps = max(1e-12, span * 1e-9)
    significant = diffs[diffs > eps]
    if significant.size == 0:
        return None
    return float(np.min(significant))


def decimals_from_step(step: float) -> int:
    if step <= 0 or not math.isfinite(step):
        return 6
    d = Decimal(repr(float(step))).normalize()
    exp = d.as_tuple().exponent
    decimals = max(0, -int(exp))
    return min(12, decimals)
