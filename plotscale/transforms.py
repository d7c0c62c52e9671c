from __future__ import annotations

from abc import ABC, abstractmethod
import math
from typing import Sequence

import numpy as np


E10 = math.sqrt(50.0)
E5 = math.sqrt(10.0)
E2 = math.sqrt(2.0)

_NICE_MAX_ITERATIONS = 10
# (i1, i2, inc) with i2 < i1: no ticks, and a zero increment stops nice_linear.
_EMPTY_TICK_SPEC = (0, -1, 0.0)
# log_base() results this close to an integer are treated as exact powers.
_EXPONENT_SNAP = 1e-12


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward +infinity."""
    return int(math.floor(value + 0.5))


def _tick_spec(start: float, stop: float, count: float) -> tuple[int, int, float]:
    step = (stop - start) / max(0.0, count)
    if not (math.isfinite(step) and step > 0):
        return _EMPTY_TICK_SPEC
    power = math.floor(math.log10(step))
    magnitude = math.pow(10.0, power)
    if magnitude == 0:
        return _EMPTY_TICK_SPEC
    error = step / magnitude
    if error >= E10:
        factor = 10.0
    elif error >= E5:
        factor = 5.0
    elif error >= E2:
        factor = 2.0
    else:
        factor = 1.0

    if power < 0:
        try:
            inc = math.pow(10.0, -power) / factor
        except OverflowError:
            # Spacing below ~1e-308 has no representable reciprocal.
            return _EMPTY_TICK_SPEC
        if not (math.isfinite(start * inc) and math.isfinite(stop * inc)):
            return _EMPTY_TICK_SPEC
        i1 = round_half_up(start * inc)
        i2 = round_half_up(stop * inc)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        inc = -inc
    else:
        inc = math.pow(10.0, power) * factor
        if not math.isfinite(inc):
            return _EMPTY_TICK_SPEC
        i1 = round_half_up(start / inc)
        i2 = round_half_up(stop / inc)
        if i1 * inc < start:
            i1 += 1
        if i2 * inc > stop:
            i2 -= 1

    if i2 < i1 and 0.5 <= count < 2:
        return _tick_spec(start, stop, count * 2)
    return i1, i2, inc


def linear_ticks(start: float, stop: float, count: float) -> list[float]:
    """Evenly spaced round ticks covering [start, stop] at roughly `count` density.

    Steps are 1, 2 or 5 times a power of ten. Ticks are generated from integer
    indices so repeated addition never accumulates drift. A reversed interval
    yields descending ticks.
    """
    start = float(start)
    stop = float(stop)
    if not count > 0 or not math.isfinite(start) or not math.isfinite(stop):
        return []
    if start == stop:
        return [start]
    reverse = stop < start
    i1, i2, inc = _tick_spec(stop, start, count) if reverse else _tick_spec(start, stop, count)
    if not i2 >= i1:
        return []

    n = i2 - i1 + 1
    steps = np.arange(n, dtype=np.float64)
    indices = (i2 - steps) if reverse else (i1 + steps)
    ticks = indices / -inc if inc < 0 else indices * inc
    return [float(v) for v in ticks]


def tick_increment(start: float, stop: float, count: float) -> float:
    """Signed tick increment; a negative value `-k` means a step of `1 / k`."""
    return _tick_spec(float(start), float(stop), count)[2]


def tick_step(start: float, stop: float, count: float) -> float:
    reverse = stop < start
    inc = tick_increment(stop, start, count) if reverse else tick_increment(start, stop, count)
    step = 1.0 / -inc if inc < 0 else inc
    return -step if reverse else step


def nice_linear(domain: Sequence[float], count: float = 10) -> tuple[float, float]:
    d0, d1 = float(domain[0]), float(domain[1])
    if d0 == d1 or not math.isfinite(d0) or not math.isfinite(d1) or not count > 0:
        return (d0, d1)
    reverse = d1 < d0
    start, stop = (d1, d0) if reverse else (d0, d1)
    prestep: float | None = None
    for _ in range(_NICE_MAX_ITERATIONS):
        step = tick_increment(start, stop, count)
        if step == prestep:
            return (stop, start) if reverse else (start, stop)
        if step > 0:
            start = math.floor(start / step) * step
            stop = math.ceil(stop / step) * step
        elif step < 0:
            start = math.ceil(start * step) / step
            stop = math.floor(stop * step) / step
        else:
            break
        prestep = step
    return (d0, d1)


def log_base(value: float, base: float) -> float:
    if value <= 0:
        return -math.inf if value == 0 else math.nan
    if base == 10:
        exponent = math.log10(value)
    elif base == 2:
        exponent = math.log2(value)
    elif base == math.e:
        exponent = math.log(value)
    else:
        exponent = math.log(value) / math.log(base)
    nearest = round(exponent)
    if abs(exponent - nearest) <= _EXPONENT_SNAP * max(1.0, abs(exponent)):
        return float(nearest)
    return exponent


def pow_base(exponent: float, base: float) -> float:
    if not math.isfinite(exponent):
        return 0.0 if exponent < 0 else exponent
    if base == 10 and exponent == math.floor(exponent):
        # "1eN" parses to the closest double, unlike repeated multiplication.
        return float(f"1e{int(exponent)}")
    try:
        if base == math.e:
            return math.exp(exponent)
        return math.pow(base, exponent)
    except OverflowError:
        return math.inf


class ContinuousTransform(ABC):
    """Interpolating domain -> range mapping through a monotonic forward function."""

    def __init__(
        self,
        domain: tuple[float, float] = (0.0, 1.0),
        output_range: tuple[float, float] = (0.0, 1.0),
    ) -> None:
        self._domain = (float(domain[0]), float(domain[1]))
        self._range = (float(output_range[0]), float(output_range[1]))

    @abstractmethod
    def forward(self, value: float) -> float:
        raise NotImplementedError

    @abstractmethod
    def backward(self, value: float) -> float:
        raise NotImplementedError

    @abstractmethod
    def ticks(self, count: float = 10) -> list[float]:
        raise NotImplementedError

    @abstractmethod
    def nice(self, count: float = 10) -> tuple[float, float]:
        raise NotImplementedError

    @abstractmethod
    def copy(self) -> "ContinuousTransform":
        raise NotImplementedError

    def domain(self) -> tuple[float, float]:
        return self._domain

    def set_domain(self, domain: Sequence[float]) -> None:
        self._domain = (float(domain[0]), float(domain[1]))

    def range(self) -> tuple[float, float]:
        return self._range

    def set_range(self, output_range: Sequence[float]) -> None:
        self._range = (float(output_range[0]), float(output_range[1]))

    def scale(self, value: float) -> float:
        u0, u1 = self.forward(self._domain[0]), self.forward(self._domain[1])
        r0, r1 = self._range
        t = _normalize(u0, u1, self.forward(float(value)))
        return r0 + t * (r1 - r0)

    def invert(self, value: float) -> float:
        u0, u1 = self.forward(self._domain[0]), self.forward(self._domain[1])
        r0, r1 = self._range
        t = _normalize(r0, r1, float(value))
        return self.backward(u0 + t * (u1 - u0))

    def scale_array(self, values: object) -> np.ndarray:
        arr = np.asarray(values, dtype=np.float64)
        u0, u1 = self.forward(self._domain[0]), self.forward(self._domain[1])
        r0, r1 = self._range
        u = self._forward_array(arr)
        if u1 == u0:
            t = np.full_like(u, 0.5)
        else:
            t = (u - u0) / (u1 - u0)
        return r0 + t * (r1 - r0)

    def invert_array(self, values: object) -> np.ndarray:
        arr = np.asarray(values, dtype=np.float64)
        u0, u1 = self.forward(self._domain[0]), self.forward(self._domain[1])
        r0, r1 = self._range
        if r1 == r0:
            t = np.full_like(arr, 0.5)
        else:
            t = (arr - r0) / (r1 - r0)
        return self._backward_array(u0 + t * (u1 - u0))

    def _forward_array(self, values: np.ndarray) -> np.ndarray:
        return values

    def _backward_array(self, values: np.ndarray) -> np.ndarray:
        return values


class LinearTransform(ContinuousTransform):
    def forward(self, value: float) -> float:
        return value

    def backward(self, value: float) -> float:
        return value

    def ticks(self, count: float = 10) -> list[float]:
        return linear_ticks(self._domain[0], self._domain[1], count)

    def nice(self, count: float = 10) -> tuple[float, float]:
        return nice_linear(self._domain, count)

    def copy(self) -> "LinearTransform":
        return LinearTransform(domain=self._domain, output_range=self._range)


class LogTransform(ContinuousTransform):
    """Logarithmic interpolation; the domain must stay strictly positive."""

    def __init__(
        self,
        domain: tuple[float, float] = (1.0, 10.0),
        output_range: tuple[float, float] = (0.0, 1.0),
        *,
        base: float = 10.0,
    ) -> None:
        super().__init__(domain=domain, output_range=output_range)
        self._base = float(base)

    @property
    def base(self) -> float:
        return self._base

    def forward(self, value: float) -> float:
        if value <= 0:
            return -math.inf if value == 0 else math.nan
        return math.log(value)

    def backward(self, value: float) -> float:
        try:
            return math.exp(value)
        except OverflowError:
            return math.inf

    def _forward_array(self, values: np.ndarray) -> np.ndarray:
        out = np.full_like(values, np.nan)
        positive = values > 0
        out[positive] = np.log(values[positive])
        out[values == 0] = -np.inf
        return out

    def _backward_array(self, values: np.ndarray) -> np.ndarray:
        return np.exp(values)

    def logs(self, value: float) -> float:
        return log_base(value, self._base)

    def pows(self, exponent: float) -> float:
        return pow_base(exponent, self._base)

    def ticks(self, count: float = 10) -> list[float]:
        u, v = self._domain
        reverse = v < u
        if reverse:
            u, v = v, u
        i = self.logs(u)
        j = self.logs(v)
        if self._base % 1 == 0 and j - i < count:
            lo = math.floor(i)
            hi = math.ceil(j)
            ticks: list[float] = []
            for exponent in range(lo, hi + 1):
                for k in range(1, int(self._base)):
                    t = k / self.pows(-exponent) if exponent < 0 else k * self.pows(exponent)
                    if t < u:
                        continue
                    if t > v:
                        break
                    ticks.append(t)
            if len(ticks) * 2 < count:
                ticks = linear_ticks(u, v, count)
        else:
            ticks = [self.pows(e) for e in linear_ticks(i, j, min(j - i, count))]
        return ticks[::-1] if reverse else ticks

    def nice(self, count: float = 10) -> tuple[float, float]:
        d0, d1 = self._domain
        lo, hi = min(d0, d1), max(d0, d1)
        # log_base() snaps near-integer exponents, so a bound a hair past a
        # power can land on that power; step one further to keep it covered.
        lo_exp = math.floor(self.logs(lo))
        if self.pows(lo_exp) > lo:
            lo_exp -= 1
        hi_exp = math.ceil(self.logs(hi))
        if self.pows(hi_exp) < hi:
            hi_exp += 1
        nice_lo, nice_hi = self.pows(lo_exp), self.pows(hi_exp)
        # Powers beyond the float range leave that bound as it was.
        if not nice_lo > 0:
            nice_lo = lo
        if not math.isfinite(nice_hi):
            nice_hi = hi
        return (nice_hi, nice_lo) if d1 < d0 else (nice_lo, nice_hi)

    def copy(self) -> "LogTransform":
        return LogTransform(domain=self._domain, output_range=self._range, base=self._base)


def _normalize(a: float, b: float, x: float) -> float:
    if b == a:
        return 0.5
    return (x - a) / (b - a)
