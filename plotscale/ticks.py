from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Callable, Protocol, Sequence, runtime_checkable

from plotscale.config import DEFAULT_MINIMUM_NUMBER_OF_TICKS, DEFAULT_TICK_COUNT, validate_tick_count
from plotscale.transforms import log_base, pow_base

if TYPE_CHECKING:
    from plotscale.quantitative import QuantitativeScale


LOGGER = logging.getLogger(__name__)


@runtime_checkable
class TickGenerator(Protocol):
    def generate(self, scale: "QuantitativeScale") -> list[float]:
        ...


class LinearTickGenerator:
    """Round linear ticks at a fixed density."""

    def __init__(self, count: int = DEFAULT_TICK_COUNT) -> None:
        self._count = validate_tick_count(count)

    @property
    def count(self) -> int:
        return self._count

    def generate(self, scale: "QuantitativeScale") -> list[float]:
        ticks = scale.native_ticks(self._count)
        if not ticks:
            lo, hi = scale.domain()
            LOGGER.debug("linear ticks: no round step for domain (%g, %g), using its bounds", lo, hi)
            return [lo, hi]
        return ticks


class LogTickGenerator:
    """Power-of-base ticks, with a denser fallback for narrow domains.

    Collects base**i for i from floor(log(min)) up to, but excluding,
    ceil(log(max)). When floor/ceil leave nothing to step upward (inverted
    domains) the exponents are walked downward instead. If that yields fewer
    than `minimum_number_of_ticks` values, the scale's native ticks at that
    density are returned instead.
    """

    def __init__(self, base: float, minimum_number_of_ticks: int = DEFAULT_MINIMUM_NUMBER_OF_TICKS) -> None:
        self._base = float(base)
        self._minimum_number_of_ticks = validate_tick_count(minimum_number_of_ticks)

    @property
    def base(self) -> float:
        return self._base

    @property
    def minimum_number_of_ticks(self) -> int:
        return self._minimum_number_of_ticks

    def generate(self, scale: "QuantitativeScale") -> list[float]:
        lo, hi = scale.domain()
        i = math.floor(log_base(lo, self._base))
        j = math.ceil(log_base(hi, self._base))
        step = 1 if i < j else -1
        ticks = [pow_base(e, self._base) for e in range(i, j, step)]
        if len(ticks) < self._minimum_number_of_ticks:
            LOGGER.debug(
                "log ticks: %d power ticks for domain (%g, %g), using %d native ticks",
                len(ticks),
                lo,
                hi,
                self._minimum_number_of_ticks,
            )
            ticks = scale.native_ticks(self._minimum_number_of_ticks)
        if not ticks:
            return [lo, hi]
        return ticks


class CustomTickGenerator:
    """Adapts a plain callable taking the scale into a tick generator."""

    def __init__(self, fn: Callable[["QuantitativeScale"], Sequence[float]]) -> None:
        if not callable(fn):
            raise TypeError("tick generator function must be callable")
        self._fn = fn

    def generate(self, scale: "QuantitativeScale") -> list[float]:
        return [float(v) for v in self._fn(scale)]


def as_tick_generator(
    value: TickGenerator | Callable[["QuantitativeScale"], Sequence[float]],
) -> TickGenerator:
    if isinstance(value, TickGenerator):
        return value
    return CustomTickGenerator(value)
