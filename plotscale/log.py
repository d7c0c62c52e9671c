from __future__ import annotations

from plotscale.config import (
    DEFAULT_LOG_BASE,
    DEFAULT_MINIMUM_NUMBER_OF_TICKS,
    ScaleDefaults,
    validate_log_base,
    validate_tick_count,
)
from plotscale.errors import DomainError
from plotscale.quantitative import QuantitativeScale
from plotscale.ticks import LogTickGenerator
from plotscale.transforms import LogTransform


class LogScale(QuantitativeScale):
    """Logarithmic scale over a strictly positive domain.

    Ticks are powers of the base while the domain spans at least
    `minimum_number_of_ticks` of them, otherwise the transform's denser
    k * base**i ticks. A single-valued domain (v, v) widens to
    (v / base, v * base), leaving v at the geometric midpoint.
    """

    def __init__(
        self,
        base: float = DEFAULT_LOG_BASE,
        minimum_number_of_ticks: int = DEFAULT_MINIMUM_NUMBER_OF_TICKS,
    ) -> None:
        self._base = validate_log_base(base)
        self._minimum_number_of_ticks = validate_tick_count(minimum_number_of_ticks)
        super().__init__(LogTransform(base=self._base))
        self._set_domain(self._default_extent())
        self.tick_generator(LogTickGenerator(self._base, self._minimum_number_of_ticks))

    @classmethod
    def from_defaults(cls, defaults: ScaleDefaults | None = None) -> "LogScale":
        """Build from `defaults`, or from the PLOTSCALE_* environment when omitted."""
        resolved = defaults if defaults is not None else ScaleDefaults.from_env()
        return cls(base=resolved.log_base, minimum_number_of_ticks=resolved.minimum_number_of_ticks)

    @property
    def base(self) -> float:
        return self._base

    @property
    def minimum_number_of_ticks(self) -> int:
        return self._minimum_number_of_ticks

    def _default_extent(self) -> tuple[float, float]:
        return (1.0, self._base)

    def _expand_single_value_domain(self, domain: tuple[float, float]) -> tuple[float, float]:
        if domain[0] == domain[1]:
            return (domain[0] / self._base, domain[1] * self._base)
        return domain

    def _validate_domain(self, domain: tuple[float, float]) -> None:
        super()._validate_domain(domain)
        if domain[0] <= 0 or domain[1] <= 0:
            raise DomainError(f"log scale domain bounds must be > 0, got {domain!r}")

    def _nice_domain(self, domain: tuple[float, float], count: int | None = None) -> tuple[float, float]:
        transform = self._transform.copy()
        transform.set_domain(domain)
        return transform.nice()

    def _accepts_value(self, value: float) -> bool:
        # Non-positive values have no position on a log axis.
        return value > 0
