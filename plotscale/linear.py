from __future__ import annotations

from plotscale.config import DEFAULT_TICK_COUNT
from plotscale.quantitative import QuantitativeScale
from plotscale.transforms import LinearTransform


class LinearScale(QuantitativeScale):
    def __init__(self) -> None:
        super().__init__(LinearTransform())
        self._set_domain(self._default_extent())

    def _default_extent(self) -> tuple[float, float]:
        return (0.0, 1.0)

    def _expand_single_value_domain(self, domain: tuple[float, float]) -> tuple[float, float]:
        if domain[0] == domain[1]:
            return (domain[0] - 1.0, domain[1] + 1.0)
        return domain

    def _nice_domain(self, domain: tuple[float, float], count: int | None = None) -> tuple[float, float]:
        transform = self._transform.copy()
        transform.set_domain(domain)
        return transform.nice(DEFAULT_TICK_COUNT if count is None else count)
