from __future__ import annotations

from abc import ABC, abstractmethod
import logging
import math
from typing import Any, Callable, Iterable, Sequence

import numpy as np

from plotscale.config import DEFAULT_PAD_PROPORTION, DEFAULT_TICK_COUNT
from plotscale.errors import ConfigurationError, DomainError
from plotscale.ticks import LinearTickGenerator, TickGenerator, as_tick_generator
from plotscale.transforms import ContinuousTransform


LOGGER = logging.getLogger(__name__)

IncludedValuesProvider = Callable[["QuantitativeScale"], Sequence[float]]


class QuantitativeScale(ABC):
    """Stateful domain <-> range mapping over an owned numeric transform.

    Getter/setter pairs follow one convention: call with no argument to read,
    call with a value to write and get the scale back for chaining.

    A rejected domain raises `DomainError` and leaves the previous domain in
    place.
    """

    def __init__(self, transform: ContinuousTransform) -> None:
        self._transform = transform
        self._tick_generator: TickGenerator = LinearTickGenerator()
        self._pad_proportion = DEFAULT_PAD_PROPORTION
        self._snapping_domain_enabled = True
        self._domain_min: float | None = None
        self._domain_max: float | None = None
        self._auto_domain_automatically = True
        self._included_values_providers: list[IncludedValuesProvider] = []
        self._transformation_limits: tuple[float, float] | None = None

    # -- subclass hooks -------------------------------------------------

    @abstractmethod
    def _default_extent(self) -> tuple[float, float]:
        raise NotImplementedError

    @abstractmethod
    def _expand_single_value_domain(self, domain: tuple[float, float]) -> tuple[float, float]:
        raise NotImplementedError

    @abstractmethod
    def _nice_domain(self, domain: tuple[float, float], count: int | None = None) -> tuple[float, float]:
        raise NotImplementedError

    def _validate_domain(self, domain: tuple[float, float]) -> None:
        if not (math.isfinite(domain[0]) and math.isfinite(domain[1])):
            raise DomainError(f"domain bounds must be finite, got {domain!r}")

    # -- domain / range -------------------------------------------------

    def domain(self, values: Sequence[float] | None = None) -> Any:
        if values is None:
            return self._transform.domain()
        self._auto_domain_automatically = False
        self._set_domain(values)
        return self

    def _set_domain(self, values: Sequence[float]) -> None:
        domain = _coerce_pair(values, "domain")
        self._validate_domain(domain)
        if domain[0] == domain[1]:
            expanded = self._expand_single_value_domain(domain)
            LOGGER.debug("expanded single value domain %r to %r", domain, expanded)
            domain = expanded
            self._validate_domain(domain)
        self._transform.set_domain(domain)

    def range(self, values: Sequence[float] | None = None) -> Any:
        if values is None:
            return self._transform.range()
        self._transform.set_range(_coerce_pair(values, "range"))
        return self

    # -- mapping --------------------------------------------------------

    def scale(self, value: float) -> float:
        return self._transform.scale(value)

    def invert(self, value: float) -> float:
        return self._transform.invert(value)

    def scale_values(self, values: object) -> np.ndarray:
        return self._transform.scale_array(values)

    def invert_values(self, values: object) -> np.ndarray:
        return self._transform.invert_array(values)

    # -- ticks ----------------------------------------------------------

    def tick_generator(self, generator: TickGenerator | Callable | None = None) -> Any:
        if generator is None:
            return self._tick_generator
        self._tick_generator = as_tick_generator(generator)
        return self

    def ticks(self) -> list[float]:
        return list(self._tick_generator.generate(self))

    def default_ticks(self) -> list[float]:
        return self.native_ticks(DEFAULT_TICK_COUNT)

    def native_ticks(self, count: int) -> list[float]:
        """Ticks from the backing transform's own algorithm at `count` density."""
        return self._transform.ticks(count)

    # -- auto domain ----------------------------------------------------

    def add_included_values_provider(self, provider: IncludedValuesProvider) -> Any:
        self._included_values_providers.append(provider)
        self._auto_domain_if_automatic_mode()
        return self

    def remove_included_values_provider(self, provider: IncludedValuesProvider) -> Any:
        self._included_values_providers = [p for p in self._included_values_providers if p is not provider]
        self._auto_domain_if_automatic_mode()
        return self

    def auto_domain(self) -> Any:
        self._auto_domain_automatically = True
        self._set_domain(self._get_extent())
        return self

    def pad_proportion(self, value: float | None = None) -> Any:
        if value is None:
            return self._pad_proportion
        if not math.isfinite(value) or value < 0:
            raise ConfigurationError(f"pad proportion must be a finite number >= 0, got {value!r}")
        self._pad_proportion = float(value)
        self._auto_domain_if_automatic_mode()
        return self

    def snapping_domain_enabled(self, enabled: bool | None = None) -> Any:
        if enabled is None:
            return self._snapping_domain_enabled
        self._snapping_domain_enabled = bool(enabled)
        self._auto_domain_if_automatic_mode()
        return self

    def domain_min(self, value: float | None = None, *, clear: bool = False) -> Any:
        if clear:
            self._domain_min = None
        elif value is None:
            return self._domain_min
        else:
            self._domain_min = self._coerce_bound(value, "domain_min")
        self._auto_domain_if_automatic_mode()
        return self

    def domain_max(self, value: float | None = None, *, clear: bool = False) -> Any:
        if clear:
            self._domain_max = None
        elif value is None:
            return self._domain_max
        else:
            self._domain_max = self._coerce_bound(value, "domain_max")
        self._auto_domain_if_automatic_mode()
        return self

    def extent_of_values(self, values: Iterable[object]) -> list[float]:
        finite = [float(v) for v in values if _is_finite_number(v) and self._accepts_value(float(v))]
        if not finite:
            return []
        return [min(finite), max(finite)]

    def _accepts_value(self, value: float) -> bool:
        return True

    def _coerce_bound(self, value: float, label: str) -> float:
        bound = float(value)
        try:
            self._validate_domain((bound, bound))
        except DomainError as exc:
            raise DomainError(f"{label}: {exc}") from exc
        return bound

    def _auto_domain_if_automatic_mode(self) -> None:
        if self._auto_domain_automatically:
            self.auto_domain()

    def _included_values(self) -> list[float]:
        values: list[float] = []
        for provider in self._included_values_providers:
            values.extend(self.extent_of_values(provider(self)))
        return values

    def _get_unbounded_extent(self, ignore_padding: bool = False) -> tuple[float, float] | None:
        values = self._included_values()
        if not values:
            return None
        extent = (min(values), max(values))
        if extent[0] == extent[1]:
            extent = self._expand_single_value_domain(extent)
        if not ignore_padding:
            extent = self._pad_domain(extent)
        return extent

    def _get_extent(self) -> tuple[float, float]:
        extent = self._get_unbounded_extent()
        if extent is None:
            lo, hi = self._default_extent()
        else:
            lo, hi = extent
            if self._snapping_domain_enabled:
                lo, hi = self._nice_domain((lo, hi))

        if self._domain_min is not None:
            lo = self._domain_min
        if self._domain_max is not None:
            hi = self._domain_max
        if lo > hi:
            # A one-sided bound overtook the data; keep the bound and drop the data side.
            if self._domain_min is not None and self._domain_max is None:
                hi = lo
            elif self._domain_max is not None and self._domain_min is None:
                lo = hi
        return (lo, hi)

    def _pad_domain(self, domain: tuple[float, float]) -> tuple[float, float]:
        if self._pad_proportion == 0 or domain[0] == domain[1]:
            return domain
        p = self._pad_proportion / 2.0
        u0 = self._transform.forward(domain[0])
        u1 = self._transform.forward(domain[1])
        span = u1 - u0
        padded = (self._transform.backward(u0 - span * p), self._transform.backward(u1 + span * p))
        # Padding that overflows the float range or leaves the scale's valid values is skipped.
        if not all(math.isfinite(v) and self._accepts_value(v) for v in padded):
            return domain
        return padded

    # -- transformation (pan / zoom) surface ------------------------------

    def scale_transformation(self, value: float) -> float:
        return self.scale(value)

    def inverted_transformation(self, value: float) -> float:
        return self.invert(value)

    def get_transformation_domain(self) -> tuple[float, float]:
        return self.domain()

    def set_transformation_domain(self, domain: Sequence[float]) -> None:
        self.domain(domain)

    def get_transformation_extent(self) -> tuple[float, float]:
        """Natural limits of the data: the unpadded extent of included values."""
        extent = self._get_unbounded_extent(ignore_padding=True)
        if extent is None:
            return self.domain()
        return extent

    def transformation_limits(self, limits: Sequence[float] | None = None, *, clear: bool = False) -> Any:
        if clear:
            self._transformation_limits = None
            return self
        if limits is None:
            return self._transformation_limits
        pair = _coerce_pair(limits, "transformation limits")
        self._validate_domain(pair)
        self._transformation_limits = (min(pair), max(pair))
        return self

    def set_min_max_domain_values_to_extent(self) -> Any:
        return self.transformation_limits(self.get_transformation_extent())

    def zoom(self, magnify_amount: float, center_value: float) -> Any:
        """Rescale about the range point `center_value`; amounts > 1 zoom out."""
        if not math.isfinite(magnify_amount) or magnify_amount <= 0:
            raise ValueError(f"magnify amount must be a finite number > 0, got {magnify_amount!r}")
        domain = tuple(
            self.inverted_transformation(center_value + (r - center_value) * magnify_amount) for r in self.range()
        )
        self.set_transformation_domain(self._constrain_to_limits(domain))
        return self

    def pan(self, translate_amount: float) -> Any:
        """Shift the domain by `translate_amount` in range units."""
        domain = tuple(self.inverted_transformation(r + translate_amount) for r in self.range())
        self.set_transformation_domain(self._constrain_to_limits(domain))
        return self

    def _constrain_to_limits(self, domain: tuple[float, ...]) -> tuple[float, float]:
        lo, hi = float(domain[0]), float(domain[1])
        if self._transformation_limits is None:
            return (lo, hi)
        reverse = hi < lo
        if reverse:
            lo, hi = hi, lo
        limit_lo, limit_hi = self._transformation_limits
        fwd = self._transform.forward
        back = self._transform.backward
        u_lo, u_hi = fwd(limit_lo), fwd(limit_hi)
        u0, u1 = fwd(lo), fwd(hi)
        width = u1 - u0
        if width >= u_hi - u_lo:
            constrained = (limit_lo, limit_hi)
        elif u0 < u_lo:
            constrained = (limit_lo, back(u_lo + width))
        elif u1 > u_hi:
            constrained = (back(u_hi - width), limit_hi)
        else:
            constrained = (lo, hi)
        if constrained != (lo, hi):
            LOGGER.debug("clamped domain %r to %r within limits %r", (lo, hi), constrained, self._transformation_limits)
        return (constrained[1], constrained[0]) if reverse else constrained


def _coerce_pair(values: Sequence[float], label: str) -> tuple[float, float]:
    if len(values) != 2:
        raise DomainError(f"{label} must have exactly two values, got {len(values)}")
    try:
        return (float(values[0]), float(values[1]))
    except (TypeError, ValueError) as exc:
        raise DomainError(f"{label} values must be numbers, got {values!r}") from exc


def _is_finite_number(value: object) -> bool:
    if isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return False
