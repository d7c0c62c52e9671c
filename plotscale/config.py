from __future__ import annotations

from dataclasses import dataclass
import math
import numbers
import os

from plotscale.errors import ConfigurationError, PrecisionError


DEFAULT_LOG_BASE = 10.0
DEFAULT_MINIMUM_NUMBER_OF_TICKS = 4
DEFAULT_TICK_COUNT = 10
DEFAULT_PAD_PROPORTION = 0.05

DEFAULT_PRECISION = 3
DEFAULT_CURRENCY_PRECISION = 2
DEFAULT_PERCENTAGE_PRECISION = 0
DEFAULT_CURRENCY_SYMBOL = "$"
DEFAULT_CURRENCY_PREFIX = True
# Formatters render local time unless told otherwise.
DEFAULT_USE_UTC = False

MIN_PRECISION = 0
MAX_PRECISION = 20


@dataclass(frozen=True)
class ScaleDefaults:
    log_base: float = DEFAULT_LOG_BASE
    minimum_number_of_ticks: int = DEFAULT_MINIMUM_NUMBER_OF_TICKS
    precision: int = DEFAULT_PRECISION
    use_utc: bool = DEFAULT_USE_UTC

    def __post_init__(self) -> None:
        validate_log_base(self.log_base)
        validate_tick_count(self.minimum_number_of_ticks)
        validate_precision(self.precision)

    @classmethod
    def from_env(
        cls,
        *,
        base_env_var: str = "PLOTSCALE_LOG_BASE",
        ticks_env_var: str = "PLOTSCALE_MIN_TICKS",
        precision_env_var: str = "PLOTSCALE_PRECISION",
        utc_env_var: str = "PLOTSCALE_USE_UTC",
    ) -> "ScaleDefaults":
        return cls(
            log_base=_env_float(base_env_var, DEFAULT_LOG_BASE),
            minimum_number_of_ticks=_env_int(ticks_env_var, DEFAULT_MINIMUM_NUMBER_OF_TICKS),
            precision=_env_int(precision_env_var, DEFAULT_PRECISION),
            use_utc=_env_flag(utc_env_var, DEFAULT_USE_UTC),
        )


def validate_precision(precision: object) -> int:
    if isinstance(precision, bool) or not isinstance(precision, numbers.Real):
        raise PrecisionError(f"Formatter precision must be a number, got {precision!r}")
    if precision < MIN_PRECISION or precision > MAX_PRECISION:
        raise PrecisionError(f"Formatter precision must be between {MIN_PRECISION} and {MAX_PRECISION}")
    if precision != math.floor(precision):
        raise PrecisionError("Formatter precision must be an integer")
    return int(precision)


def validate_log_base(base: object) -> float:
    if isinstance(base, bool) or not isinstance(base, numbers.Real):
        raise ConfigurationError(f"log base must be a number, got {base!r}")
    value = float(base)
    if not math.isfinite(value) or value <= 0 or value == 1:
        raise ConfigurationError(f"log base must be finite, > 0 and != 1, got {base!r}")
    return value


def validate_tick_count(count: object) -> int:
    if isinstance(count, bool) or not isinstance(count, numbers.Integral) or count <= 0:
        raise ConfigurationError(f"tick count must be a positive integer, got {count!r}")
    return int(count)


def _env_float(env_var: str, default: float) -> float:
    raw = os.getenv(env_var, "").strip()
    if raw == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{env_var} must be a number, got {raw!r}") from exc


def _env_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var, "").strip()
    if raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{env_var} must be an integer, got {raw!r}") from exc


def _env_flag(env_var: str, default: bool) -> bool:
    raw = os.getenv(env_var, "").strip()
    if raw == "":
        return default
    if raw not in ("0", "1"):
        raise ConfigurationError(f"{env_var} must be 0 or 1, got {raw!r}")
    return raw == "1"
