from __future__ import annotations


class PlotScaleError(ValueError):
    pass


class ConfigurationError(PlotScaleError):
    """Invalid construction-time configuration (base, tick count, env override)."""


class PrecisionError(ConfigurationError):
    """Formatter precision outside the integers [0, 20]."""


class DomainError(PlotScaleError):
    """A domain was rejected by the scale it was supplied to."""
