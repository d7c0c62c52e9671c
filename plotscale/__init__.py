from plotscale import formatters
from plotscale.axis import tick_labels
from plotscale.config import ScaleDefaults
from plotscale.errors import ConfigurationError, DomainError, PlotScaleError, PrecisionError
from plotscale.formatters import Formatter
from plotscale.linear import LinearScale
from plotscale.log import LogScale
from plotscale.quantitative import QuantitativeScale
from plotscale.ticks import CustomTickGenerator, LinearTickGenerator, LogTickGenerator, TickGenerator
from plotscale.transforms import LinearTransform, LogTransform, linear_ticks, nice_linear

__all__ = [
    "ConfigurationError",
    "CustomTickGenerator",
    "DomainError",
    "Formatter",
    "LinearScale",
    "LinearTickGenerator",
    "LinearTransform",
    "LogScale",
    "LogTickGenerator",
    "LogTransform",
    "PlotScaleError",
    "PrecisionError",
    "QuantitativeScale",
    "ScaleDefaults",
    "TickGenerator",
    "formatters",
    "linear_ticks",
    "nice_linear",
    "tick_labels",
]
