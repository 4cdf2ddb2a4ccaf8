"""tsdecomp: classical multiplicative time-series decomposition."""

from tsdecomp.analytics.decomposition import (
    DecompositionError,
    EmptyGroupError,
    InsufficientDataError,
    compute_residual,
    compute_seasonal,
    compute_trend,
    decompose,
    reconstruct,
)
from tsdecomp.analytics.results import DecompositionResult
from tsdecomp.analytics.timeseries import TimeSeries

__version__ = "0.1.0"

__all__ = [
    "DecompositionError",
    "DecompositionResult",
    "EmptyGroupError",
    "InsufficientDataError",
    "TimeSeries",
    "compute_residual",
    "compute_seasonal",
    "compute_trend",
    "decompose",
    "reconstruct",
]
