"""Cross-check the manual decomposition against statsmodels' built-in routine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

import numpy as np
import pandas as pd
from statsmodels.tsa.seasonal import DecomposeResult, seasonal_decompose

from tsdecomp.core.logger import Logger
from .decomposition import decompose
from .preprocessing import ArrayLike, as_float_series
from .results import DecompositionResult
from .timeseries import TimeSeries

log = Logger.get_logger(__name__)


@dataclass(frozen=True, eq=False)
class ComparisonResult:
    """Both decompositions and the largest absolute gap per component."""

    manual: DecompositionResult
    builtin: DecomposeResult
    differences: Dict[str, float]

    def matches(self, tol: float = 1e-8) -> bool:
        """True when every component agrees within ``tol``."""
        return all(diff <= tol for diff in self.differences.values())

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "component": list(self.differences),
                "max_abs_diff": list(self.differences.values()),
            }
        )


def _max_abs_diff(ours: ArrayLike, theirs: ArrayLike) -> float:
    a = as_float_series(ours).to_numpy()
    b = as_float_series(theirs).to_numpy()
    mask = np.isfinite(a) & np.isfinite(b)
    if not mask.any():
        return float("nan")
    return float(np.max(np.abs(a[mask] - b[mask])))


def compare_with_statsmodels(
    series: ArrayLike | TimeSeries,
    period: int | None = None,
) -> ComparisonResult:
    """Decompose ``series`` both ways and measure how far apart they are.

    statsmodels normalises its seasonal factors, so the manual side runs with
    ``normalize=True``. Differences are taken over indices defined in both.

    Raises:
        ValueError: from statsmodels, for missing or non-positive values or
            fewer than two full cycles.
    """
    if isinstance(series, TimeSeries):
        values, offset = series.values, series.offset
        period = period or series.period
    else:
        values, offset = as_float_series(series), 0
    if period is None:
        raise ValueError("period is required when comparing a plain sequence")

    manual = decompose(values, period, offset=offset, normalize=True)
    builtin = seasonal_decompose(
        values.to_numpy(dtype="float64", copy=True), model="multiplicative", period=period
    )
    differences = {
        "trend": _max_abs_diff(manual.trend, builtin.trend),
        "seasonal": _max_abs_diff(manual.seasonal, builtin.seasonal),
        "residual": _max_abs_diff(manual.residual, builtin.resid),
    }
    log.debug("Differences against statsmodels: %s", differences)
    return ComparisonResult(manual=manual, builtin=builtin, differences=differences)
