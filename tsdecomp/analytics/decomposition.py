"""
Classical multiplicative decomposition: observed = trend * seasonal * residual.

The trend is a centered moving average over one seasonal cycle, the seasonal
factors are per-position means of the detrended ratios, and the residual is
whatever ratio is left over. Undefined samples (edges of the moving-average
window, division by zero) are ``pd.NA`` in the returned ``Float64`` series.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from tsdecomp.core.logger import Logger
from .preprocessing import (
    ArrayLike,
    as_float_series,
    as_frozen,
    as_nullable,
    broadcast_factors,
)
from .results import DecompositionResult, reconstruct

log = Logger.get_logger(__name__)

__all__ = [
    "DecompositionError",
    "InsufficientDataError",
    "EmptyGroupError",
    "compute_trend",
    "detrend",
    "seasonal_factors",
    "compute_seasonal",
    "compute_residual",
    "decompose",
    "reconstruct",
]


class DecompositionError(Exception):
    """Base class for errors raised while decomposing a series."""


class InsufficientDataError(DecompositionError):
    """Raised when the series is too short to center a moving average."""


class EmptyGroupError(DecompositionError):
    """Raised when a cycle position has no defined detrended observation."""


def _check_period(period: int) -> None:
    if isinstance(period, bool) or not isinstance(period, (int, np.integer)):
        raise ValueError(f"period must be an integer, got {period!r}")
    if period < 1:
        raise ValueError(f"period must be >= 1, got {period}")


def _check_offset(offset: int) -> None:
    if isinstance(offset, bool) or not isinstance(offset, (int, np.integer)):
        raise ValueError(f"offset must be an integer, got {offset!r}")


def _check_lengths(**components: pd.Series) -> None:
    lengths = {name: len(values) for name, values in components.items()}
    if len(set(lengths.values())) > 1:
        detail = ", ".join(f"{k}={v}" for k, v in lengths.items())
        raise ValueError(f"Sequences must have equal length: {detail}")


def compute_trend(series: ArrayLike, period: int) -> pd.Series:
    """Centered moving average over ``period`` observations.

    For even periods the 2xP average is used: the mean of ``period``
    consecutive points, then the mean of adjacent pairs of those means, which
    centres the window on an integer index. The first and last
    ``period // 2`` samples are undefined.

    Raises:
        InsufficientDataError: fewer than ``period + 1`` observations.
    """
    _check_period(period)
    values = as_float_series(series)
    n = len(values)
    if n < period + 1:
        raise InsufficientDataError(
            f"Need at least {period + 1} observations to center a moving average "
            f"of period {period}, got {n}"
        )

    if period % 2 == 0:
        trend = (
            values.rolling(window=period).mean()
            .rolling(window=2).mean()
            .shift(-(period // 2))
        )
    else:
        trend = values.rolling(window=period, center=True).mean()

    log.debug("Computed trend for %d observations with period %d", n, period)
    return as_nullable(trend)


def detrend(series: ArrayLike, trend: ArrayLike) -> pd.Series:
    """Ratio of the series to its trend; undefined where the trend is undefined or zero."""
    values = as_float_series(series)
    tr = as_float_series(trend)
    _check_lengths(series=values, trend=tr)
    with np.errstate(divide="ignore", invalid="ignore"):
        return as_nullable(values / tr)


def seasonal_factors(
    detrended: ArrayLike,
    period: int,
    *,
    offset: int = 0,
    normalize: bool = True,
) -> pd.Series:
    """Mean detrended ratio for each position in the cycle.

    Sample ``i`` belongs to position ``(i + offset) % period``. Undefined
    ratios are skipped. With ``normalize`` the factors are rescaled so their
    mean is 1.

    Returns:
        float64 Series named ``factor`` indexed by position ``0..period-1``.

    Raises:
        EmptyGroupError: some position has no defined ratio.
    """
    _check_period(period)
    _check_offset(offset)
    values = as_float_series(detrended)
    positions = (np.arange(len(values)) + offset) % period
    grouped = values.groupby(positions)

    counts = grouped.count().reindex(range(period), fill_value=0)
    empty = [int(p) for p in counts.index[counts == 0]]
    if empty:
        raise EmptyGroupError(
            f"No defined detrended values at cycle positions {empty} "
            f"(period {period}, {len(values)} observations)"
        )

    factors = grouped.mean().reindex(range(period))
    if normalize:
        factors = factors / factors.mean()
    return as_frozen(factors, index=pd.RangeIndex(period, name="position"), name="factor")


def compute_seasonal(
    series: ArrayLike,
    trend: ArrayLike,
    period: int,
    *,
    offset: int = 0,
    normalize: bool = True,
) -> pd.Series:
    """Seasonal component: per-position factors tiled over the whole series."""
    values = as_float_series(series)
    factors = seasonal_factors(
        detrend(values, trend), period, offset=offset, normalize=normalize
    )
    return broadcast_factors(factors, len(values), offset)


def compute_residual(series: ArrayLike, trend: ArrayLike, seasonal: ArrayLike) -> pd.Series:
    """``series / (trend * seasonal)``; undefined wherever the trend is."""
    values = as_float_series(series)
    tr = as_float_series(trend)
    se = as_float_series(seasonal)
    _check_lengths(series=values, trend=tr, seasonal=se)
    with np.errstate(divide="ignore", invalid="ignore"):
        return as_nullable(values / (tr * se))


def decompose(
    series: ArrayLike,
    period: int,
    *,
    offset: int = 0,
    normalize: bool = True,
    index: pd.Index | None = None,
) -> DecompositionResult:
    """Split ``series`` into trend, seasonal and residual components.

    Args:
        series: ordered observations, one per time step.
        period: observations per seasonal cycle (12 for monthly data).
        offset: cycle position of the first observation.
        normalize: rescale the seasonal factors to mean 1.
        index: optional date axis carried through to the result.
    """
    _check_period(period)
    _check_offset(offset)
    values = as_float_series(series)
    if index is not None and len(index) != len(values):
        raise ValueError(
            f"Index length {len(index)} does not match series length {len(values)}"
        )
    if (values <= 0).any():
        log.warning(
            "Series contains %d non-positive values; multiplicative components "
            "will be undefined or meaningless there",
            int((values <= 0).sum()),
        )
    log.debug(
        "Decomposing %d observations (period=%d, offset=%d, normalize=%s)",
        len(values),
        period,
        offset,
        normalize,
    )

    trend = compute_trend(values, period)
    factors = seasonal_factors(
        detrend(values, trend), period, offset=offset, normalize=normalize
    )
    seasonal = broadcast_factors(factors, len(values), offset)
    residual = compute_residual(values, trend, seasonal)

    return DecompositionResult(
        observed=as_nullable(values),
        trend=trend,
        seasonal=seasonal,
        residual=residual,
        factors=factors,
        period=period,
        offset=offset % period,
        normalized=normalize,
        index=index,
    )
