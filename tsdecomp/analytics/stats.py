# tsdecomp/analytics/stats.py

from typing import Mapping

import numpy as np
import pandas as pd
from scipy.stats import kendalltau, theilslopes

from tsdecomp.core.logger import Logger
from .results import DecompositionResult, StatsResult


logger = Logger.get_logger(__name__)

STATS_COLUMNS = (
    "Series ID",
    "Start Date",
    "End Date",
    "Num Periods",
    "Period",
    "Mean",
    "Seasonal Amplitude",
    "Peak Position",
    "Trough Position",
    "Peak Month",
    "Trend Start",
    "Trend End",
    "Trend Δ",
    "Sen's Slope (per step)",
    "Mann–Kendall p-value",
    "Residual Std",
    "Residual RMS",
    "Reconstruction Error",
)


def _stats_row(result: DecompositionResult, series_id: str) -> dict:
    observed = result.observed.to_numpy(dtype="float64", na_value=np.nan)
    trend = result.trend.to_numpy(dtype="float64", na_value=np.nan)
    resid = result.residual.to_numpy(dtype="float64", na_value=np.nan)
    factors = result.factors.to_numpy(dtype="float64")
    defined = np.isfinite(trend)

    start = end = None
    if isinstance(result.index, pd.DatetimeIndex) and len(result.index):
        start = result.index[0].strftime("%Y-%m")
        end = result.index[-1].strftime("%Y-%m")

    # Seasonal peak as the date of its first occurrence when dated
    peak_pos = int(np.argmax(factors))
    trough_pos = int(np.argmin(factors))
    peak_month = None
    if isinstance(result.index, pd.DatetimeIndex):
        first = (peak_pos - result.offset) % result.period
        if first < len(result.index):
            peak_month = result.index[first].strftime("%b")

    sen_slope = np.nan
    p_value = np.nan
    trend_change = np.nan
    if defined.sum() >= 2:
        t = np.arange(len(trend))[defined]
        y = trend[defined]
        sen_slope, _, _, _ = theilslopes(y, t)
        _, p_value = kendalltau(t, y)
        trend_change = y[-1] - y[0]

    resid_defined = resid[np.isfinite(resid)]
    resid_std = float(np.std(resid_defined, ddof=1)) if len(resid_defined) > 1 else np.nan
    resid_rms = (
        float(np.sqrt(np.mean((resid_defined - 1.0) ** 2))) if len(resid_defined) else np.nan
    )

    return {
        "Series ID": series_id,
        "Start Date": start,
        "End Date": end,
        "Num Periods": len(observed),
        "Period": result.period,
        "Mean": float(np.nanmean(observed)),
        "Seasonal Amplitude": float(factors.max() - factors.min()),
        "Peak Position": peak_pos,
        "Trough Position": trough_pos,
        "Peak Month": peak_month,
        "Trend Start": float(trend[defined][0]) if defined.any() else np.nan,
        "Trend End": float(trend[defined][-1]) if defined.any() else np.nan,
        "Trend Δ": trend_change,
        "Sen's Slope (per step)": sen_slope,
        "Mann–Kendall p-value": p_value,
        "Residual Std": resid_std,
        "Residual RMS": resid_rms,
        "Reconstruction Error": result.reconstruction_error(),
    }


def summarize(result: DecompositionResult, *, series_id: str = "series") -> StatsResult:
    """Summary statistics for one decomposition.

    Residual RMS is measured around 1, the neutral value of a multiplicative
    residual.
    """
    logger.debug("Summarising decomposition for %s", series_id)
    return StatsResult([_stats_row(result, series_id)], columns=STATS_COLUMNS)


def summarize_all(results: Mapping[str, DecompositionResult]) -> StatsResult:
    """One summary row per decomposition, keyed by series id."""
    rows = [_stats_row(res, str(sid)) for sid, res in results.items()]
    if not rows:
        logger.warning("No decompositions to summarise")
    return StatsResult(rows, columns=STATS_COLUMNS)
