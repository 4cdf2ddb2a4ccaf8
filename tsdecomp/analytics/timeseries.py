"""
Module `analytics.timeseries` provides the TimeSeries class, which holds an
evenly spaced series together with its seasonal period, cycle offset and the
date anchor used to synthesise its time axis.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import numpy as np
import pandas as pd
from pandas.tseries.frequencies import to_offset

from tsdecomp.core.config import ConfigManager
from tsdecomp.core.logger import Logger
from .decomposition import _check_offset, _check_period, decompose as _decompose
from .preprocessing import ArrayLike, as_float_series, as_frozen
from .results import DecompositionResult

log = Logger.get_logger(__name__)


@dataclass(frozen=True, eq=False)
class TimeSeries:
    """Ordered observations on a regular time step."""

    values: pd.Series
    period: int = ConfigManager.DEFAULT_PERIOD
    offset: int = 0
    start: Optional[pd.Timestamp] = None
    freq: str = ConfigManager.DEFAULT_FREQ
    name: str = "value"
    _dates: Optional[pd.DatetimeIndex] = field(default=None, repr=False)

    def __post_init__(self):
        _check_period(self.period)
        _check_offset(self.offset)
        object.__setattr__(self, "offset", int(self.offset % self.period))
        object.__setattr__(self, "values", as_frozen(self.values))

    @classmethod
    def from_values(
        cls,
        values: ArrayLike,
        period: int = ConfigManager.DEFAULT_PERIOD,
        *,
        start: str | pd.Timestamp | None = None,
        freq: str = ConfigManager.DEFAULT_FREQ,
        offset: int = 0,
        name: str = "value",
    ) -> "TimeSeries":
        """Build a series from plain values and an optional start date."""
        return cls(
            values=as_float_series(values),
            period=period,
            offset=offset,
            start=pd.Timestamp(start) if start is not None else None,
            freq=freq,
            name=name,
        )

    @classmethod
    def from_dataframe(
        cls,
        df: pd.DataFrame,
        value_col: str = ConfigManager.DEFAULT_VALUE_COL,
        date_col: str = ConfigManager.DEFAULT_DATE_COL,
        period: int = ConfigManager.DEFAULT_PERIOD,
        offset: int | None = None,
    ) -> "TimeSeries":
        """
        Create a TimeSeries from a DataFrame with a date column and a value column.

        Rows are sorted by date and the series is anchored at the first date.
        The frequency is inferred from the dates (falling back to month start).
        When ``offset`` is not given and the data is monthly with period 12,
        the offset is the calendar month of the first observation.
        """
        missing = [c for c in (date_col, value_col) if c not in df.columns]
        if missing:
            raise KeyError(f"Missing columns {missing}; available: {list(df.columns)}")

        df_sorted = df[[date_col, value_col]].copy()
        df_sorted[date_col] = pd.to_datetime(df_sorted[date_col])
        df_sorted = df_sorted.sort_values(date_col).reset_index(drop=True)
        dates = pd.DatetimeIndex(df_sorted[date_col])

        freq = pd.infer_freq(dates) if len(dates) >= 3 else None
        if freq is None:
            log.debug("Could not infer frequency for %s, assuming month start", value_col)
            freq = ConfigManager.DEFAULT_FREQ

        if offset is None:
            offset = dates[0].month - 1 if _is_monthly(freq) and period == 12 else 0

        return cls(
            values=as_float_series(df_sorted[value_col]),
            period=period,
            offset=offset,
            start=dates[0],
            freq=freq,
            name=value_col,
            _dates=dates,
        )

    def __len__(self) -> int:
        return len(self.values)

    def dates(self) -> pd.Index:
        """Time axis: one timestamp per observation, or a RangeIndex if undated."""
        if self._dates is not None:
            return self._dates
        if self.start is None:
            return pd.RangeIndex(len(self.values))
        return pd.date_range(self.start, periods=len(self.values), freq=self.freq)

    def to_series(self) -> pd.Series:
        """Return the values as a pandas Series on the time axis."""
        return pd.Series(self.values.to_numpy(copy=True), index=self.dates(), name=self.name)

    def decompose(self, normalize: bool = True) -> DecompositionResult:
        """Decompose with this series' own period and offset."""
        log.debug("Decomposing %s with period %s", self.name, self.period)
        dates = self.dates()
        index = dates if isinstance(dates, pd.DatetimeIndex) else None
        return _decompose(
            self.values,
            self.period,
            offset=self.offset,
            normalize=normalize,
            index=index,
        )

    def to_csv(self, path: str) -> None:
        """Write ``date`` and value columns to CSV."""
        self.to_series().rename_axis("date").reset_index().to_csv(path, index=False)


def _is_monthly(freq: str) -> bool:
    return isinstance(to_offset(freq), (pd.offsets.MonthBegin, pd.offsets.MonthEnd))


def decomp_to_long(
    result: DecompositionResult,
    *,
    series_id: str,
    var: str,
    freq: str,
) -> pd.DataFrame:
    """Convert decomposition components to the long format.

    Parameters
    ----------
    result:
        Decomposition to convert.
    series_id:
        Identifier of the decomposed series.
    var:
        Variable name (e.g., ``"passengers"``).
    freq:
        Frequency label (e.g., ``"monthly"``).

    Returns
    -------
    pandas.DataFrame
        DataFrame with columns ``date, var, stat, value, series_id, freq``;
        ``stat`` is one of ``raw, trend, seasonal, anomaly``.
    """

    dates = result.index if result.index is not None else pd.RangeIndex(len(result))
    wide = pd.DataFrame(
        {
            "date": dates,
            "observed": result.observed.to_numpy(dtype="float64", na_value=np.nan),
            "trend": result.trend.to_numpy(dtype="float64", na_value=np.nan),
            "seasonal": result.seasonal.to_numpy(dtype="float64", na_value=np.nan),
            "resid": result.residual.to_numpy(dtype="float64", na_value=np.nan),
        }
    )
    long_df = wide.melt(id_vars="date", var_name="stat", value_name="value")
    long_df["stat"] = long_df["stat"].map(
        {
            "observed": "raw",
            "trend": "trend",
            "seasonal": "seasonal",
            "resid": "anomaly",
        }
    )
    long_df["var"] = var
    long_df["series_id"] = series_id
    long_df["freq"] = freq
    return long_df[["date", "var", "stat", "value", "series_id", "freq"]]


_FREQ_LABELS = (
    ((pd.offsets.MonthBegin, pd.offsets.MonthEnd), "monthly"),
    ((pd.offsets.QuarterBegin, pd.offsets.QuarterEnd), "quarterly"),
    ((pd.offsets.YearBegin, pd.offsets.YearEnd), "annual"),
    ((pd.offsets.Week,), "weekly"),
    ((pd.offsets.Day, pd.offsets.BusinessDay), "daily"),
    ((pd.offsets.Hour,), "hourly"),
    ((pd.offsets.Minute,), "minutely"),
)


def freq_label(freq: str) -> str:
    """Human-readable label for a pandas frequency string.

    Frequencies without a label (seconds and finer) are returned as the
    pandas alias, e.g. ``"ms"``.
    """
    offset = to_offset(freq)
    for kinds, label in _FREQ_LABELS:
        if isinstance(offset, kinds):
            return label
    return offset.name
