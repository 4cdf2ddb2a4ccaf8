from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from .preprocessing import ArrayLike, as_float_series, as_nullable


def reconstruct(trend: ArrayLike, seasonal: ArrayLike, residual: ArrayLike) -> pd.Series:
    """Multiply the components back together.

    The product is undefined (``pd.NA``) wherever any component is undefined;
    elsewhere it equals the decomposed input.
    """
    t, s, r = (as_float_series(c) for c in (trend, seasonal, residual))
    if not len(t) == len(s) == len(r):
        raise ValueError(
            f"Component lengths differ: trend={len(t)}, seasonal={len(s)}, residual={len(r)}"
        )
    return as_nullable(t * s * r)


@dataclass(frozen=True, eq=False)
class DecompositionResult:
    """Trend, seasonal and residual components aligned with the observed series.

    ``factors`` holds the ``period`` seasonal factors indexed by cycle
    position; ``seasonal`` is those factors tiled over the series. ``index``
    is the date axis of the input when one is known. Component Series are
    backed by read-only arrays.
    """

    observed: pd.Series
    trend: pd.Series
    seasonal: pd.Series
    residual: pd.Series
    factors: pd.Series
    period: int
    offset: int = 0
    normalized: bool = True
    index: Optional[pd.Index] = None

    def __len__(self) -> int:
        return len(self.observed)

    @property
    def defined(self) -> np.ndarray:
        """Boolean mask of positions where the trend (and so the residual) is defined."""
        return ~self.trend.isna().to_numpy()

    def reconstruct(self) -> pd.Series:
        """Return trend * seasonal * residual."""
        return reconstruct(self.trend, self.seasonal, self.residual)

    def reconstruction_error(self) -> float:
        """Largest absolute gap between the reconstruction and the observed values."""
        rebuilt = as_float_series(self.reconstruct()).to_numpy()
        observed = as_float_series(self.observed).to_numpy()
        mask = np.isfinite(rebuilt) & np.isfinite(observed)
        if not mask.any():
            return 0.0
        return float(np.max(np.abs(rebuilt[mask] - observed[mask])))

    def to_dataframe(self) -> pd.DataFrame:
        """Return the components as columns, with a ``date`` column when dated."""
        df = pd.DataFrame(
            {
                "observed": self.observed.to_numpy(),
                "trend": self.trend.array,
                "seasonal": self.seasonal.array,
                "residual": self.residual.array,
                "reconstructed": self.reconstruct().array,
            }
        )
        if self.index is not None:
            df.insert(0, "date", self.index)
        return df

    def to_csv(self, path: str) -> None:
        """Write the components to CSV."""
        self.to_dataframe().to_csv(path, index=False)


@dataclass
class StatsResult:
    """Summary table with one row per decomposed series.

    ``columns`` fixes the column order of the exported table, so a summary
    of zero decompositions still writes a header.
    """

    rows: List[Dict[str, object]]
    columns: Sequence[str] = ()

    def __len__(self) -> int:
        return len(self.rows)

    def to_dataframe(self) -> pd.DataFrame:
        """Return the statistics as a DataFrame, one row per series."""
        return pd.DataFrame(self.rows, columns=list(self.columns) or None)

    def to_csv(self, path: str) -> None:
        """Write the summary statistics to CSV."""
        self.to_dataframe().to_csv(path, index=False)
