# tsdecomp/analytics/preprocessing.py
"""Conversions between caller input and the sequences used by the decomposer.

Internally the arithmetic runs on float64 with NaN for missing samples;
everything handed back to callers is a nullable ``Float64`` Series in which an
undefined sample is ``pd.NA``. Returned Series are backed by read-only arrays,
so writing into a component raises instead of changing a stored result.
"""
from typing import Optional, Sequence, Union

import numpy as np
import pandas as pd

ArrayLike = Union[Sequence[float], np.ndarray, pd.Series, pd.api.extensions.ExtensionArray]


def as_float_series(values: ArrayLike) -> pd.Series:
    """Return a writable float64 copy of *values* on a RangeIndex, missing as NaN."""
    if isinstance(values, (pd.Series, pd.api.extensions.ExtensionArray)):
        arr = values.to_numpy(dtype="float64", na_value=np.nan, copy=True)
    elif isinstance(values, np.ndarray):
        arr = values.astype("float64")
    else:
        arr = np.asarray(
            [np.nan if v is None or v is pd.NA else v for v in values], dtype="float64"
        )
    if arr.ndim != 1:
        raise ValueError(f"Expected a one-dimensional sequence, got shape {arr.shape}")
    return pd.Series(arr)


def _read_only(arr: np.ndarray) -> np.ndarray:
    arr.flags.writeable = False
    return arr


def as_frozen(
    values: ArrayLike, *, index: Optional[pd.Index] = None, name: Optional[str] = None
) -> pd.Series:
    """Return *values* as a float64 Series backed by a read-only array."""
    arr = _read_only(as_float_series(values).to_numpy(copy=True))
    return pd.Series(arr, index=index, name=name, copy=False)


def as_nullable(values: ArrayLike) -> pd.Series:
    """Return *values* as a read-only ``Float64`` Series; NaN and ±inf become ``pd.NA``."""
    arr = as_float_series(values).to_numpy()
    mask = ~np.isfinite(arr)
    data = np.where(mask, 0.0, arr)
    return pd.Series(
        pd.arrays.FloatingArray(_read_only(data), _read_only(mask)), copy=False
    )


def broadcast_factors(factors: pd.Series, length: int, offset: int = 0) -> pd.Series:
    """Tile per-position factors over *length* samples starting at *offset*."""
    period = len(factors)
    positions = (np.arange(length) + offset) % period
    return as_nullable(factors.to_numpy(dtype="float64")[positions])
